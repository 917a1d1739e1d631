from datetime import datetime, timedelta
from typing import Optional

import bcrypt
from jose import JWTError, jwt

from app.core.config import get_settings

TOKEN_TYPE_USER = "user"
TOKEN_TYPE_STUDENT = "student"


def hash_password(password: str) -> str:
    pw = password.encode("utf-8")
    salt = bcrypt.gensalt(rounds=12)
    return bcrypt.hashpw(pw, salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    if not hashed_password:
        return False
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"),
            hashed_password.encode("utf-8"),
        )
    except ValueError:
        # stored value is not a bcrypt hash
        return False


def create_access_token(
    subject: str,
    role: str,
    token_type: str = TOKEN_TYPE_USER,
    expires_delta: Optional[timedelta] = None,
) -> str:
    settings = get_settings()
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))
    payload = {"sub": subject, "role": role, "type": token_type, "exp": expire}
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def create_student_token(student_id: str, email: Optional[str], name: str) -> str:
    settings = get_settings()
    expire = datetime.utcnow() + timedelta(days=settings.student_token_expire_days)
    payload = {
        "sub": student_id,
        "email": email,
        "name": name,
        "role": "STUDENT",
        "type": TOKEN_TYPE_STUDENT,
        "exp": expire,
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> Optional[dict]:
    """Return the token payload, or None when the signature or expiry is invalid."""
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None
    if not payload.get("sub") or not payload.get("type"):
        return None
    return payload
