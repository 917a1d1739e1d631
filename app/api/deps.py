from typing import Optional

from fastapi import Depends, Query, Request
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.errors import Forbidden, Unauthorized
from app.core.security import TOKEN_TYPE_STUDENT, TOKEN_TYPE_USER, decode_access_token
from app.db.session import SessionLocal
from app.models import Student, User, UserRole
from app.schemas.common import PaginationParams


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_token(request: Request) -> Optional[str]:
    """Session token from the cookie, falling back to an ``Authorization: Bearer`` header."""
    token = request.cookies.get(get_settings().session_cookie_name)
    if token:
        return token
    authorization = request.headers.get("authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return None


def get_token_payload(request: Request) -> Optional[dict]:
    token = get_token(request)
    if not token:
        return None
    return decode_access_token(token)


def require_auth(request: Request, db: Session = Depends(get_db)) -> User:
    payload = get_token_payload(request)
    if payload is None or payload.get("type") != TOKEN_TYPE_USER:
        raise Unauthorized()
    user = db.get(User, payload["sub"])
    if user is None:
        raise Unauthorized()
    return user


def require_super_admin(user: User = Depends(require_auth)) -> User:
    if user.role != UserRole.SUPER_ADMIN:
        raise Forbidden("Bu işlem için süper admin yetkisi gerekli")
    return user


def require_teacher(user: User = Depends(require_auth)) -> User:
    if user.role != UserRole.TEACHER:
        raise Forbidden("Bu işlem için öğretmen yetkisi gerekli")
    return user


def require_student(request: Request, db: Session = Depends(get_db)) -> Student:
    payload = get_token_payload(request)
    if payload is None or payload.get("type") != TOKEN_TYPE_STUDENT:
        raise Unauthorized()
    student = db.get(Student, payload["sub"])
    if student is None:
        raise Unauthorized()
    return student


def get_optional_actor(request: Request, db: Session = Depends(get_db)):
    """The signed-in teacher/admin or student, or None."""
    payload = get_token_payload(request)
    if payload is None:
        return None
    if payload.get("type") == TOKEN_TYPE_USER:
        return db.get(User, payload["sub"])
    if payload.get("type") == TOKEN_TYPE_STUDENT:
        return db.get(Student, payload["sub"])
    return None


def ensure_owner(user: User, owner_id: Optional[str], message: str = "Bu kayda erişim izniniz yok") -> None:
    if user.is_super_admin:
        return
    if owner_id != user.id:
        raise Forbidden(message)


def get_pagination(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
) -> PaginationParams:
    return PaginationParams(page=page, limit=limit)
