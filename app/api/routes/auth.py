import logging

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from app.api.deps import get_db, require_auth, require_teacher
from app.core.config import get_settings
from app.core.csrf import generate_csrf_token, get_csrf_token, require_csrf, set_csrf_cookie
from app.core.errors import BadRequest, Forbidden, Unauthorized
from app.core.rate_limit import RateLimitPresets, require_rate_limit
from app.core.security import create_access_token, hash_password, verify_password
from app.models import User, UserRole
from app.schemas.auth import (
    CsrfTokenOut,
    LoginOut,
    LoginRequest,
    PasswordChange,
    PasswordChangeOut,
    ProfileUpdate,
    UserOut,
)
from app.schemas.common import SuccessOut

logger = logging.getLogger(__name__)

router = APIRouter()
settings = get_settings()


@router.get("/auth/csrf", response_model=CsrfTokenOut)
def csrf_token(request: Request, response: Response):
    token = get_csrf_token(request)
    if token is None:
        token = generate_csrf_token()
        set_csrf_cookie(response, token)
    return {"csrfToken": token}


@router.post(
    "/auth/login",
    response_model=LoginOut,
    dependencies=[Depends(require_rate_limit(RateLimitPresets.AUTH)), Depends(require_csrf)],
)
def login(payload: LoginRequest, response: Response, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == payload.email).first()
    if not user or not user.password or not verify_password(payload.password, user.password):
        logger.warning("Failed login for %s", payload.email)
        raise Unauthorized("Geçersiz e-posta veya şifre")

    if user.role == UserRole.TEACHER and not user.is_subscription_active:
        logger.warning("Login refused for %s: subscription expired", payload.email)
        raise Forbidden("Abonelik süresi dolmuş")

    token = create_access_token(subject=user.id, role=user.role.value)
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.access_token_expire_minutes * 60,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )
    logger.info("User %s logged in", user.email)
    return {"token": token, "user": user}


@router.post("/auth/logout", response_model=SuccessOut, dependencies=[Depends(require_csrf)])
def logout(response: Response):
    response.delete_cookie(settings.session_cookie_name, path="/")
    return {"success": True}


@router.get(
    "/auth/me",
    response_model=UserOut,
    dependencies=[Depends(require_rate_limit(RateLimitPresets.LENIENT))],
)
def me(user: User = Depends(require_auth)):
    return user


@router.put(
    "/auth/profile",
    response_model=UserOut,
    dependencies=[Depends(require_rate_limit(RateLimitPresets.STRICT)), Depends(require_csrf)],
)
def update_profile(
    payload: ProfileUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(require_teacher),
):
    user.name = payload.name.strip()
    db.commit()
    db.refresh(user)
    return user


@router.put(
    "/auth/password",
    response_model=PasswordChangeOut,
    dependencies=[Depends(require_rate_limit(RateLimitPresets.STRICT)), Depends(require_csrf)],
)
def change_password(
    payload: PasswordChange,
    db: Session = Depends(get_db),
    user: User = Depends(require_auth),
):
    if not verify_password(payload.current_password, user.password):
        raise BadRequest("Mevcut şifre hatalı")
    user.password = hash_password(payload.new_password)
    db.commit()
    logger.info("Password changed for %s", user.email)
    return {"success": True, "message": "Şifre güncellendi"}
