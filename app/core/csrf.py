"""Double-submit cookie CSRF protection.

The server issues a random token in the ``csrf-token`` cookie; browsers send
it back in the ``x-csrf-token`` header on every write. A cross-site page can
make the browser send the cookie but cannot read it to fill the header.
"""
import logging
import secrets
from typing import Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from app.core.config import get_settings
from app.core.errors import Forbidden

logger = logging.getLogger(__name__)

TOKEN_LENGTH = 32
SAFE_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})


def generate_csrf_token() -> str:
    return secrets.token_hex(TOKEN_LENGTH)


def get_csrf_token(request: Request) -> Optional[str]:
    return request.cookies.get(get_settings().csrf_cookie_name) or None


def validate_csrf_token(request: Request) -> bool:
    if request.method.upper() in SAFE_METHODS:
        return True

    settings = get_settings()
    cookie_token = request.cookies.get(settings.csrf_cookie_name)
    header_token = request.headers.get(settings.csrf_header_name)
    if not cookie_token or not header_token:
        return False
    return secrets.compare_digest(cookie_token, header_token)


def require_csrf(request: Request) -> None:
    if not validate_csrf_token(request):
        logger.warning("CSRF validation failed for %s %s", request.method, request.url.path)
        raise Forbidden("CSRF token validation failed", details="Invalid or missing CSRF token")


def set_csrf_cookie(response: Response, token: str) -> None:
    settings = get_settings()
    response.set_cookie(
        key=settings.csrf_cookie_name,
        value=token,
        max_age=settings.csrf_cookie_max_age,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )


class CsrfCookieMiddleware(BaseHTTPMiddleware):
    """Issue a CSRF cookie on responses to clients that do not have one yet.

    ``GET /api/auth/csrf`` sets the cookie itself so the token in the body
    matches; the middleware leaves responses that already set it alone.
    """

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        if get_csrf_token(request) is None:
            cookie_name = get_settings().csrf_cookie_name
            already_set = any(
                value.startswith(f"{cookie_name}=")
                for value in response.headers.getlist("set-cookie")
            )
            if not already_set:
                set_csrf_cookie(response, generate_csrf_token())
        return response

