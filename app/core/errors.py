"""Error types raised by guards and handlers, and the handlers that render them.

Every error leaves the API as ``{"error": <message>, "details": <details>}``
with the status code of the error kind.
"""
import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.schemas.common import format_validation_errors

logger = logging.getLogger(__name__)


class ApiError(Exception):
    status_code = 500
    default_message = "İşlem başarısız oldu"

    def __init__(
        self,
        message: Optional[str] = None,
        details: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        self.message = message or self.default_message
        self.details = details
        self.headers = headers or {}
        super().__init__(self.message)


class ValidationFailed(ApiError):
    status_code = 400
    default_message = "Doğrulama hatası"

    def __init__(self, errors: Any, message: Optional[str] = None) -> None:
        super().__init__(message, details=errors)
        self.errors = errors


class BadRequest(ApiError):
    status_code = 400
    default_message = "Geçersiz istek"


class Unauthorized(ApiError):
    status_code = 401
    default_message = "Yetkilendirme gerekli"


class Forbidden(ApiError):
    status_code = 403
    default_message = "Bu işlem için yetkiniz yok"


class NotFound(ApiError):
    status_code = 404
    default_message = "Kayıt bulunamadı"


class Conflict(ApiError):
    status_code = 409
    default_message = "Bu kayıt zaten mevcut"


class RateLimited(ApiError):
    status_code = 429
    default_message = "Too many requests"


def error_response(
    message: str,
    status_code: int,
    details: Any = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": message, "details": details},
        headers=headers,
    )


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return error_response(exc.message, exc.status_code, exc.details, exc.headers or None)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(
        ValidationFailed.default_message,
        ValidationFailed.status_code,
        format_validation_errors(exc.errors()),
    )


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning("Integrity error on %s %s: %s", request.method, request.url.path, exc.orig)
    return error_response(Conflict.default_message, 409, "Unique constraint violation")


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return error_response("Veritabanı hatası oluştu", 500, str(exc))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(ApiError.default_message, 500, str(exc) or exc.__class__.__name__)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
