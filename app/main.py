import logging

import uvicorn
from fastapi import FastAPI
from starlette.middleware.base import BaseHTTPMiddleware

from app.api.routes import (
    auth,
    lessons,
    resources,
    student_assignments,
    student_progress,
    students,
    teachers,
    topics,
    weekly_schedules,
)
from app.core.config import get_settings
from app.core.csrf import CsrfCookieMiddleware
from app.core.errors import register_exception_handlers

settings = get_settings()

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


class UTF8Middleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        response = await call_next(request)
        if response.headers.get("content-type", "").startswith("application/json"):
            response.headers["Content-Type"] = "application/json; charset=utf-8"
        return response


app = FastAPI(title=settings.project_name)

app.add_middleware(UTF8Middleware)
app.add_middleware(CsrfCookieMiddleware)

register_exception_handlers(app)

for module in (
    auth,
    lessons,
    topics,
    students,
    resources,
    student_assignments,
    student_progress,
    weekly_schedules,
    teachers,
):
    app.include_router(module.router, prefix="/api")


@app.get("/api/health")
def health() -> dict:
    return {"status": "ok"}


def run() -> None:
    uvicorn.run("app.main:app", host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
