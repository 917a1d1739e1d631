"""In-memory fixed-window rate limiting keyed by client IP and path.

Counters live in this process only; several workers each keep their own.
"""
import logging
import math
import time
from dataclasses import dataclass
from typing import Dict

from fastapi import Request, Response

from app.core.config import get_settings
from app.core.errors import RateLimited

logger = logging.getLogger(__name__)

CLEANUP_INTERVAL_SECONDS = 5 * 60


@dataclass(frozen=True)
class RateLimitConfig:
    max_requests: int
    window_seconds: int
    message: str = "Too many requests"


class RateLimitPresets:
    AUTH = RateLimitConfig(max_requests=5, window_seconds=15 * 60, message="Too many login attempts")
    STANDARD = RateLimitConfig(max_requests=100, window_seconds=60)
    STRICT = RateLimitConfig(max_requests=30, window_seconds=60)
    LENIENT = RateLimitConfig(max_requests=300, window_seconds=60)


@dataclass
class RateLimitEntry:
    count: int
    reset_time: float


_store: Dict[str, RateLimitEntry] = {}
_last_cleanup = time.time()


def get_client_ip(request: Request) -> str:
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first
    for header in ("x-real-ip", "cf-connecting-ip"):
        value = request.headers.get(header)
        if value:
            return value
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def get_identifier(request: Request) -> str:
    return f"{get_client_ip(request)}:{request.url.path}"


def _purge_expired(now: float) -> None:
    global _last_cleanup
    if now - _last_cleanup < CLEANUP_INTERVAL_SECONDS:
        return
    for key in [key for key, entry in _store.items() if entry.reset_time < now]:
        _store.pop(key, None)
    _last_cleanup = now


def check_rate_limit(request: Request, config: RateLimitConfig) -> None:
    """Count the request against its window, raising RateLimited once over the limit."""
    if not get_settings().rate_limit_enabled:
        return

    now = time.time()
    _purge_expired(now)
    identifier = get_identifier(request)
    entry = _store.get(identifier)

    if entry is None or entry.reset_time < now:
        _store[identifier] = RateLimitEntry(count=1, reset_time=now + config.window_seconds)
        return

    entry.count += 1
    if entry.count > config.max_requests:
        retry_after = max(1, math.ceil(entry.reset_time - now))
        logger.warning("Rate limit exceeded for %s (%d/%d)", identifier, entry.count, config.max_requests)
        raise RateLimited(
            config.message,
            details=f"Rate limit exceeded. Try again in {retry_after} seconds.",
            headers={
                "X-RateLimit-Limit": str(config.max_requests),
                "X-RateLimit-Remaining": "0",
                "X-RateLimit-Reset": str(int(entry.reset_time)),
                "Retry-After": str(retry_after),
            },
        )


def add_rate_limit_headers(response: Response, request: Request, config: RateLimitConfig) -> Response:
    entry = _store.get(get_identifier(request))
    if entry is not None:
        response.headers["X-RateLimit-Limit"] = str(config.max_requests)
        response.headers["X-RateLimit-Remaining"] = str(max(0, config.max_requests - entry.count))
        response.headers["X-RateLimit-Reset"] = str(int(entry.reset_time))
    return response


def require_rate_limit(config: RateLimitConfig):
    """Build a route dependency that enforces ``config`` and sets the informational headers."""

    def dependency(request: Request, response: Response) -> None:
        check_rate_limit(request, config)
        add_rate_limit_headers(response, request, config)

    return dependency


def clear_rate_limit_store() -> None:
    _store.clear()


def get_rate_limit_stats() -> dict:
    return {
        "totalEntries": len(_store),
        "entries": [
            {"identifier": identifier, "count": entry.count, "resetTime": entry.reset_time}
            for identifier, entry in list(_store.items())
        ],
    }
