from __future__ import annotations

import time

from fastapi import Request
from redis.exceptions import RedisError
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, Response

from localconnect.core.config import settings
from localconnect.redis_client import get_redis

_WINDOWS = {
    "sec": 1,
    "second": 1,
    "seconds": 1,
    "min": 60,
    "minute": 60,
    "minutes": 60,
    "hour": 3600,
    "hours": 3600,
    "day": 86400,
    "days": 86400,
}


def parse_rate(rate: str) -> tuple[int, int]:
    """
    Parse formats like:
      - "60/minute"
      - "120/hour"
      - "10/second"
    Returns: (limit, window_seconds)
    """
    raw = rate.strip().lower()
    if "/" not in raw:
        raise ValueError(f"Invalid rate format: {rate}")

    limit_str, window_str = raw.split("/", 1)
    limit = int(limit_str)
    if limit < 1:
        raise ValueError(f"Invalid rate limit: {rate}")

    window_str = window_str.strip()
    if window_str not in _WINDOWS:
        raise ValueError(f"Invalid rate window: {window_str}")
    return limit, _WINDOWS[window_str]


def client_identity(request: Request) -> str:
    forwarded = request.headers.get("X-Forwarded-For", "")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def is_exempt(path: str) -> bool:
    return any(path == p or path.startswith(p.rstrip("/") + "/") for p in settings.rate_limit_exempt_paths)


class RateLimitMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        if not settings.rate_limit_enabled:
            return await call_next(request)

        # Don’t rate-limit CORS preflight
        if request.method == "OPTIONS":
            return await call_next(request)

        path = request.url.path
        if is_exempt(path):
            return await call_next(request)

        try:
            limit, window_seconds = parse_rate(settings.rate_limit_default)
        except ValueError:
            # Misconfigured rate => fail open
            return await call_next(request)

        now = int(time.time())
        bucket = now // window_seconds

        # Include method+path to reduce accidental cross-endpoint coupling
        key = f"rl:{client_identity(request)}:{request.method}:{path}:{window_seconds}:{bucket}"

        try:
            r = get_redis()
            count = r.incr(key)
            if count == 1:
                r.expire(key, window_seconds)
        except RedisError:
            # Fail open if Redis is unavailable (don’t take down the API)
            return await call_next(request)

        remaining = max(0, limit - int(count))
        reset = (bucket + 1) * window_seconds

        if count > limit:
            return JSONResponse(
                status_code=429,
                content={"detail": "rate limit exceeded"},
                headers={
                    "X-RateLimit-Limit": str(limit),
                    "X-RateLimit-Remaining": "0",
                    "X-RateLimit-Reset": str(reset),
                    "Retry-After": str(max(0, reset - now)),
                },
            )

        response = await call_next(request)
        response.headers.setdefault("X-RateLimit-Limit", str(limit))
        response.headers.setdefault("X-RateLimit-Remaining", str(remaining))
        response.headers.setdefault("X-RateLimit-Reset", str(reset))
        return response
