"""
Rate limiting for the Dental Supply API
Uses in-memory storage with a sliding window, per process
"""
import time
from collections import defaultdict
from typing import Dict, List, Tuple

from fastapi import Request, status
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from dental_supply.core.config import settings

WINDOW_SECONDS = 60

# Paths that are exempt from rate limiting
EXEMPT_PATHS = {
    "/",
    "/health",
    "/docs",
    "/openapi.json",
    "/redoc",
}


class RateLimiter:
    """
    Sliding-window request counter keyed by client identifier.
    """

    def __init__(self, clock=time.monotonic, cleanup_interval: int = WINDOW_SECONDS):
        self._clock = clock
        self._hits: Dict[str, List[float]] = defaultdict(list)
        self._last_cleanup = clock()
        self._cleanup_interval = cleanup_interval

    def _cleanup_old_entries(self, now: float, window_seconds: int):
        """Drop identifiers whose hits all fall outside the window"""
        if now - self._last_cleanup < self._cleanup_interval:
            return

        window_start = now - window_seconds
        for identifier in list(self._hits.keys()):
            if not any(ts > window_start for ts in self._hits[identifier]):
                del self._hits[identifier]

        self._last_cleanup = now

    def is_allowed(self, identifier: str, max_requests: int, window_seconds: int = WINDOW_SECONDS) -> Tuple[bool, int, int]:
        """
        Record a hit for `identifier` if it is under the limit.

        Returns:
            Tuple of (is_allowed, remaining_requests, retry_after_seconds)
        """
        now = self._clock()
        self._cleanup_old_entries(now, window_seconds)
        window_start = now - window_seconds

        hits = [ts for ts in self._hits[identifier] if ts > window_start]

        if len(hits) >= max_requests:
            self._hits[identifier] = hits
            retry_after = int(hits[0] + window_seconds - now) + 1
            return False, 0, retry_after

        hits.append(now)
        self._hits[identifier] = hits
        return True, max_requests - len(hits), 0

    def reset(self):
        self._hits.clear()


# Global rate limiter instance
rate_limiter = RateLimiter()


def client_ip(request: Request) -> str:
    """Client IP, first X-Forwarded-For hop when proxied"""
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    if request.client:
        return request.client.host

    return "unknown"


def client_identifier(request: Request, bucket: str = "api") -> str:
    """
    Bearer token if present, else the client IP.

    The "auth" bucket (login, register) is always keyed by IP.
    """
    auth_header = request.headers.get("Authorization")
    if bucket != "auth" and auth_header and auth_header.startswith("Bearer "):
        return f"jwt:{hash(auth_header)}"

    return f"ip:{client_ip(request)}"


def _limit_for(path: str) -> Tuple[str, int]:
    # Credential endpoints get a tighter, separate bucket
    if path.startswith(f"{settings.API_PREFIX}/auth/login") or path.startswith(f"{settings.API_PREFIX}/auth/register"):
        return "auth", settings.AUTH_RATE_LIMIT_PER_MINUTE
    return "api", settings.RATE_LIMIT_PER_MINUTE


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Middleware that rejects clients exceeding their per-minute limit.

    Headers returned:
    - X-RateLimit-Limit: Maximum requests per window
    - X-RateLimit-Remaining: Remaining requests in current window
    - Retry-After: Seconds until a request will be accepted (when limited)
    """

    async def dispatch(self, request: Request, call_next):
        if request.url.path in EXEMPT_PATHS or request.method == "OPTIONS":
            return await call_next(request)

        bucket, limit = _limit_for(request.url.path)
        identifier = f"{bucket}:{client_identifier(request, bucket)}"

        is_allowed, remaining, retry_after = rate_limiter.is_allowed(identifier, limit)

        if not is_allowed:
            # Returned rather than raised so the response still passes through CORS
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={"message": "Too many requests, please slow down"},
                headers={
                    "X-RateLimit-Limit": str(limit),
                    "X-RateLimit-Remaining": "0",
                    "Retry-After": str(retry_after),
                }
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(limit)
        response.headers["X-RateLimit-Remaining"] = str(remaining)
        return response
