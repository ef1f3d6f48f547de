"""
Rate Limiting Middleware

Fixed-window request counter per tenant, kept in Redis.

Requests are attributed to the tenant named in the bearer token (or
"platform" for super-admins), falling back to the client address for
anonymous calls. The token is only decoded here, not verified against
the database; the protect gate still does that.

If Redis is unreachable the limiter lets requests through and logs the
failure.
"""
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from typing import Optional, Tuple
import redis
import time
import logging

from projectdesk.core.exceptions import RateLimitExceeded
from projectdesk.core.security import decode_access_token

logger = logging.getLogger(__name__)

WINDOW_SECONDS = 60


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Per-tenant fixed-window limiter."""

    def __init__(self, app, redis_url: str, limit_per_minute: int, redis_client: Optional[redis.Redis] = None):
        super().__init__(app)
        self.limit_per_minute = limit_per_minute
        self.redis_client = redis_client if redis_client is not None else redis.from_url(
            redis_url,
            decode_responses=True,
            socket_connect_timeout=5
        )

        self.excluded_paths = [
            "/docs",
            "/redoc",
            "/openapi.json",
            "/health",
        ]

    async def dispatch(self, request: Request, call_next):
        if any(request.url.path.startswith(path) for path in self.excluded_paths):
            return await call_next(request)

        identifier = self._get_client_identifier(request)
        allowed, retry_after = self._check_rate_limit(identifier)

        if not allowed:
            logger.warning(
                f"Rate limit exceeded for {identifier}",
                extra={"path": request.url.path}
            )
            exc = RateLimitExceeded(retry_after=retry_after)
            return JSONResponse(
                status_code=exc.status_code,
                content={"detail": exc.detail, "retry_after": retry_after},
                headers=exc.headers
            )

        return await call_next(request)

    def _check_rate_limit(self, identifier: str) -> Tuple[bool, int]:
        """Returns (allowed, retry_after_seconds)."""
        now = time.time()
        window = int(now // WINDOW_SECONDS)
        key = f"rate_limit:{identifier}:{window}"

        # MULTI/EXEC so a key never outlives its window without a TTL
        try:
            pipe = self.redis_client.pipeline()
            pipe.incr(key)
            pipe.expire(key, WINDOW_SECONDS, nx=True)
            count, _ = pipe.execute()
        except redis.RedisError as e:
            logger.error(f"Redis error in rate limiting: {e}")
            return True, 0

        if count > self.limit_per_minute:
            retry_after = int(WINDOW_SECONDS - (now % WINDOW_SECONDS)) + 1
            return False, retry_after
        return True, 0

    def _get_client_identifier(self, request: Request) -> str:
        auth_header = request.headers.get("Authorization", "")
        if auth_header.startswith("Bearer "):
            payload = decode_access_token(auth_header[len("Bearer "):], request.app.state.settings)
            if payload:
                return f"tenant:{payload.get('tenant_id') or 'platform'}"

        client_host = request.client.host if request.client else "unknown"
        return f"ip:{client_host}"
