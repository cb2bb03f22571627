"""Middleware applying the global rate limit to API routes."""

import logging
from typing import Callable, Optional

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from agroclima.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Muitas requisições. Tente novamente em instantes."


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Answer 429 with ``Retry-After`` once the global limit is reached.

    The limiter is owned by the application lifespan and read from
    ``app.state.rate_limiter``; without one, requests pass through.
    """

    BYPASS_PATHS = {
        "/api/health",
        "/docs",
        "/redoc",
        "/openapi.json",
        "/favicon.ico",
    }

    def __init__(self, app, rate_limiter: Optional[RateLimiter] = None):
        """Initialize rate limit middleware.

        Args:
            app: ASGI application
            rate_limiter: Fixed limiter; overrides the one on app.state
        """
        super().__init__(app)
        self.rate_limiter = rate_limiter

    def _limiter_for(self, request: Request) -> Optional[RateLimiter]:
        if self.rate_limiter is not None:
            return self.rate_limiter
        return getattr(request.app.state, "rate_limiter", None)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Check the limit before handing the request on."""
        limiter = self._limiter_for(request)
        if limiter is None or request.url.path in self.BYPASS_PATHS:
            return await call_next(request)

        is_allowed, retry_after = await limiter.is_allowed()

        if not is_allowed:
            request_host = request.client.host if request.client else "unknown"
            logger.warning(f"Rate limit exceeded for {request_host} accessing {request.method} {request.url.path}")
            return JSONResponse(
                status_code=429,
                content={"error": RATE_LIMIT_MESSAGE, "retry_after": retry_after},
                headers={"Retry-After": str(retry_after)}
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(limiter.max_requests)
        response.headers["X-RateLimit-Window"] = f"{limiter.window_seconds:g}"
        return response
