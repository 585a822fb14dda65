"""
Request middleware for logging, timing, request ID tracking and per-IP
rate limiting.
"""

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from airline.api.errors import error_envelope
from airline.core.config import get_settings
from airline.core.errors import RateLimitError
from airline.core.logging import get_logger
from airline.core.metrics import record_rate_limited
from airline.services.cache_service import hit_rate_limit

logger = get_logger(__name__)

AUTH_PREFIX = "/api/v1/auth"
EXEMPT_PATHS = {"/health", "/metrics", "/", "/docs", "/redoc", "/openapi.json"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Assigns a request ID, binds it to structlog context and logs method,
    path, status code and duration for every request.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]
        start_time = time.perf_counter()

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
            logger.error("request_failed", error=str(e), duration_ms=duration_ms)
            raise

        duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
        log = logger.warning if response.status_code >= 400 else logger.info
        log("request_completed", status_code=response.status_code, duration_ms=duration_ms)

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{duration_ms}ms"
        return response


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Fixed-window limit per client IP, counted in Redis. Authentication
    routes get their own, tighter bucket. Without Redis every request
    is allowed.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        settings = get_settings()
        path = request.url.path
        if not settings.RATE_LIMIT_ENABLED or path in EXEMPT_PATHS:
            return await call_next(request)

        if path.startswith(AUTH_PREFIX):
            scope, limit = "auth", settings.auth_rate_limit
        else:
            scope, limit = "api", settings.RATE_LIMIT_MAX_REQUESTS

        client_ip = request.client.host if request.client else "unknown"
        counted = await hit_rate_limit(scope, client_ip, settings.RATE_LIMIT_WINDOW_SECONDS)
        if counted is None:
            return await call_next(request)

        count, reset_in = counted
        if count > limit:
            record_rate_limited(scope)
            logger.warning("rate_limit_exceeded", scope=scope, client_ip=client_ip, count=count, limit=limit)
            error = RateLimitError(
                "Too many authentication attempts, please try again later"
                if scope == "auth"
                else "Too many requests, please try again later",
                details={"retry_after": reset_in},
            )
            return error_envelope(
                error.status_code,
                error.code,
                error.message,
                error.details,
                headers={"Retry-After": str(reset_in)},
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(limit)
        response.headers["X-RateLimit-Remaining"] = str(max(limit - count, 0))
        return response
