# =============================================================================
# app/middleware.py - Request Interceptor Chain
# =============================================================================
# Every request passes through these interceptors, outermost first:
#
#   1. RequestIDMiddleware   - X-Request-ID in, X-Request-ID out, bound to logs
#   2. RealIPMiddleware      - resolve the client IP behind proxies
#   3. AccessLogMiddleware   - one log line per request
#   4. RecoveryMiddleware    - unhandled exception -> 500 INTERNAL_ERROR
#   5. TimeoutMiddleware     - no response in time -> 504 REQUEST_TIMEOUT
#   6. CORSMiddleware        - fixed origin/method/header allow-list
#   7. RateLimitMiddleware   - fixed window per client IP -> 429 RATE_LIMITED
#
# Bearer token verification happens last, per route, via the
# get_current_user dependency.
# =============================================================================

import asyncio
import logging
import math
import re
import time
import uuid
from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from app.config import Settings
from app.exceptions import (
    InternalError,
    RateLimitedError,
    RequestTimeoutError,
    UpstreamUnavailableError,
    error_response,
)
from app.logging_config import request_id_var

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
_REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9._-]{1,128}$")

CORS_ALLOWED_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
CORS_ALLOWED_HEADERS = ["Accept", "Authorization", "Content-Type", "X-CSRF-Token"]
CORS_EXPOSED_HEADERS = ["Link"]
CORS_MAX_AGE = 300


def client_ip(request: Request) -> str:
    """Client IP resolved by RealIPMiddleware, or the socket peer."""
    ip = getattr(request.state, "client_ip", None)
    if ip:
        return ip
    return request.client.host if request.client else "unknown"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Reuse the caller's X-Request-ID or generate one, and echo it back."""

    async def dispatch(self, request: Request, call_next) -> Response:
        incoming = request.headers.get(REQUEST_ID_HEADER, "")
        request_id = incoming if _REQUEST_ID_PATTERN.match(incoming) else uuid.uuid4().hex

        request.state.request_id = request_id
        token = request_id_var.set(request_id)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class RealIPMiddleware(BaseHTTPMiddleware):
    """
    Resolve the client IP.

    With trusted proxies: True-Client-IP, then X-Real-IP, then the first
    X-Forwarded-For entry. Otherwise (or if none is set) the socket peer.
    """

    def __init__(self, app, trust_proxy_headers: bool = True):
        super().__init__(app)
        self.trust_proxy_headers = trust_proxy_headers

    async def dispatch(self, request: Request, call_next) -> Response:
        ip = None
        if self.trust_proxy_headers:
            ip = (
                request.headers.get("True-Client-IP")
                or request.headers.get("X-Real-IP")
                or request.headers.get("X-Forwarded-For", "").split(",")[0]
            ).strip() or None
        request.state.client_ip = ip or (request.client.host if request.client else "unknown")
        return await call_next(request)


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Log method, path, status, duration and client IP for every request."""

    async def dispatch(self, request: Request, call_next) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - started) * 1000
        logger.info(
            f"{request.method} {request.url.path} {response.status_code} "
            f"{duration_ms:.1f}ms ip={client_ip(request)}"
        )
        return response


class RecoveryMiddleware(BaseHTTPMiddleware):
    """Turn any unhandled exception into a 500 without taking the process down."""

    async def dispatch(self, request: Request, call_next) -> Response:
        try:
            return await call_next(request)
        except Exception:
            logger.exception(f"Unhandled error on {request.method} {request.url.path}")
            return error_response(InternalError())


class TimeoutMiddleware(BaseHTTPMiddleware):
    """Answer 504 when the handler hasn't produced a response in time."""

    def __init__(self, app, timeout_seconds: float = 30.0):
        super().__init__(app)
        self.timeout_seconds = timeout_seconds

    async def dispatch(self, request: Request, call_next) -> Response:
        try:
            return await asyncio.wait_for(call_next(request), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            logger.warning(
                f"{request.method} {request.url.path} exceeded {self.timeout_seconds}s, responding 504"
            )
            return error_response(RequestTimeoutError(self.timeout_seconds))


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Fixed-window rate limiter keyed by client IP.

    Counters live in the cache (INCR + EXPIRE), so every worker process
    shares them. If the cache is unreachable the request is let through.
    """

    def __init__(self, app, limit: int = 100, window_seconds: int = 60):
        super().__init__(app)
        self.limit = limit
        self.window_seconds = window_seconds

    async def dispatch(self, request: Request, call_next) -> Response:
        cache = getattr(request.app.state, "cache", None)
        if cache is None:
            return await call_next(request)

        now = time.time()
        window = int(now // self.window_seconds)
        ip = client_ip(request)

        try:
            count = await cache.incr_window(f"ratelimit:{ip}:{window}", self.window_seconds)
        except UpstreamUnavailableError as e:
            logger.warning(f"Rate limiter unavailable, allowing request: {e.message}")
            return await call_next(request)

        if count > self.limit:
            retry_after = max(1, math.ceil((window + 1) * self.window_seconds - now))
            logger.info(f"Rate limit exceeded for {ip} ({count}/{self.limit})")
            return error_response(RateLimitedError(retry_after))

        return await call_next(request)


def middleware_chain(settings: Settings) -> list[tuple[type, dict[str, Any]]]:
    """The interceptor chain, outermost first."""
    return [
        (RequestIDMiddleware, {}),
        (RealIPMiddleware, {"trust_proxy_headers": settings.TRUST_PROXY_HEADERS}),
        (AccessLogMiddleware, {}),
        (RecoveryMiddleware, {}),
        (TimeoutMiddleware, {"timeout_seconds": settings.REQUEST_TIMEOUT_SECONDS}),
        (CORSMiddleware, {
            "allow_origins": settings.cors_origins_list,
            "allow_credentials": True,
            "allow_methods": CORS_ALLOWED_METHODS,
            "allow_headers": CORS_ALLOWED_HEADERS,
            "expose_headers": CORS_EXPOSED_HEADERS,
            "max_age": CORS_MAX_AGE,
        }),
        (RateLimitMiddleware, {
            "limit": settings.RATE_LIMIT_REQUESTS,
            "window_seconds": settings.RATE_LIMIT_WINDOW_SECONDS,
        }),
    ]


def install_middleware(app: FastAPI, settings: Settings) -> None:
    """
    Register the chain on the app.

    Starlette wraps each added middleware around the previous ones, so the
    list is added innermost first.
    """
    for middleware_class, options in reversed(middleware_chain(settings)):
        app.add_middleware(middleware_class, **options)
