"""
HTTP middleware for FastAPI.
Adds security headers, request logging and a request body size limit.
"""

import logging
import time
import uuid
from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from app.config import settings


logger = logging.getLogger("informatch.requests")

# Routes that return account data and must not be cached
PRIVATE_PATH_MARKERS = ("/profiles", "/settings", "/suggestions", "/matching")

UNLOGGED_PATHS = ("/", "/health", "/docs", "/openapi.json")


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Middleware to add security headers to all responses.
    Also assigns the request ID used by the request log.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = str(uuid.uuid4())[:8]
        request.state.request_id = request_id

        response = await call_next(request)

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Content-Security-Policy"] = (
            "default-src 'none'; frame-ancestors 'none'"
        )

        if any(marker in request.url.path for marker in PRIVATE_PATH_MARKERS):
            response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate, private"
            response.headers["Pragma"] = "no-cache"

        # HSTS - force HTTPS (only in production)
        if settings.ENVIRONMENT == "production":
            response.headers["Strict-Transport-Security"] = (
                "max-age=31536000; includeSubDomains"
            )

        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging all API requests."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000

        # Don't log health checks to reduce noise
        if request.url.path not in UNLOGGED_PATHS:
            logger.info(
                f"{request.method} {request.url.path} - {response.status_code} "
                f"({duration_ms:.2f}ms)",
                extra={
                    "request_id": getattr(request.state, "request_id", "N/A"),
                    "client_ip": self._get_client_ip(request),
                    "user_agent": request.headers.get("User-Agent", "Unknown")[:100],
                },
            )

        return response

    def _get_client_ip(self, request: Request) -> str:
        """Extract real client IP from request."""
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()

        real_ip = request.headers.get("X-Real-IP")
        if real_ip:
            return real_ip.strip()

        return request.client.host if request.client else "unknown"


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """Middleware to reject request bodies above MAX_REQUEST_BODY_BYTES."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        content_length = request.headers.get("Content-Length")

        if content_length and content_length.isdigit():
            if int(content_length) > settings.MAX_REQUEST_BODY_BYTES:
                return Response(
                    content='{"error": "Request body too large"}',
                    status_code=413,
                    media_type="application/json",
                )

        return await call_next(request)
