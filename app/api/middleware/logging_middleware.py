"""
Request logging middleware for FastAPI application.

Logs one line per request and one per response, tagged with a correlation id
and, for booking routes, the booking session id.
"""

import logging
import re
import time
import uuid
from collections.abc import Callable
from typing import Any

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

logger = logging.getLogger(__name__)

SESSION_PATH_PATTERN = re.compile(r"/sessions/(?P<session_id>[0-9a-fA-F-]{36})")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    HTTP middleware for request/response logging.

    Adds an ``X-Correlation-ID`` (propagated when the caller sends one) and an
    ``X-Response-Time-Ms`` header to every response.
    """

    # High-frequency, low-value paths
    EXCLUDE_PATHS: tuple[str, ...] = (
        "/health",
        "/docs",
        "/redoc",
        "/openapi.json",
        "/favicon.ico",
    )

    def _should_log(self, path: str) -> bool:
        return not any(path.startswith(exclude) for exclude in self.EXCLUDE_PATHS)

    @staticmethod
    def _log_prefix(correlation_id: str, path: str) -> str:
        match = SESSION_PATH_PATTERN.search(path)
        if match:
            return f"[{correlation_id}][session {match.group('session_id')[:8]}]"
        return f"[{correlation_id}]"

    async def dispatch(self, request: Request, call_next: Callable[[Request], Any]) -> Response:
        correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())[:8]
        request.state.correlation_id = correlation_id

        if not self._should_log(request.url.path):
            response = await call_next(request)
            response.headers["X-Correlation-ID"] = correlation_id
            return response

        prefix = self._log_prefix(correlation_id, request.url.path)
        start_time = time.perf_counter()
        logger.info(f"{prefix} --> {request.method} {request.url.path}")

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(f"{prefix} <-- {request.method} {request.url.path} ERROR in {duration_ms:.2f}ms: {e}")
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000
        log_level = logging.WARNING if response.status_code >= 400 else logging.INFO
        logger.log(
            log_level,
            f"{prefix} <-- {request.method} {request.url.path} {response.status_code} in {duration_ms:.2f}ms",
        )

        response.headers["X-Correlation-ID"] = correlation_id
        response.headers["X-Response-Time-Ms"] = f"{duration_ms:.2f}"
        return response
