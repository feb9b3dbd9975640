"""
Custom middleware for the pfSense Manager API.

This module contains middleware components that handle cross-cutting concerns
across all requests.
"""

import time

from starlette.middleware.base import BaseHTTPMiddleware

from app.core.security import client_ip
from app.utils.logger import get_logger

logger = get_logger("app.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Log one line per request: method, path, status, duration and caller.

    Exceptions escaping the app are logged with the same fields before being
    re-raised to Starlette's error handling.
    """

    async def dispatch(self, request, call_next):
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            elapsed_ms = (time.perf_counter() - start) * 1000
            logger.exception(
                f"{request.method} {request.url.path} -> 500 ({elapsed_ms:.1f}ms) from {client_ip(request) or '-'}"
            )
            raise

        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} "
            f"({elapsed_ms:.1f}ms) from {client_ip(request) or '-'}"
        )
        return response
