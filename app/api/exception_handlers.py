"""
Global exception handlers for the API layer.

These handlers transform domain exceptions (from the service layer) and
upstream failures (from the pfSense client) into envelope responses:

Client (transport errors) -> Service (domain exceptions) -> API (HTTP + Envelope)

By using global handlers, endpoints stay free of try/except blocks.
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.exceptions import (
    NotFoundError,
    AlreadyExistsError,
    ValidationError,
    AuthorizationError,
    UpstreamError,
    AppException,
)
from app.schemas.common import Envelope
from app.utils.logger import get_logger

logger = get_logger(__name__)


def _error(code: int, message: str, exc: Exception) -> JSONResponse:
    body = Envelope(
        status="error",
        code=code,
        message=message,
        error={"type": exc.__class__.__name__},
    )
    return JSONResponse(status_code=code, content=body.model_dump(mode="json"))


async def not_found_exception_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    """
    Handle NotFoundError and its subclasses (AliasNotFound, HostnameUnresolved, ...).
    Maps to HTTP 404 Not Found.
    """
    return _error(status.HTTP_404_NOT_FOUND, exc.message, exc)


async def already_exists_exception_handler(request: Request, exc: AlreadyExistsError) -> JSONResponse:
    """Maps to HTTP 409 Conflict."""
    return _error(status.HTTP_409_CONFLICT, exc.message, exc)


async def validation_exception_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """
    Handle ValidationError (InvalidIdentifier, bad static IP, ...).
    Maps to HTTP 400 Bad Request.

    Note: This is different from Pydantic validation errors,
    which are handled by FastAPI automatically (422).
    """
    return _error(status.HTTP_400_BAD_REQUEST, exc.message, exc)


async def authorization_exception_handler(request: Request, exc: AuthorizationError) -> JSONResponse:
    """Maps to HTTP 401 Unauthorized."""
    return _error(status.HTTP_401_UNAUTHORIZED, exc.message, exc)


async def upstream_exception_handler(request: Request, exc: UpstreamError) -> JSONResponse:
    """
    Handle UpstreamUnavailable and ApplyFailed.
    Maps to HTTP 502 Bad Gateway: the appliance, not this service, failed.
    """
    logger.error(f"{request.method} {request.url.path} failed upstream: {exc.message}")
    return _error(status.HTTP_502_BAD_GATEWAY, exc.message, exc)


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """
    Fallback handler for any AppException that wasn't caught by more specific handlers.
    Maps to HTTP 500 Internal Server Error.
    """
    logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, exc.message, exc)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Keep the envelope shape for HTTPException (auth failures, 404 routes)."""
    response = _error(exc.status_code, str(exc.detail), exc)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


# Dictionary mapping exception types to their handlers
# Registered all at once in main.py
EXCEPTION_HANDLERS = {
    NotFoundError: not_found_exception_handler,
    AlreadyExistsError: already_exists_exception_handler,
    ValidationError: validation_exception_handler,
    AuthorizationError: authorization_exception_handler,
    UpstreamError: upstream_exception_handler,
    AppException: app_exception_handler,
    StarletteHTTPException: http_exception_handler,
}
