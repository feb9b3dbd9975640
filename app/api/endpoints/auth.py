from fastapi import APIRouter, Depends, Request

from app.core.config import Settings, get_settings
from app.core.exceptions import AuthorizationError, ConfigurationError
from app.core.security import client_ip, verify_shared_secret
from app.schemas.auth import LoginIn, TokenOut
from app.schemas.common import Envelope
from app.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.post("/login")
def login(body: LoginIn, request: Request, settings: Settings = Depends(get_settings)):
    """
    Exchange the admin password for a bearer token.

    The token is the shared secret itself; there are no sessions.
    """
    if not settings.admin_password:
        raise ConfigurationError("Server misconfiguration: ADMIN_PASSWORD not set")
    if not verify_shared_secret(body.password, settings.admin_password):
        logger.warning(f"Failed login from {client_ip(request) or 'unknown'}")
        raise AuthorizationError("Invalid password")
    return Envelope(status="ok", code=200, message="Login successful", data=TokenOut(token=body.password))
