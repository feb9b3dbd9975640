# app/core/deps.py
from typing import Generator, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.core.config import Settings, get_settings
from app.core.exceptions import ConfigurationError
from app.core.pfsense_client import PfSenseClient
from app.core.security import verify_shared_secret
from app.repositories.base import ApplianceRepository
from app.repositories.pfsense import PfSenseRepository

bearer_scheme = HTTPBearer(auto_error=False)


def get_appliance(settings: Settings = Depends(get_settings)) -> Generator[ApplianceRepository, None, None]:
    """One pfSense client per request; nothing is shared across requests."""
    if not settings.pfsense_url:
        raise ConfigurationError("Server misconfiguration: PFSENSE_URL not set")

    client = PfSenseClient(
        base_url=settings.pfsense_url,
        username=settings.pfsense_username,
        password=settings.pfsense_password,
        verify_ssl=settings.pfsense_verify_ssl,
        timeout=settings.pfsense_timeout,
    )
    try:
        yield PfSenseRepository(client)
    finally:
        client.close()


async def require_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
) -> None:
    if not settings.admin_password:
        # fail safe: no secret configured means nobody gets in
        raise HTTPException(status_code=500, detail="Server misconfiguration: ADMIN_PASSWORD not set")

    if not credentials or credentials.scheme.lower() != "bearer":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")

    if not verify_shared_secret(credentials.credentials, settings.admin_password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
