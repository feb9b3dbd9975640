from fastapi import APIRouter, Depends

from app.schemas.common import Envelope
from app.services.clients import ClientService

router = APIRouter()


@router.get("/connected")
def connected(service: ClientService = Depends()):
    return Envelope(status="ok", code=200, data=service.connected_clients())


@router.get("/blocked")
def blocked(service: ClientService = Depends()):
    """Blocked clients, including blocked devices that are currently offline."""
    return Envelope(status="ok", code=200, data=service.blocked_clients())


@router.post("/{mac}/block")
def block_client(mac: str, service: ClientService = Depends()):
    result = service.block_client(mac)
    return Envelope(status="ok", code=200, message=result.message, data=result)


@router.post("/{mac}/unblock")
def unblock_client(mac: str, service: ClientService = Depends()):
    result = service.unblock_client(mac)
    return Envelope(status="ok", code=200, message=result.message, data=result)
