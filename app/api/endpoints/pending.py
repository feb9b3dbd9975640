from fastapi import APIRouter, Depends

from app.schemas.common import Envelope
from app.services.pending import PendingService

router = APIRouter()


@router.get("")
def pending(service: PendingService = Depends()):
    return Envelope(status="ok", code=200, data=service.pending_changes())


@router.post("/apply/{service_name}")
def apply(service_name: str, service: PendingService = Depends()):
    """Apply staged changes of one subsystem: firewall or dhcp."""
    result = service.apply(service_name)
    return Envelope(status="ok", code=200, message=f"{service_name} changes applied", data=result)
