from fastapi import APIRouter, Depends

from app.schemas.common import Envelope
from app.services.blocklist import BlocklistService

router = APIRouter()


@router.get("")
def list_blocked(service: BlocklistService = Depends()):
    return Envelope(status="ok", code=200, data=service.list_blocked_items())


@router.post("/{identifier}/block")
def block(identifier: str, service: BlocklistService = Depends()):
    """Block an IP, a DHCP hostname or an alias name."""
    result = service.block(identifier)
    return Envelope(status="ok", code=200, message=result.message, data=result)


@router.post("/{identifier}/unblock")
def unblock(identifier: str, service: BlocklistService = Depends()):
    result = service.unblock(identifier)
    return Envelope(status="ok", code=200, message=result.message, data=result)
