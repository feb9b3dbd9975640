from fastapi import APIRouter, Depends

from app.schemas.common import Envelope
from app.schemas.dhcp import StaticMappingIn, ValidateIPIn, ValidateIPOut
from app.services.dhcp import DhcpService

router = APIRouter()


@router.get("/static")
def list_static(service: DhcpService = Depends()):
    return Envelope(status="ok", code=200, data=service.list_static_mappings())


@router.post("/static")
def set_static(body: StaticMappingIn, service: DhcpService = Depends()):
    mapping = service.set_static_mapping(body)
    return Envelope(status="ok", code=200, message="Static mapping saved, apply DHCP changes to activate", data=mapping)


@router.delete("/static/{mac}")
def delete_static(mac: str, service: DhcpService = Depends()):
    service.delete_static_mapping(mac)
    return Envelope(status="ok", code=200, message="Static mapping deleted")


@router.post("/validate-ip")
def validate_ip(body: ValidateIPIn, service: DhcpService = Depends()):
    error = service.validate_static_ip(body.ip, body.current_ip)
    return Envelope(status="ok", code=200, data=ValidateIPOut(valid=error is None, error=error))
