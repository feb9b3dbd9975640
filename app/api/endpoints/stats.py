from fastapi import APIRouter, Depends

from app.schemas.common import Envelope
from app.services.clients import ClientService

router = APIRouter()


@router.get("/overview")
def overview(service: ClientService = Depends()):
    return Envelope(status="ok", code=200, data=service.overview())
