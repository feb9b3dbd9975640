from fastapi import APIRouter

from app.core.security import utcnow

router = APIRouter()


@router.get("")
def health():
    return {"status": "ok", "timestamp": utcnow().isoformat()}
