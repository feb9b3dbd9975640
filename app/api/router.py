from fastapi import APIRouter, Depends

from app.api.endpoints import auth
from app.api.endpoints import blocked
from app.api.endpoints import clients
from app.api.endpoints import dhcp
from app.api.endpoints import groups
from app.api.endpoints import pending
from app.api.endpoints import stats
from app.core.deps import require_admin

protected = [Depends(require_admin)]

router = APIRouter()
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(clients.router, prefix="/clients", tags=["clients"], dependencies=protected)
router.include_router(blocked.router, prefix="/blocked", tags=["blocked"], dependencies=protected)
router.include_router(groups.router, prefix="/groups", tags=["groups"], dependencies=protected)
router.include_router(dhcp.router, prefix="/dhcp", tags=["dhcp"], dependencies=protected)
router.include_router(pending.router, prefix="/pending", tags=["pending"], dependencies=protected)
router.include_router(stats.router, prefix="/stats", tags=["stats"], dependencies=protected)
