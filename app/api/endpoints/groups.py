from fastapi import APIRouter, Depends

from app.schemas.common import Envelope
from app.schemas.groups import GroupCreate, GroupUpdate, MembershipUpdate
from app.services.groups import GroupService

router = APIRouter()


@router.get("")
def list_groups(service: GroupService = Depends()):
    """All aliases, each with its block status."""
    return Envelope(status="ok", code=200, data=service.list_groups())


@router.post("", status_code=201)
def create_group(body: GroupCreate, service: GroupService = Depends()):
    alias = service.create_group(body)
    return Envelope(status="ok", code=201, message="Group created", data=alias)


@router.put("/membership/{identifier}")
def set_membership(identifier: str, body: MembershipUpdate, service: GroupService = Depends()):
    """Make `identifier` a member of exactly `groups` (protected aliases are skipped)."""
    changes = service.reconcile_membership(identifier, body.groups)
    return Envelope(status="ok", code=200, data=changes)


@router.get("/{name}")
def get_group(name: str, service: GroupService = Depends()):
    return Envelope(status="ok", code=200, data=service.get_group(name))


@router.get("/{name}/status")
def group_status(name: str, service: GroupService = Depends()):
    return Envelope(status="ok", code=200, data=service.group_status(name))


@router.put("/{name}")
def update_group(name: str, body: GroupUpdate, service: GroupService = Depends()):
    alias = service.update_group(name, body)
    return Envelope(status="ok", code=200, message="Group updated", data=alias)


@router.delete("/{name}")
def delete_group(name: str, service: GroupService = Depends()):
    service.delete_group(name)
    return Envelope(status="ok", code=200, message="Group deleted")


@router.post("/{name}/block")
def block_group(name: str, service: GroupService = Depends()):
    result = service.block_group(name)
    return Envelope(status="ok", code=200, message=result.message, data=result)


@router.post("/{name}/unblock")
def unblock_group(name: str, service: GroupService = Depends()):
    result = service.unblock_group(name)
    return Envelope(status="ok", code=200, message=result.message, data=result)
