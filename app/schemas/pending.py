from typing import List

from pydantic import BaseModel, Field

from app.models.enums import Subsystem


class ServicePending(BaseModel):
    service: Subsystem
    has_pending: bool
    count: int = 0


class PendingChanges(BaseModel):
    has_pending: bool
    total_count: int
    services: List[ServicePending] = Field(default_factory=list)
