# app/services/pending.py
from typing import List

from fastapi import Depends

from app.core.deps import get_appliance
from app.core.exceptions import ValidationError
from app.models.enums import Subsystem
from app.repositories.base import ApplianceRepository
from app.schemas.pending import PendingChanges, ServicePending
from app.services.blocklist import apply_changes
from app.utils.logger import get_logger

logger = get_logger(__name__)


class PendingService:
    def __init__(self, appliance: ApplianceRepository = Depends(get_appliance)):
        self.appliance = appliance

    def pending_changes(self) -> PendingChanges:
        services: List[ServicePending] = []
        for subsystem in Subsystem:
            status = self.appliance.pending_status(subsystem.value)
            if status.applied:
                count = 0
            else:
                count = len(status.pending_subsystems) or 1
            services.append(ServicePending(service=subsystem, has_pending=count > 0, count=count))

        total = sum(s.count for s in services)
        return PendingChanges(has_pending=total > 0, total_count=total, services=services)

    def apply(self, service: str) -> ServicePending:
        """
        Raises:
            ValidationError: unknown service
            ApplyFailed: the appliance refused to apply
        """
        try:
            subsystem = Subsystem(service)
        except ValueError:
            raise ValidationError("Invalid service type") from None

        apply_changes(self.appliance, subsystem.value)
        logger.info(f"{subsystem.value} changes applied on request")
        return ServicePending(service=subsystem, has_pending=False, count=0)
