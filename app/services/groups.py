# app/services/groups.py
from typing import Iterable, List, Optional, Sequence, Set

from fastapi import Depends

from app.core.config import Settings, get_settings
from app.core.deps import get_appliance
from app.core.exceptions import (
    AliasNotFound,
    AlreadyExistsError,
    BlockedSetMissing,
    InvalidIdentifier,
    ValidationError,
)
from app.models.enums import IdentifierKind, MembershipAction
from app.repositories.base import ApplianceRepository
from app.schemas.appliance import Alias
from app.schemas.blocklist import BlockedSet, BlockResult, GroupBlockStatus, MembershipChange
from app.schemas.groups import GroupCreate, GroupOut, GroupUpdate
from app.services.blocklist import BlocklistService, status_from_snapshot
from app.services.identifier import classify, is_alias_name
from app.utils.logger import get_logger

logger = get_logger(__name__)

# alias types that describe infrastructure rather than devices
PROTECTED_TYPES = {"network"}


def _details_for(members: Sequence[str], previous: Alias) -> List[str]:
    """Keep the annotation of members that stay, empty string for new ones."""
    known = {}
    for idx, member in enumerate(previous.members):
        if member not in known:
            known[member] = previous.details[idx] if idx < len(previous.details) else ""
    return [known.get(m, "") for m in members]


def _clean(members: Iterable[str]) -> List[str]:
    out: List[str] = []
    for m in members:
        m = (m or "").strip()
        if m and m not in out:
            out.append(m)
    return out


class GroupService:
    """
    Firewall aliases used as device groups.

    Edits made here are staged on the appliance; they take effect once the
    firewall subsystem is applied (see PendingService). Blocking a whole
    group goes through BlocklistService and is applied immediately.
    """

    def __init__(
        self,
        appliance: ApplianceRepository = Depends(get_appliance),
        settings: Settings = Depends(get_settings),
    ):
        self.appliance = appliance
        self.settings = settings
        self.blocklist = BlocklistService(appliance, settings)

    def is_protected(self, alias: Alias) -> bool:
        return (
            alias.name == self.settings.blocked_alias_name
            or alias.name in self.settings.protected_alias_names
            or alias.type in PROTECTED_TYPES
        )

    def _to_out(self, alias: Alias, blocked: Optional[BlockedSet]) -> GroupOut:
        if blocked is None:
            status = GroupBlockStatus.unknown()
        else:
            status = status_from_snapshot(blocked, alias.name, alias.members)
        return GroupOut(
            id=alias.id,
            name=alias.name,
            type=alias.type,
            description=alias.description,
            members=alias.members,
            block_status=status,
        )

    def list_groups(self) -> List[GroupOut]:
        aliases = self.appliance.list_aliases()
        try:
            blocked = self.blocklist.load_blocked_set(aliases)
        except BlockedSetMissing:
            logger.warning(f"{self.settings.blocked_alias_name} alias missing, group status unknown")
            blocked = None
        return [self._to_out(alias, blocked) for alias in aliases]

    def get_alias(self, name: str) -> Alias:
        alias = self.appliance.find_alias(name)
        if alias is None:
            raise AliasNotFound(name)
        return alias

    def get_group(self, name: str) -> GroupOut:
        alias = self.get_alias(name)
        return GroupOut(
            id=alias.id,
            name=alias.name,
            type=alias.type,
            description=alias.description,
            members=alias.members,
            block_status=self.blocklist.group_block_status(alias.name, alias.members),
        )

    def group_status(self, name: str) -> GroupBlockStatus:
        try:
            alias = self.get_alias(name)
        except Exception as e:
            logger.warning(f"Block status for {name} unavailable: {e}")
            return GroupBlockStatus.unknown()
        return self.blocklist.group_block_status(alias.name, alias.members)

    def create_group(self, payload: GroupCreate) -> Alias:
        """
        Raises:
            InvalidIdentifier: name is not a valid alias name
            AlreadyExistsError: an alias with this name exists
        """
        name = payload.name.strip()
        if not is_alias_name(name):
            raise InvalidIdentifier("Alias name may only contain A-Z, 0-9 and _")
        if self.appliance.find_alias(name) is not None:
            raise AlreadyExistsError(f"Alias {name} already exists")

        members = _clean(payload.addresses)
        alias = self.appliance.create_alias(
            name, members, [""] * len(members), description=payload.description
        )
        logger.info(f"Group {name} created with {len(members)} members")
        return alias

    def update_group(self, name: str, payload: GroupUpdate) -> Alias:
        """
        Raises:
            AliasNotFound: no such alias
            ValidationError: the alias is protected (blocklist, network, PROTECTED_ALIASES)
        """
        alias = self.get_alias(name)
        if self.is_protected(alias):
            raise ValidationError(f"Alias {name} is protected and cannot be modified")
        members = _clean(payload.addresses)
        details = _details_for(members, alias)
        description = payload.description if payload.description is not None else alias.description
        self.appliance.replace_alias(alias.id, members, details, description=description)
        logger.info(f"Group {name} updated with {len(members)} members")
        return alias.model_copy(update={"members": members, "details": details, "description": description})

    def delete_group(self, name: str) -> None:
        alias = self.get_alias(name)
        if self.is_protected(alias):
            raise ValidationError(f"Alias {name} is protected and cannot be deleted")
        self.appliance.delete_alias(alias.id)
        logger.info(f"Group {name} deleted")

    # existing alias names are written as-is; pfSense allows mixed case ("Kids_Devices")
    def block_group(self, name: str) -> BlockResult:
        alias = self.get_alias(name)
        return self.blocklist.block_value(alias.name, IdentifierKind.ALIAS)

    def unblock_group(self, name: str) -> BlockResult:
        alias = self.get_alias(name)
        return self.blocklist.unblock_value(alias.name, IdentifierKind.ALIAS)

    def reconcile_membership(self, identifier: str, desired_groups: Iterable[str]) -> List[MembershipChange]:
        """
        Make `identifier` a member of exactly the groups in `desired_groups`.

        Protected aliases are reported as skipped and never written. Each
        group that needs a change gets one replace call.
        """
        value = classify(identifier).value
        wanted_key = value.lower()
        desired: Set[str] = set(desired_groups)

        changes: List[MembershipChange] = []
        for alias in self.appliance.list_aliases():
            if self.is_protected(alias):
                changes.append(MembershipChange(group=alias.name, action=MembershipAction.SKIPPED))
                continue

            is_member = any(m.lower() == wanted_key for m in alias.members)
            want = alias.name in desired

            if want and not is_member:
                members = [*alias.members, value]
                details = [*_padded(alias), ""]
                self.appliance.replace_alias(alias.id, members, details)
                action = MembershipAction.ADDED
            elif is_member and not want:
                kept = [
                    (m, d) for m, d in zip(alias.members, _padded(alias)) if m.lower() != wanted_key
                ]
                self.appliance.replace_alias(alias.id, [m for m, _ in kept], [d for _, d in kept])
                action = MembershipAction.REMOVED
            else:
                action = MembershipAction.UNCHANGED
            changes.append(MembershipChange(group=alias.name, action=action))

        touched = [
            f"{c.group}={c.action.value}"
            for c in changes
            if c.action in (MembershipAction.ADDED, MembershipAction.REMOVED)
        ]
        logger.info(f"Membership of {value} reconciled: {', '.join(touched) or 'no changes'}")
        return changes


def _padded(alias: Alias) -> List[str]:
    details = list(alias.details[: len(alias.members)])
    return details + [""] * (len(alias.members) - len(details))
