# app/services/blocklist.py
from typing import List, Optional, Sequence

from fastapi import Depends

from app.core.config import Settings, get_settings
from app.core.deps import get_appliance
from app.core.exceptions import ApplyFailed, BlockedSetMissing, UpstreamUnavailable
from app.core.security import utcnow
from app.models.enums import BlockStatus, IdentifierKind, Subsystem
from app.repositories.base import ApplianceRepository
from app.schemas.appliance import Alias, Lease
from app.schemas.blocklist import (
    BlockedEntry,
    BlockedItem,
    BlockedSet,
    BlockResult,
    ClassifiedIdentifier,
    GroupBlockStatus,
)
from app.services.identifier import IdentifierResolver, classify, is_ipv4
from app.utils.logger import get_logger

logger = get_logger(__name__)

_KIND_LABEL = {
    IdentifierKind.IP: "Device",
    IdentifierKind.ALIAS: "Alias",
    IdentifierKind.HOSTNAME: "Host",
}


def annotate(identifier: ClassifiedIdentifier) -> str:
    note = f"Blocked on {utcnow().isoformat(timespec='seconds')}"
    if identifier.kind == IdentifierKind.HOSTNAME:
        note += f" ({identifier.value})"
    return note


def status_from_snapshot(blocked: BlockedSet, group_name: str, members: Sequence[str]) -> GroupBlockStatus:
    group_blocked = group_name in blocked
    individual = sum(1 for m in members if m in blocked)
    if group_blocked:
        status = BlockStatus.BLOCKED
    elif individual > 0:
        status = BlockStatus.PARTIAL
    else:
        status = BlockStatus.UNBLOCKED
    return GroupBlockStatus(
        group_blocked=group_blocked,
        individually_blocked_count=individual,
        total_member_count=len(members),
        status=status,
    )


class BlocklistService:
    """
    Keeps the blocklist alias in sync with block/unblock requests.

    Every mutation is a full read-modify-write of the alias followed by one
    firewall apply. Requests that find the alias already in the desired
    state succeed without writing.
    """

    def __init__(
        self,
        appliance: ApplianceRepository = Depends(get_appliance),
        settings: Settings = Depends(get_settings),
    ):
        self.appliance = appliance
        self.settings = settings
        self.resolver = IdentifierResolver(appliance)

    @property
    def alias_name(self) -> str:
        return self.settings.blocked_alias_name

    def load_blocked_set(self, aliases: Optional[List[Alias]] = None) -> BlockedSet:
        """
        Raises:
            BlockedSetMissing: the blocklist alias does not exist
        """
        if aliases is None:
            aliases = self.appliance.list_aliases()
        for alias in aliases:
            if alias.name == self.alias_name:
                return BlockedSet.from_alias(alias)
        raise BlockedSetMissing(self.alias_name)

    def _write(self, blocked: BlockedSet) -> None:
        addresses, details = blocked.to_parallel()
        self.appliance.replace_alias(blocked.alias_id, addresses, details)
        apply_firewall(self.appliance)

    def block(self, raw: str) -> BlockResult:
        """
        Add the identifier's blockable value to the blocklist.

        Raises:
            InvalidIdentifier, AliasNotFound, HostnameUnresolved: before any write
            BlockedSetMissing: blocklist alias missing
            UpstreamUnavailable: read or write failed
            ApplyFailed: written but not activated
        """
        identifier = classify(raw)
        value = self.resolver.resolve(identifier)
        return self.block_value(value, identifier.kind, detail=annotate(identifier))

    def block_value(self, value: str, kind: IdentifierKind, detail: Optional[str] = None) -> BlockResult:
        """Add an already resolved value (IP or existing alias name) to the blocklist."""
        label = _KIND_LABEL[kind]
        blocked = self.load_blocked_set()
        if value in blocked:
            return BlockResult(
                success=True,
                message=f"{label} already blocked",
                blockable_value=value,
                kind=kind,
            )

        if detail is None:
            detail = annotate(ClassifiedIdentifier(kind=kind, value=value))
        self._write(blocked.appended(BlockedEntry(value=value, detail=detail)))
        logger.info(f"Blocked {kind.value} {value}")
        return BlockResult(
            success=True,
            message=f"{label} blocked successfully",
            blockable_value=value,
            kind=kind,
        )

    def unblock(self, raw: str) -> BlockResult:
        """Remove the identifier's blockable value from the blocklist. Same errors as block()."""
        identifier = classify(raw)
        value = self.resolver.resolve(identifier)
        return self.unblock_value(value, identifier.kind)

    def unblock_value(self, value: str, kind: IdentifierKind) -> BlockResult:
        label = _KIND_LABEL[kind]
        blocked = self.load_blocked_set()
        index = blocked.index_of(value)
        if index == -1:
            return BlockResult(
                success=True,
                message=f"{label} not in blocked list",
                blockable_value=value,
                kind=kind,
            )

        self._write(blocked.without(index))
        logger.info(f"Unblocked {kind.value} {value}")
        return BlockResult(
            success=True,
            message=f"{label} unblocked successfully",
            blockable_value=value,
            kind=kind,
        )

    def group_block_status(self, group_name: str, members: Sequence[str]) -> GroupBlockStatus:
        """Best effort: any failure is reported as status=unknown."""
        try:
            blocked = self.load_blocked_set()
            return status_from_snapshot(blocked, group_name, members)
        except Exception as e:
            logger.warning(f"Block status for {group_name} unavailable: {e}")
            return GroupBlockStatus.unknown()

    def list_blocked_items(self) -> List[BlockedItem]:
        aliases = self.appliance.list_aliases()
        blocked = self.load_blocked_set(aliases)
        leases = self.appliance.list_leases()
        return [enrich(entry, leases, aliases) for entry in blocked.entries]


def enrich(entry: BlockedEntry, leases: List[Lease], aliases: List[Alias]) -> BlockedItem:
    if is_ipv4(entry.value):
        lease = next((l for l in leases if l.ip == entry.value), None)
        return BlockedItem(
            value=entry.value,
            type=IdentifierKind.IP.value,
            detail=entry.detail,
            hostname=(lease.hostname if lease and lease.hostname else "Unknown"),
            mac=lease.mac if lease else None,
        )

    alias = next((a for a in aliases if a.name == entry.value), None)
    if alias is not None:
        return BlockedItem(
            value=entry.value,
            type=IdentifierKind.ALIAS.value,
            detail=entry.detail,
            description=alias.description,
            member_count=len(alias.members),
        )

    # legacy entries (MACs, FQDNs) written by other tools
    return BlockedItem(value=entry.value, type="other", detail=entry.detail)


def apply_firewall(appliance: ApplianceRepository) -> None:
    apply_changes(appliance, Subsystem.FIREWALL.value)


def apply_changes(appliance: ApplianceRepository, subsystem: str) -> None:
    """
    Raises:
        ApplyFailed: the appliance did not accept the apply request
    """
    try:
        appliance.apply_subsystem(subsystem)
    except UpstreamUnavailable as e:
        raise ApplyFailed(subsystem) from e
