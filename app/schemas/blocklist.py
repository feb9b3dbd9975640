from typing import List, Optional, Tuple, Union

from pydantic import BaseModel, Field

from app.models.enums import BlockStatus, IdentifierKind, MembershipAction
from app.schemas.appliance import Alias


class ClassifiedIdentifier(BaseModel):
    kind: IdentifierKind
    value: str


class BlockedEntry(BaseModel):
    value: str
    detail: str = ""


class BlockedSet(BaseModel):
    """
    Snapshot of the blocklist alias.

    Entries pair each address with its annotation; the appliance's parallel
    `address`/`detail` arrays only exist at the repository boundary
    (see `from_alias` / `to_parallel`).
    """

    alias_id: Optional[Union[int, str]] = None
    name: str
    description: str = ""
    entries: List[BlockedEntry] = Field(default_factory=list)

    @classmethod
    def from_alias(cls, alias: Alias) -> "BlockedSet":
        entries = []
        for idx, address in enumerate(alias.members):
            if not address or not address.strip():
                continue
            detail = alias.details[idx] if idx < len(alias.details) else ""
            entries.append(BlockedEntry(value=address.strip(), detail=detail))
        return cls(alias_id=alias.id, name=alias.name, description=alias.description, entries=entries)

    def to_parallel(self) -> Tuple[List[str], List[str]]:
        return [e.value for e in self.entries], [e.detail for e in self.entries]

    @property
    def addresses(self) -> List[str]:
        return [e.value for e in self.entries]

    def index_of(self, value: str) -> int:
        for idx, entry in enumerate(self.entries):
            if entry.value == value:
                return idx
        return -1

    def __contains__(self, value: str) -> bool:
        return self.index_of(value) != -1

    def appended(self, entry: BlockedEntry) -> "BlockedSet":
        return self.model_copy(update={"entries": [*self.entries, entry]})

    def without(self, index: int) -> "BlockedSet":
        return self.model_copy(update={"entries": [e for i, e in enumerate(self.entries) if i != index]})


class BlockResult(BaseModel):
    success: bool
    message: str
    blockable_value: str
    kind: IdentifierKind


class GroupBlockStatus(BaseModel):
    group_blocked: bool = False
    individually_blocked_count: int = 0
    total_member_count: int = 0
    status: BlockStatus = BlockStatus.UNKNOWN

    @classmethod
    def unknown(cls) -> "GroupBlockStatus":
        return cls()


class MembershipChange(BaseModel):
    group: str
    action: MembershipAction


class BlockedItem(BaseModel):
    """A blocklist entry enriched for display."""
    value: str
    type: str
    detail: str = ""
    hostname: Optional[str] = None
    mac: Optional[str] = None
    description: Optional[str] = None
    member_count: Optional[int] = None
