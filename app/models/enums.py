from enum import Enum


class IdentifierKind(str, Enum):
    IP = "ip"
    ALIAS = "alias"
    HOSTNAME = "hostname"


class BlockStatus(str, Enum):
    BLOCKED = "blocked"
    PARTIAL = "partial"
    UNBLOCKED = "unblocked"
    UNKNOWN = "unknown"


class MembershipAction(str, Enum):
    ADDED = "added"
    REMOVED = "removed"
    UNCHANGED = "unchanged"
    SKIPPED = "skipped"


class Subsystem(str, Enum):
    FIREWALL = "firewall"
    DHCP = "dhcp"
