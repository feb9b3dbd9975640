"""
Identifier classification and resolution.

A caller hands us a raw string. It is classified purely by its shape, first
match wins:

1. dotted quad with every octet in 0-255  -> IP
2. only A-Z, 0-9 and "_"                   -> Alias
3. anything else                           -> Hostname

Resolution turns it into something the blocklist alias can hold: an IP or
an alias name. Hostnames are never stored, they are looked up in the DHCP
lease table and replaced by the lease's IP.
"""
import re
from typing import Any, List, Optional

from app.core.exceptions import AliasNotFound, HostnameUnresolved, InvalidIdentifier
from app.models.enums import IdentifierKind
from app.repositories.base import ApplianceRepository
from app.schemas.appliance import Lease
from app.schemas.blocklist import ClassifiedIdentifier

_IPV4_RE = re.compile(r"^([0-9]{1,3})\.([0-9]{1,3})\.([0-9]{1,3})\.([0-9]{1,3})$")
_ALIAS_RE = re.compile(r"^[A-Z0-9_]+$")
_MAC_RE = re.compile(r"^([0-9A-Fa-f]{2}[:-]){5}[0-9A-Fa-f]{2}$")


def is_ipv4(value: str) -> bool:
    m = _IPV4_RE.match(value)
    return bool(m) and all(int(octet) <= 255 for octet in m.groups())


def is_alias_name(value: str) -> bool:
    return bool(_ALIAS_RE.match(value))


def is_mac(value: str) -> bool:
    return bool(_MAC_RE.match(value or ""))


def normalize_mac(value: str) -> str:
    return value.strip().lower().replace("-", ":")


def classify(raw: Any) -> ClassifiedIdentifier:
    if not isinstance(raw, str):
        raise InvalidIdentifier("Identifier must be a string")
    value = raw.strip()
    if not value:
        raise InvalidIdentifier()

    if is_ipv4(value):
        kind = IdentifierKind.IP
    elif is_alias_name(value):
        kind = IdentifierKind.ALIAS
    else:
        kind = IdentifierKind.HOSTNAME
    return ClassifiedIdentifier(kind=kind, value=value)


def find_lease_by_hostname(leases: List[Lease], hostname: str) -> Optional[Lease]:
    # first match in snapshot order; the appliance gives no tie-break
    wanted = hostname.lower()
    for lease in leases:
        if lease.hostname and lease.hostname.lower() == wanted and lease.ip:
            return lease
    return None


class IdentifierResolver:
    def __init__(self, appliance: ApplianceRepository):
        self.appliance = appliance

    def resolve(self, identifier: ClassifiedIdentifier) -> str:
        """
        Return the value that goes into the blocklist.

        Raises:
            AliasNotFound: alias name unknown to the appliance
            HostnameUnresolved: no lease carries that hostname
        """
        if identifier.kind == IdentifierKind.IP:
            return identifier.value

        if identifier.kind == IdentifierKind.ALIAS:
            if self.appliance.find_alias(identifier.value) is None:
                raise AliasNotFound(identifier.value)
            return identifier.value

        lease = find_lease_by_hostname(self.appliance.list_leases(), identifier.value)
        if lease is None:
            raise HostnameUnresolved(identifier.value)
        return lease.ip
