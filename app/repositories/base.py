from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence, Union

from app.schemas.appliance import (
    Alias,
    ApplyStatus,
    ArpEntry,
    DhcpServerConfig,
    InterfaceConfig,
    Lease,
    StaticMapping,
)

AliasId = Union[int, str]


class ApplianceRepository(ABC):
    """
    Everything the services need from the appliance.

    The appliance owns all state: implementations read full snapshots and
    write whole resources back, they never cache between calls.
    """

    # --- firewall aliases -------------------------------------------------

    @abstractmethod
    def list_aliases(self) -> List[Alias]:
        ...

    def find_alias(self, name: str) -> Optional[Alias]:
        for alias in self.list_aliases():
            if alias.name == name:
                return alias
        return None

    @abstractmethod
    def replace_alias(
        self,
        alias_id: AliasId,
        addresses: Sequence[str],
        details: Sequence[str],
        description: Optional[str] = None,
    ) -> None:
        """Overwrite the alias' address and detail arrays in one write."""

    @abstractmethod
    def create_alias(
        self,
        name: str,
        addresses: Sequence[str],
        details: Sequence[str],
        description: str = "",
        alias_type: str = "host",
    ) -> Alias:
        ...

    @abstractmethod
    def delete_alias(self, alias_id: AliasId) -> None:
        ...

    # --- status -------------------------------------------------------------

    @abstractmethod
    def list_leases(self) -> List[Lease]:
        ...

    @abstractmethod
    def list_arp_table(self) -> List[ArpEntry]:
        ...

    @abstractmethod
    def system_info(self) -> Dict[str, Any]:
        ...

    # --- apply ---------------------------------------------------------------

    @abstractmethod
    def apply_subsystem(self, name: str) -> None:
        """Activate staged changes of `name` ("firewall" or "dhcp")."""

    @abstractmethod
    def pending_status(self, name: str) -> ApplyStatus:
        ...

    # --- DHCP server -------------------------------------------------------

    @abstractmethod
    def list_static_mappings(self, interface: str) -> List[StaticMapping]:
        ...

    @abstractmethod
    def create_static_mapping(self, interface: str, mac: str, ip: str, hostname: Optional[str] = None) -> StaticMapping:
        ...

    @abstractmethod
    def update_static_mapping(
        self, interface: str, mapping_id: AliasId, mac: str, ip: str, hostname: Optional[str] = None
    ) -> StaticMapping:
        ...

    @abstractmethod
    def delete_static_mapping(self, interface: str, mapping_id: AliasId) -> None:
        ...

    @abstractmethod
    def dhcp_server_config(self, interface: str) -> DhcpServerConfig:
        ...

    @abstractmethod
    def interface_config(self, interface: str) -> InterfaceConfig:
        ...
