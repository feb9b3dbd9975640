# app/repositories/pfsense.py
from typing import Any, Dict, List, Optional, Sequence

from app.core.exceptions import ValidationError
from app.core.pfsense_client import PfSenseClient
from app.repositories.base import AliasId, ApplianceRepository
from app.schemas.appliance import (
    Alias,
    ApplyStatus,
    ArpEntry,
    DhcpServerConfig,
    InterfaceConfig,
    Lease,
    StaticMapping,
)
from app.utils.logger import get_logger, log_execution_time

logger = get_logger(__name__)

# subsystem -> REST path of its apply endpoint
APPLY_PATHS = {
    "firewall": "/firewall/apply",
    "dhcp": "/services/dhcp_server/apply",
}


class PfSenseRepository(ApplianceRepository):
    """ApplianceRepository backed by the pfSense REST API v2."""

    def __init__(self, client: PfSenseClient):
        self.client = client

    # --- firewall aliases -------------------------------------------------

    @log_execution_time
    def list_aliases(self) -> List[Alias]:
        rows = self.client.get("/firewall/aliases", params={"limit": 0}) or []
        return [Alias.model_validate(row) for row in rows]

    @log_execution_time
    def replace_alias(
        self,
        alias_id: AliasId,
        addresses: Sequence[str],
        details: Sequence[str],
        description: Optional[str] = None,
    ) -> None:
        body: Dict[str, Any] = {"id": alias_id, "address": list(addresses), "detail": list(details)}
        if description is not None:
            body["descr"] = description
        self.client.patch("/firewall/alias", json=body)
        logger.info(f"[pfSense] alias id={alias_id} replaced with {len(body['address'])} entries")

    def create_alias(
        self,
        name: str,
        addresses: Sequence[str],
        details: Sequence[str],
        description: str = "",
        alias_type: str = "host",
    ) -> Alias:
        row = self.client.post(
            "/firewall/alias",
            json={
                "name": name,
                "type": alias_type,
                "descr": description,
                "address": list(addresses),
                "detail": list(details),
            },
        )
        logger.info(f"[pfSense] alias {name} created")
        if isinstance(row, dict) and row.get("name"):
            return Alias.model_validate(row)
        return Alias(name=name, type=alias_type, description=description,
                     members=list(addresses), details=list(details))

    def delete_alias(self, alias_id: AliasId) -> None:
        self.client.delete("/firewall/alias", params={"id": alias_id})
        logger.info(f"[pfSense] alias id={alias_id} deleted")

    # --- status -------------------------------------------------------------

    @log_execution_time
    def list_leases(self) -> List[Lease]:
        rows = self.client.get("/status/dhcp_server/leases", params={"limit": 0, "offset": 0}) or []
        return [Lease.model_validate(row) for row in rows]

    @log_execution_time
    def list_arp_table(self) -> List[ArpEntry]:
        rows = self.client.get("/diagnostics/arp_table", params={"limit": 0}) or []
        return [ArpEntry.model_validate(row) for row in rows]

    def system_info(self) -> Dict[str, Any]:
        return self.client.get("/status/system") or {}

    # --- apply ---------------------------------------------------------------

    def _apply_path(self, name: str) -> str:
        try:
            return APPLY_PATHS[name]
        except KeyError:
            raise ValidationError(f"Invalid service type: {name}") from None

    @log_execution_time(level="INFO")
    def apply_subsystem(self, name: str) -> None:
        self.client.post(self._apply_path(name))
        logger.info(f"[pfSense] {name} changes applied")

    def pending_status(self, name: str) -> ApplyStatus:
        row = self.client.get(self._apply_path(name)) or {}
        return ApplyStatus.model_validate(row)

    # --- DHCP server -------------------------------------------------------

    def list_static_mappings(self, interface: str) -> List[StaticMapping]:
        rows = self.client.get(
            "/services/dhcp_server/static_mappings", params={"parent_id": interface, "limit": 0}
        ) or []
        return [StaticMapping.model_validate(row) for row in rows]

    def create_static_mapping(self, interface: str, mac: str, ip: str, hostname: Optional[str] = None) -> StaticMapping:
        body = {"parent_id": interface, "mac": mac, "ipaddr": ip}
        if hostname:
            body["hostname"] = hostname
        row = self.client.post("/services/dhcp_server/static_mapping", json=body)
        logger.info(f"[pfSense] static mapping {mac} -> {ip} created on {interface}")
        return StaticMapping.model_validate(row if isinstance(row, dict) and row.get("mac") else body)

    def update_static_mapping(
        self, interface: str, mapping_id: AliasId, mac: str, ip: str, hostname: Optional[str] = None
    ) -> StaticMapping:
        body = {"parent_id": interface, "id": mapping_id, "mac": mac, "ipaddr": ip}
        if hostname:
            body["hostname"] = hostname
        row = self.client.patch("/services/dhcp_server/static_mapping", json=body)
        logger.info(f"[pfSense] static mapping {mac} -> {ip} updated on {interface}")
        return StaticMapping.model_validate(row if isinstance(row, dict) and row.get("mac") else body)

    def delete_static_mapping(self, interface: str, mapping_id: AliasId) -> None:
        self.client.delete(
            "/services/dhcp_server/static_mapping", params={"parent_id": interface, "id": mapping_id}
        )
        logger.info(f"[pfSense] static mapping id={mapping_id} deleted on {interface}")

    def dhcp_server_config(self, interface: str) -> DhcpServerConfig:
        row = self.client.get("/services/dhcp_server", params={"id": interface}) or {}
        return DhcpServerConfig(
            interface=interface,
            range_from=row.get("range_from") or None,
            range_to=row.get("range_to") or None,
        )

    def interface_config(self, interface: str) -> InterfaceConfig:
        row = self.client.get("/interface", params={"id": interface}) or {}
        return InterfaceConfig(interface=interface, ipaddr=row.get("ipaddr"), subnet=row.get("subnet"))
