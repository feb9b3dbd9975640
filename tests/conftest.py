"""Pytest configuration and shared fixtures"""
from typing import Any, Dict, List, Optional, Sequence

import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings, get_settings
from app.core.deps import get_appliance
from app.core.exceptions import UpstreamUnavailable
from app.repositories.base import ApplianceRepository
from app.schemas.appliance import (
    Alias,
    ApplyStatus,
    ArpEntry,
    DhcpServerConfig,
    InterfaceConfig,
    Lease,
    StaticMapping,
)

ADMIN_PASSWORD = "s3cret-admin"


class FakeAppliance(ApplianceRepository):
    """In-memory pfSense: holds aliases/leases/mappings and records every write."""

    def __init__(self):
        self.aliases: List[Alias] = []
        self.leases: List[Lease] = []
        self.arp: List[ArpEntry] = []
        self.static_mappings: List[StaticMapping] = []
        self.interface = InterfaceConfig(interface="lan", ipaddr="192.168.1.1", subnet=24)
        self.dhcp = DhcpServerConfig(interface="lan", range_from="192.168.1.100", range_to="192.168.1.199")
        self.system: Dict[str, Any] = {"hostname": "pfsense", "version": "2.7.2", "uptime": "3 days"}
        self.pending: Dict[str, ApplyStatus] = {
            "firewall": ApplyStatus(applied=True),
            "dhcp": ApplyStatus(applied=True),
        }

        self.replace_calls: List[Dict[str, Any]] = []
        self.apply_calls: List[str] = []
        self.deleted_aliases: List[Any] = []

        self.fail_reads = False
        self.fail_writes = False
        self.fail_apply = False
        self.fail_system = False

    # --- seeding helpers ---------------------------------------------------

    def add_alias(self, name, members=(), details=None, description="", alias_type="host") -> Alias:
        members = list(members)
        alias = Alias(
            id=len(self.aliases),
            name=name,
            type=alias_type,
            description=description,
            members=members,
            details=list(details) if details is not None else [""] * len(members),
        )
        self.aliases.append(alias)
        return alias

    def add_lease(self, mac, ip, hostname=None, state="active") -> None:
        self.leases.append(Lease(mac=mac, ip=ip, hostname=hostname, state=state))

    def alias(self, name) -> Optional[Alias]:
        return next((a for a in self.aliases if a.name == name), None)

    def _check_read(self):
        if self.fail_reads:
            raise UpstreamUnavailable("pfSense unreachable: ConnectError")

    def _check_write(self):
        if self.fail_writes:
            raise UpstreamUnavailable("pfSense rejected PATCH /firewall/alias (500)", status_code=500)

    # --- ApplianceRepository -------------------------------------------------

    def list_aliases(self) -> List[Alias]:
        self._check_read()
        return [a.model_copy(deep=True) for a in self.aliases]

    def replace_alias(self, alias_id, addresses: Sequence[str], details: Sequence[str], description=None) -> None:
        self._check_write()
        assert len(addresses) == len(details), "address/detail arrays out of step"
        self.replace_calls.append({"id": alias_id, "address": list(addresses), "detail": list(details)})
        for idx, alias in enumerate(self.aliases):
            if alias.id == alias_id:
                update = {"members": list(addresses), "details": list(details)}
                if description is not None:
                    update["description"] = description
                self.aliases[idx] = alias.model_copy(update=update)
                return
        raise UpstreamUnavailable("pfSense rejected PATCH /firewall/alias (404)", status_code=404)

    def create_alias(self, name, addresses, details, description="", alias_type="host") -> Alias:
        self._check_write()
        return self.add_alias(name, addresses, details, description, alias_type)

    def delete_alias(self, alias_id) -> None:
        self._check_write()
        self.deleted_aliases.append(alias_id)
        self.aliases = [a for a in self.aliases if a.id != alias_id]

    def list_leases(self) -> List[Lease]:
        self._check_read()
        return list(self.leases)

    def list_arp_table(self) -> List[ArpEntry]:
        self._check_read()
        return list(self.arp)

    def system_info(self) -> Dict[str, Any]:
        if self.fail_system:
            raise UpstreamUnavailable("pfSense rejected GET /status/system (500)", status_code=500)
        return dict(self.system)

    def apply_subsystem(self, name: str) -> None:
        if self.fail_apply:
            raise UpstreamUnavailable("pfSense rejected POST /firewall/apply (500)", status_code=500)
        self.apply_calls.append(name)

    def pending_status(self, name: str) -> ApplyStatus:
        self._check_read()
        return self.pending[name]

    def list_static_mappings(self, interface: str) -> List[StaticMapping]:
        self._check_read()
        return list(self.static_mappings)

    def create_static_mapping(self, interface, mac, ip, hostname=None) -> StaticMapping:
        self._check_write()
        mapping = StaticMapping(id=len(self.static_mappings), mac=mac, ip=ip, hostname=hostname)
        self.static_mappings.append(mapping)
        return mapping

    def update_static_mapping(self, interface, mapping_id, mac, ip, hostname=None) -> StaticMapping:
        self._check_write()
        mapping = StaticMapping(id=mapping_id, mac=mac, ip=ip, hostname=hostname)
        self.static_mappings = [mapping if m.id == mapping_id else m for m in self.static_mappings]
        return mapping

    def delete_static_mapping(self, interface, mapping_id) -> None:
        self._check_write()
        self.static_mappings = [m for m in self.static_mappings if m.id != mapping_id]

    def dhcp_server_config(self, interface: str) -> DhcpServerConfig:
        self._check_read()
        return self.dhcp

    def interface_config(self, interface: str) -> InterfaceConfig:
        self._check_read()
        return self.interface


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        pfsense_url="https://pfsense.test",
        pfsense_username="api",
        pfsense_password="api-password",
        blocked_alias_name="BLOCKED",
        protected_aliases="LAN_SERVERS",
        admin_password=ADMIN_PASSWORD,
    )


@pytest.fixture
def appliance() -> FakeAppliance:
    """Appliance with an empty BLOCKED alias and a few leases."""
    fake = FakeAppliance()
    fake.add_alias("BLOCKED", description="Blocked devices")
    fake.add_lease("aa:bb:cc:00:00:01", "192.168.1.50", "laptop")
    fake.add_lease("aa:bb:cc:00:00:02", "192.168.1.51", "Phone.local")
    return fake


@pytest.fixture
def client(appliance, settings):
    from main import app

    app.dependency_overrides[get_appliance] = lambda: appliance
    app.dependency_overrides[get_settings] = lambda: settings
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> Dict[str, str]:
    return {"Authorization": f"Bearer {ADMIN_PASSWORD}"}
