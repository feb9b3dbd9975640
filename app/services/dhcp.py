# app/services/dhcp.py
from ipaddress import IPv4Address, IPv4Network
from typing import List, Optional

from fastapi import Depends

from app.core.config import Settings, get_settings
from app.core.deps import get_appliance
from app.core.exceptions import InvalidIdentifier, NotFoundError, ValidationError
from app.repositories.base import ApplianceRepository
from app.schemas.appliance import StaticMapping
from app.schemas.dhcp import StaticMappingIn
from app.services.identifier import is_ipv4, is_mac, normalize_mac
from app.utils.logger import get_logger

logger = get_logger(__name__)


def _parse_ipv4(value: Optional[str]) -> Optional[IPv4Address]:
    # dotted quad only; ipaddress also rejects leading zeros ("192.168.001.20")
    if not value or not is_ipv4(value):
        return None
    try:
        return IPv4Address(value)
    except ValueError:
        return None


def _parse_network(address: Optional[IPv4Address], prefix: Optional[int]) -> Optional[IPv4Network]:
    if address is None or prefix is None:
        return None
    try:
        return IPv4Network(f"{address}/{prefix}", strict=False)
    except ValueError:
        logger.warning(f"Ignoring invalid interface subnet {address}/{prefix}")
        return None


class DhcpService:
    """
    Static DHCP reservations on the configured interface.

    Changes are staged; apply the "dhcp" subsystem to activate them.
    """

    def __init__(
        self,
        appliance: ApplianceRepository = Depends(get_appliance),
        settings: Settings = Depends(get_settings),
    ):
        self.appliance = appliance
        self.interface = settings.dhcp_interface

    def list_static_mappings(self) -> List[StaticMapping]:
        return self.appliance.list_static_mappings(self.interface)

    def validate_static_ip(self, ip: str, current_ip: Optional[str] = None) -> Optional[str]:
        """Return a human readable reason the IP can't be reserved, or None."""
        ip = (ip or "").strip()
        addr = _parse_ipv4(ip)
        if addr is None:
            return "Invalid IP address format"

        iface = self.appliance.interface_config(self.interface)
        router = _parse_ipv4(iface.ipaddr)
        network = _parse_network(router, iface.subnet)
        if network is not None:
            if addr not in network:
                return f"IP address must be within {network}"
            if network.prefixlen < 31 and addr in (network.network_address, network.broadcast_address):
                return "IP address cannot be the network or broadcast address"
            if addr == router:
                return "IP address is used by the router interface"

        server = self.appliance.dhcp_server_config(self.interface)
        low, high = _parse_ipv4(server.range_from), _parse_ipv4(server.range_to)
        if low is not None and high is not None and low <= addr <= high:
            return f"IP address must be outside the DHCP range ({server.range_from} - {server.range_to})"

        for mapping in self.list_static_mappings():
            if mapping.ip == ip and ip != current_ip:
                return f"IP address already reserved for {mapping.hostname or mapping.mac}"

        return None

    def set_static_mapping(self, payload: StaticMappingIn) -> StaticMapping:
        """
        Create a reservation, or move the MAC's existing one.

        Raises:
            InvalidIdentifier: malformed MAC
            ValidationError: IP rejected by validate_static_ip
        """
        if not is_mac(payload.mac):
            raise InvalidIdentifier("Invalid MAC address format")

        existing = self._find(payload.mac)
        error = self.validate_static_ip(payload.ip, existing.ip if existing else None)
        if error:
            raise ValidationError(error)

        hostname = payload.hostname.strip() if payload.hostname else None
        if existing is not None:
            return self.appliance.update_static_mapping(
                self.interface, existing.id, existing.mac, payload.ip.strip(), hostname
            )
        return self.appliance.create_static_mapping(self.interface, payload.mac, payload.ip.strip(), hostname)

    def delete_static_mapping(self, mac: str) -> None:
        existing = self._find(mac)
        if existing is None:
            raise NotFoundError(f"No static mapping for {mac}")
        self.appliance.delete_static_mapping(self.interface, existing.id)

    def _find(self, mac: str) -> Optional[StaticMapping]:
        if not mac:
            return None
        key = normalize_mac(mac)
        for mapping in self.list_static_mappings():
            if normalize_mac(mapping.mac) == key:
                return mapping
        return None
