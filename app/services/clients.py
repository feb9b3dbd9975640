# app/services/clients.py
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Tuple

from fastapi import Depends

from app.core.config import Settings, get_settings
from app.core.deps import get_appliance
from app.core.exceptions import ClientNotFound, InvalidIdentifier
from app.models.enums import IdentifierKind
from app.repositories.base import ApplianceRepository
from app.schemas.appliance import ArpEntry, Lease
from app.schemas.blocklist import BlockedSet, BlockResult
from app.schemas.clients import ConnectedClient, OverviewStats, SystemSummary
from app.services.blocklist import BlocklistService
from app.services.identifier import is_ipv4, is_mac, normalize_mac
from app.utils.logger import get_logger

logger = get_logger(__name__)

# leases + ARP table + blocked set
_FAN_OUT = 3


def _is_blocked(blocked: BlockedSet, ip: Optional[str], mac: Optional[str]) -> bool:
    if ip and ip in blocked:
        return True
    if mac:
        key = normalize_mac(mac)
        return any(is_mac(a) and normalize_mac(a) == key for a in blocked.addresses)
    return False


def merge_clients(leases: List[Lease], arp_table: List[ArpEntry], blocked: BlockedSet) -> List[ConnectedClient]:
    """DHCP leases first, then ARP entries for devices without a lease, one row per MAC."""
    clients: List[ConnectedClient] = []
    seen = set()

    for lease in leases:
        if not lease.mac or normalize_mac(lease.mac) in seen:
            continue
        seen.add(normalize_mac(lease.mac))
        clients.append(ConnectedClient(
            mac=lease.mac,
            ip=lease.ip,
            hostname=lease.hostname or "Unknown",
            status=lease.state or "active",
            blocked=_is_blocked(blocked, lease.ip, lease.mac),
            lease_end=lease.ends,
        ))

    for arp in arp_table:
        if not arp.mac or normalize_mac(arp.mac) in seen:
            continue
        seen.add(normalize_mac(arp.mac))
        clients.append(ConnectedClient(
            mac=arp.mac,
            ip=arp.ip,
            hostname=arp.hostname or "Unknown",
            status="active",
            blocked=_is_blocked(blocked, arp.ip, arp.mac),
            interface=arp.interface,
        ))

    return clients


class ClientService:
    def __init__(
        self,
        appliance: ApplianceRepository = Depends(get_appliance),
        settings: Settings = Depends(get_settings),
    ):
        self.appliance = appliance
        self.settings = settings
        self.blocklist = BlocklistService(appliance, settings)

    def _snapshot(self) -> Tuple[List[Lease], List[ArpEntry], BlockedSet]:
        # independent reads: fan out, fan in
        with ThreadPoolExecutor(max_workers=_FAN_OUT) as pool:
            leases = pool.submit(self.appliance.list_leases)
            arp = pool.submit(self.appliance.list_arp_table)
            blocked = pool.submit(self.blocklist.load_blocked_set)
            return leases.result(), arp.result(), blocked.result()

    def connected_clients(self) -> List[ConnectedClient]:
        leases, arp_table, blocked = self._snapshot()
        return merge_clients(leases, arp_table, blocked)

    def blocked_clients(self) -> List[ConnectedClient]:
        leases, arp_table, blocked = self._snapshot()
        clients = merge_clients(leases, arp_table, blocked)
        result = [c for c in clients if c.blocked]

        known_ips = {c.ip for c in clients if c.ip}
        known_macs = {normalize_mac(c.mac) for c in clients if c.mac}
        for value in blocked.addresses:
            if is_ipv4(value) and value not in known_ips:
                result.append(ConnectedClient(ip=value, hostname="Not connected", status="offline", blocked=True))
            elif is_mac(value) and normalize_mac(value) not in known_macs:
                result.append(ConnectedClient(mac=value, hostname="Not connected", status="offline", blocked=True))
        return result

    def _ip_for_mac(self, mac: str) -> Optional[str]:
        key = normalize_mac(mac)
        for lease in self.appliance.list_leases():
            if lease.mac and normalize_mac(lease.mac) == key and lease.ip:
                return lease.ip
        for arp in self.appliance.list_arp_table():
            if arp.mac and normalize_mac(arp.mac) == key and arp.ip:
                return arp.ip
        return None

    def block_client(self, mac: str) -> BlockResult:
        """
        Block the device currently holding `mac` by its IP.

        Raises:
            InvalidIdentifier: malformed MAC
            ClientNotFound: no lease or ARP entry for the MAC
        """
        if not is_mac(mac):
            raise InvalidIdentifier("Invalid MAC address format")
        ip = self._ip_for_mac(mac)
        if ip is None:
            raise ClientNotFound(mac)
        return self.blocklist.block(ip)

    def unblock_client(self, mac: str) -> BlockResult:
        if not is_mac(mac):
            raise InvalidIdentifier("Invalid MAC address format")
        ip = self._ip_for_mac(mac)
        if ip is not None:
            return self.blocklist.unblock(ip)

        # offline device: only a MAC entry left over from older tooling can match
        key = normalize_mac(mac)
        blocked = self.blocklist.load_blocked_set()
        for value in blocked.addresses:
            if is_mac(value) and normalize_mac(value) == key:
                return self.blocklist.unblock_value(value, IdentifierKind.IP)
        raise ClientNotFound(mac)

    def overview(self) -> OverviewStats:
        leases, arp_table, blocked = self._snapshot()
        clients = merge_clients(leases, arp_table, blocked)

        system = None
        try:
            info = self.appliance.system_info()
            system = SystemSummary(
                hostname=info.get("hostname"),
                version=info.get("version") or info.get("platform"),
                uptime=str(info["uptime"]) if info.get("uptime") is not None else None,
            )
        except Exception as e:
            logger.warning(f"System info unavailable: {e}")

        return OverviewStats(
            total_connected=len(clients),
            total_blocked=len(blocked.entries),
            active_blocked=sum(1 for c in clients if c.blocked),
            system_info=system,
        )
