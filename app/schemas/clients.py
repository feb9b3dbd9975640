from typing import Optional

from pydantic import BaseModel


class ConnectedClient(BaseModel):
    mac: Optional[str] = None
    ip: Optional[str] = None
    hostname: str = "Unknown"
    status: str = "active"
    blocked: bool = False
    lease_end: Optional[str] = None
    interface: Optional[str] = None


class SystemSummary(BaseModel):
    hostname: Optional[str] = None
    version: Optional[str] = None
    uptime: Optional[str] = None


class OverviewStats(BaseModel):
    total_connected: int
    total_blocked: int
    active_blocked: int
    system_info: Optional[SystemSummary] = None
