"""
Records read from / written to the pfSense REST API (v2).

Field names follow our own conventions; `validation_alias` lets the models be
built straight from the appliance's JSON (`descr`, `address`, `ip_address`,
`ipaddr`, ...).
"""
from typing import Any, List, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


def _as_list(value: Any) -> List[str]:
    # v2 returns arrays; older builds return a space separated string
    if value is None:
        return []
    if isinstance(value, str):
        return value.split()
    return [str(v) if v is not None else "" for v in value]


class Alias(BaseModel):
    id: Optional[Union[int, str]] = None
    name: str
    type: str = "host"
    description: str = Field("", validation_alias=AliasChoices("description", "descr"))
    members: List[str] = Field(default_factory=list, validation_alias=AliasChoices("members", "address"))
    details: List[str] = Field(default_factory=list, validation_alias=AliasChoices("details", "detail"))

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("members", "details", mode="before")
    @classmethod
    def _coerce_list(cls, value):
        return _as_list(value)

    @field_validator("description", mode="before")
    @classmethod
    def _coerce_description(cls, value):
        return value or ""


class Lease(BaseModel):
    mac: Optional[str] = None
    ip: Optional[str] = None
    hostname: Optional[str] = None
    state: Optional[str] = Field(None, validation_alias=AliasChoices("state", "active_status"))
    starts: Optional[str] = None
    ends: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)


class ArpEntry(BaseModel):
    mac: Optional[str] = Field(None, validation_alias=AliasChoices("mac", "mac_address"))
    ip: Optional[str] = Field(None, validation_alias=AliasChoices("ip", "ip_address"))
    hostname: Optional[str] = None
    interface: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)


class StaticMapping(BaseModel):
    id: Optional[Union[int, str]] = None
    mac: str
    ip: Optional[str] = Field(None, validation_alias=AliasChoices("ip", "ipaddr"))
    hostname: Optional[str] = None
    description: Optional[str] = Field(None, validation_alias=AliasChoices("description", "descr"))

    model_config = ConfigDict(populate_by_name=True)


class DhcpServerConfig(BaseModel):
    interface: str
    range_from: Optional[str] = None
    range_to: Optional[str] = None


class InterfaceConfig(BaseModel):
    interface: str
    ipaddr: Optional[str] = None
    subnet: Optional[int] = None

    @field_validator("subnet", mode="before")
    @classmethod
    def _coerce_subnet(cls, value):
        if value in (None, ""):
            return None
        return int(value)


class ApplyStatus(BaseModel):
    """Answer of GET <subsystem>/apply."""
    applied: bool = True
    pending_subsystems: List[str] = Field(default_factory=list)

    @field_validator("pending_subsystems", mode="before")
    @classmethod
    def _coerce_pending(cls, value):
        return _as_list(value)
