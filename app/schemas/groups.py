from typing import List, Optional, Union

from pydantic import BaseModel, Field

from app.schemas.blocklist import GroupBlockStatus


class GroupCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=31, examples=["GUEST_DEVICES"])
    addresses: List[str] = Field(default_factory=list, examples=[["192.168.1.50", "laptop.local"]])
    description: str = Field(default="", max_length=255)


class GroupUpdate(BaseModel):
    addresses: List[str]
    description: Optional[str] = Field(default=None, max_length=255)


class MembershipUpdate(BaseModel):
    groups: List[str] = Field(default_factory=list, examples=[["KIDS", "IOT"]])


class GroupOut(BaseModel):
    id: Optional[Union[int, str]] = None
    name: str
    type: str
    description: str = ""
    members: List[str] = Field(default_factory=list)
    block_status: GroupBlockStatus
