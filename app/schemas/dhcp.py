from typing import Optional

from pydantic import BaseModel, Field


class StaticMappingIn(BaseModel):
    mac: str = Field(..., examples=["aa:bb:cc:dd:ee:ff"])
    ip: str = Field(..., examples=["192.168.1.20"])
    hostname: Optional[str] = Field(default=None, max_length=63)


class ValidateIPIn(BaseModel):
    ip: str
    current_ip: Optional[str] = None


class ValidateIPOut(BaseModel):
    valid: bool
    error: Optional[str] = None
