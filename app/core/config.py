# app/core/config.py
from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "pfSense-Manager-API"
    app_version: str = "0.1.0"
    debug: bool = False

    # pfSense REST API (v2)
    pfsense_url: str = ""
    pfsense_username: str = ""
    pfsense_password: str = ""
    pfsense_verify_ssl: bool = False  # appliances usually ship self-signed certs
    pfsense_timeout: float = 15.0

    blocked_alias_name: str = "BLOCKED"
    # CSV of alias names the generic membership API must never touch
    protected_aliases: str = ""
    dhcp_interface: str = "lan"

    # Shared secret for the /api routes
    admin_password: str = ""

    # CSV, defaults to localhost:5173 (vite dev server)
    cors_origins: str = "http://localhost:5173"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def protected_alias_names(self) -> List[str]:
        return [a.strip() for a in self.protected_aliases.split(",") if a.strip()]

    @property
    def cors_origin_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    def masked_password(self) -> str:
        if not self.pfsense_password:
            return "(not set)"
        return "***" + self.pfsense_password[-3:]


@lru_cache
def get_settings() -> Settings:
    return Settings()
