"""Environment-sourced configuration."""

from __future__ import annotations

import socket

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SITE_SCOPE = "staging-local.example.com"
DEFAULT_PRODUCTION_DOMAIN = "example.com"
DEFAULT_API_BASE_URL = "https://api.cloudflare.com/client/v4"
DEFAULT_TIMEOUT = 30.0


class PurgeSettings(BaseSettings):
    """Credentials and scope for one purge operation.

    Every instantiation reads the process environment again, so a fresh
    ``PurgeSettings()`` always reflects the current deployment. Fields can
    also be passed by name, e.g. ``PurgeSettings(auth_key="...")``.
    """

    model_config = SettingsConfigDict(
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    auth_key: str = Field(default="", validation_alias="CF_KEY")
    email: str = Field(default="", validation_alias="CF_EMAIL")
    zone_id: str = Field(default="", validation_alias="CF_ZONE_ID")
    site_scope: str = Field(
        default=DEFAULT_SITE_SCOPE, validation_alias="DOMAIN_CURRENT_SITE"
    )
    log_path: str | None = Field(default=None, validation_alias="CF_LOG_PATH")
    production_domain: str = Field(
        default=DEFAULT_PRODUCTION_DOMAIN, validation_alias="CF_PRODUCTION_DOMAIN"
    )
    site_url: str | None = Field(default=None, validation_alias="CF_SITE_URL")
    server_name: str = Field(
        default_factory=socket.gethostname, validation_alias="SERVER_NAME"
    )
    api_base_url: str = Field(
        default=DEFAULT_API_BASE_URL, validation_alias="CF_API_BASE_URL"
    )
    timeout: float = Field(default=DEFAULT_TIMEOUT, validation_alias="CF_TIMEOUT")

    @property
    def is_production(self) -> bool:
        """True when tags are shared with no environment prefix."""
        return self.site_scope == self.production_domain

    @property
    def purge_url(self) -> str:
        return f"{self.api_base_url.rstrip('/')}/zones/{self.zone_id}/purge_cache"

    def headers(self) -> dict[str, str]:
        """Build request headers for the purge endpoint."""
        return {
            "X-Auth-Email": self.email,
            "X-Auth-Key": self.auth_key,
            "Content-Type": "application/json",
        }


__all__ = [
    "DEFAULT_API_BASE_URL",
    "DEFAULT_PRODUCTION_DOMAIN",
    "DEFAULT_SITE_SCOPE",
    "DEFAULT_TIMEOUT",
    "PurgeSettings",
]
