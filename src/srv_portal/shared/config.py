"""Centralized configuration for the SRV portal.

All settings come from the environment (or a ``.env`` file) using the
deployment variable names ``DOMAINS``,
``PORTAL_DOMAIN``, ``CF_API_TOKEN``, ``CF_ZONE_ID``, ``PORTAL_PASSWD`` and
``DEBUG_MODE``.
"""

from functools import lru_cache
from typing import Any, Dict, List

from pydantic import ConfigDict, Field, field_validator, model_validator
from pydantic_settings import BaseSettings

from ..routing.overrides import VALID_REDIRECT_STATUSES
from ..routing.patterns import derive_portal_domain, parse_domain_list

# Seconds between SRV record refreshes
CACHE_TTL_SECONDS = 300

DEFAULT_PORTAL_PASSWORD = "11111111"


class Settings(BaseSettings):
    """SRV portal settings."""

    # Managed domains and portal
    domains: str = Field(default="", alias="DOMAINS")  # "*.nat.example.com,d1.example.com"
    portal_domain: str = Field(default="", alias="PORTAL_DOMAIN")
    portal_password: str = Field(default=DEFAULT_PORTAL_PASSWORD, alias="PORTAL_PASSWD")
    debug_mode: bool = Field(default=False, alias="DEBUG_MODE")

    # Cloudflare API (record source)
    cf_api_token: str = Field(default="", alias="CF_API_TOKEN")
    cf_zone_id: str = Field(default="", alias="CF_ZONE_ID")
    cf_api_base_url: str = Field(default="https://api.cloudflare.com/client/v4", alias="CF_API_BASE_URL")
    cf_api_timeout: float = Field(default=10.0, gt=0, alias="CF_API_TIMEOUT")

    # Routing
    default_redirect_status: int = Field(default=302, alias="DEFAULT_REDIRECT_STATUS")
    refresh_failure_backoff: float = Field(default=0.0, ge=0, alias="REFRESH_FAILURE_BACKOFF")

    # Portal liveness probes
    health_check_timeout: float = Field(default=2.0, gt=0, alias="HEALTH_CHECK_TIMEOUT")
    health_check_verify_tls: bool = Field(default=False, alias="HEALTH_CHECK_VERIFY_TLS")

    # Server
    server_host: str = Field(default="0.0.0.0", alias="SERVER_HOST")
    http_port: int = Field(default=8080, ge=1, le=65535, alias="HTTP_PORT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    model_config = ConfigDict(
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator('default_redirect_status')
    @classmethod
    def validate_redirect_status(cls, v: int) -> int:
        """Only permanent/temporary redirect codes are allowed."""
        if v not in VALID_REDIRECT_STATUSES:
            raise ValueError(f"DEFAULT_REDIRECT_STATUS must be one of {VALID_REDIRECT_STATUSES}, got {v}")
        return v

    @field_validator('portal_password')
    @classmethod
    def default_empty_password(cls, v: str) -> str:
        """An empty PORTAL_PASSWD falls back to the default password."""
        return v.strip() or DEFAULT_PORTAL_PASSWORD

    @model_validator(mode='after')
    def fill_portal_domain(self) -> 'Settings':
        """Derive the portal domain from DOMAINS when not set."""
        self.portal_domain = self.portal_domain.strip().lower()
        if not self.portal_domain:
            self.portal_domain = derive_portal_domain(self.domain_list).lower()
        return self

    @property
    def domain_list(self) -> List[str]:
        """Managed domain patterns in configuration order."""
        return parse_domain_list(self.domains)

    @property
    def cache_ttl(self) -> int:
        return CACHE_TTL_SECONDS

    @property
    def has_api_credentials(self) -> bool:
        return bool(self.cf_api_token and self.cf_zone_id)

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug_mode else self.log_level.upper()

    def summary(self) -> Dict[str, Any]:
        """Configuration dump for logs and the debug view, secrets masked."""
        return {
            "domain_list": self.domain_list,
            "portal_domain": self.portal_domain,
            "cf_api_token": "****" if self.cf_api_token else "",
            "cf_zone_id": self.cf_zone_id,
            "cache_ttl": self.cache_ttl,
            "default_redirect_status": self.default_redirect_status,
            "debug_mode": self.debug_mode,
        }


@lru_cache()
def get_settings() -> Settings:
    """Get the validated settings instance."""
    return Settings()
