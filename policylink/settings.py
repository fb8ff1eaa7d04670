"""
policylink.settings - Integration Configuration

Loads service URLs and the shared integration timeout from .env files and
environment variables using pydantic-settings. Service URLs use the names
the rest of the platform already exports (LLM_SHIELD_URL, SENTINEL_URL, ...);
everything else is POLICYLINK_* prefixed.

A URL that is unset or empty means "integration disabled": the registry
leaves that slot empty.

Usage:
    >>> from policylink.settings import get_settings
    >>> from policylink.integrations import Integrations
    >>> integrations = Integrations.from_config(get_settings())
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_URL_FIELDS = (
    "shield_url",
    "costops_url",
    "governance_url",
    "edge_agent_url",
    "incident_manager_url",
    "sentinel_url",
    "schema_registry_url",
    "config_manager_url",
    "observatory_url",
)


class IntegrationSettings(BaseSettings):
    """Integration configuration loaded from .env / environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="POLICYLINK_",
        extra="ignore",
        populate_by_name=True,
    )

    # -- Service URLs (standard names via alias, no prefix) --------------------
    shield_url: str | None = Field(default=None, alias="LLM_SHIELD_URL")
    costops_url: str | None = Field(default=None, alias="LLM_COSTOPS_URL")
    governance_url: str | None = Field(default=None, alias="LLM_GOVERNANCE_URL")
    edge_agent_url: str | None = Field(default=None, alias="LLM_EDGE_AGENT_URL")
    incident_manager_url: str | None = Field(default=None, alias="INCIDENT_MANAGER_URL")
    sentinel_url: str | None = Field(default=None, alias="SENTINEL_URL")

    # Upstream services this one consumes from
    schema_registry_url: str | None = Field(default=None, alias="LLM_SCHEMA_REGISTRY_URL")
    config_manager_url: str | None = Field(default=None, alias="LLM_CONFIG_MANAGER_URL")
    observatory_url: str | None = Field(default=None, alias="LLM_OBSERVATORY_URL")

    # -- Behaviour -------------------------------------------------------------
    timeout_ms: int = Field(default=5000, gt=0)
    fail_on_error: bool = False
    config_namespace: str = "policy-engine"
    service_name: str = "llm-policy-engine"

    # -- Logging ---------------------------------------------------------------
    log_level: str = "INFO"

    # -- Validators ------------------------------------------------------------

    @field_validator(*_URL_FIELDS, mode="before")
    @classmethod
    def _blank_url_is_unset(cls, value: Any) -> Any:
        """Treat an empty or whitespace-only URL as not configured."""
        if isinstance(value, str) and not value.strip():
            return None
        return value

    # -- Helpers ---------------------------------------------------------------

    @property
    def timeout(self) -> float:
        """Integration timeout in seconds."""
        return self.timeout_ms / 1000


# ---------------------------------------------------------------------------
# Singleton accessor
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_settings() -> IntegrationSettings:
    """Return the cached IntegrationSettings singleton."""
    return IntegrationSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for tests)."""
    get_settings.cache_clear()
