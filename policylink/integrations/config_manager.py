"""
Config Manager adapter - dynamic enforcement parameters and feature flags.

Consumes from the Config Manager only; nothing here is re-exported back to
it. Response models fill omitted fields with the same defaults the Config
Manager documents for its wire format. ``RuleThresholds.fallback()`` and
``PolicySettings.fallback()`` give the values a caller should use when no
Config Manager is configured at all; they differ from the wire defaults.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

import httpx
from pydantic import BaseModel, Field

from policylink.integrations.base import IntegrationResult, IntegrationTransport
from policylink.integrations.client import IntegrationClient

DEFAULT_NAMESPACE = "policy-engine"


class ConfigValueType(StrEnum):
    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"
    SECRET = "secret"


class ConfigMetadata(BaseModel):
    version: int = 0
    modified_at: str | None = None
    modified_by: str | None = None
    source: str | None = None


class ConfigValue(BaseModel):
    """A single configuration value."""

    key: str
    value: Any
    value_type: ConfigValueType
    metadata: ConfigMetadata = Field(default_factory=ConfigMetadata)


class BatchConfigRequest(BaseModel):
    namespace: str
    keys: list[str]


class RateLimitConfig(BaseModel):
    enabled: bool = False
    requests_per_second: int = 1000
    burst_size: int = 100


class EnforcementParams(BaseModel):
    """Knobs that govern how policy decisions are enforced."""

    strict_mode: bool = False
    default_decision: str = "deny"  # used when no rule matches
    max_evaluation_time_ms: int = 100
    fail_open: bool = False
    audit_level: str = "standard"
    rate_limits: RateLimitConfig = Field(default_factory=RateLimitConfig)


class RuleThresholds(BaseModel):
    cost_threshold: float = 0.0
    token_limit: int = 0
    request_rate_limit: int = 0
    latency_threshold_ms: int = 0
    error_rate_threshold: float = 0.0  # percentage
    custom: dict[str, Any] = {}

    @classmethod
    def fallback(cls) -> RuleThresholds:
        """Thresholds to apply when no Config Manager is available."""
        return cls(
            cost_threshold=100.0,
            token_limit=100_000,
            request_rate_limit=1000,
            latency_threshold_ms=5000,
            error_rate_threshold=5.0,
        )


class PolicySettings(BaseModel):
    enabled_namespaces: list[str] = []
    disabled_policies: list[str] = []
    priority_overrides: dict[str, int] = {}
    environment: str = ""
    cache_ttl_seconds: int = 300
    hot_reload_enabled: bool = True

    @classmethod
    def fallback(cls) -> PolicySettings:
        """Settings to apply when no Config Manager is available."""
        return cls(enabled_namespaces=["default"], environment="production")


class FeatureFlags(BaseModel):
    parallel_evaluation: bool = True
    cel_enabled: bool = True
    wasm_enabled: bool = False
    distributed_cache: bool = False
    advanced_telemetry: bool = True
    custom: dict[str, bool] = {}


class ConfigVersion(BaseModel):
    version: int
    modified_at: str
    checksum: str | None = None


class AccessValidationRequest(BaseModel):
    """RBAC question: may *subject* perform *action* on *resource*?"""

    subject: str
    resource: str
    action: str
    context: dict[str, str] = {}


class AccessValidationResult(BaseModel):
    allowed: bool
    reason: str | None = None
    policies: list[str] = []


class ConfigManagerAdapter:
    """
    Client for consuming configuration from the Config Manager.

    All keys are read from a single namespace fixed at construction.
    There is no watch or push channel; get_config_version() is meant to be
    polled by callers that want to notice changes.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float,
        *,
        namespace: str = DEFAULT_NAMESPACE,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Args:
            base_url: Config Manager root URL.
            timeout: Per-call budget in seconds.
            namespace: Configuration namespace this service reads from.
            transport: Optional httpx transport override.
        """
        self._client: IntegrationTransport = IntegrationClient(
            base_url, timeout, transport=transport
        )
        self._base_url = base_url
        self._namespace = namespace

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def namespace(self) -> str:
        return self._namespace

    async def get_config(self, key: str) -> IntegrationResult[ConfigValue]:
        """Get one configuration value by key."""
        return await self._client.get(f"/api/v1/config/{self._namespace}/{key}", ConfigValue)

    async def get_configs(self, keys: list[str]) -> IntegrationResult[dict[str, ConfigValue]]:
        """Get several configuration values in one call, keyed by name."""
        request = BatchConfigRequest(namespace=self._namespace, keys=list(keys))
        return await self._client.post("/api/v1/config/batch", request, dict[str, ConfigValue])

    async def get_enforcement_params(self) -> IntegrationResult[EnforcementParams]:
        return await self._client.get(
            f"/api/v1/config/{self._namespace}/enforcement", EnforcementParams
        )

    async def get_rule_thresholds(self) -> IntegrationResult[RuleThresholds]:
        return await self._client.get(
            f"/api/v1/config/{self._namespace}/thresholds", RuleThresholds
        )

    async def get_policy_settings(self) -> IntegrationResult[PolicySettings]:
        return await self._client.get(
            f"/api/v1/config/{self._namespace}/policy-settings", PolicySettings
        )

    async def get_feature_flags(self) -> IntegrationResult[FeatureFlags]:
        return await self._client.get(f"/api/v1/config/{self._namespace}/features", FeatureFlags)

    async def get_config_version(self) -> IntegrationResult[ConfigVersion]:
        """Current configuration version, for change polling."""
        return await self._client.get(f"/api/v1/config/{self._namespace}/version", ConfigVersion)

    async def validate_access(
        self, request: AccessValidationRequest
    ) -> IntegrationResult[AccessValidationResult]:
        return await self._client.post("/api/v1/rbac/validate", request, AccessValidationResult)

    async def health_check(self) -> bool:
        return await self._client.health_check()
