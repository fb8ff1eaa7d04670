"""
policylink.integrations.registry - Integration Registry

Turns a set of optional service URLs into a set of optional, ready-to-use
adapters. Built once at startup and passed explicitly to whatever needs an
integration; there is no module-level instance.

A slot is either a fully constructed adapter or None. There is no stand-in
or no-op adapter for a missing URL: callers check for None and decide
whether a missing integration is a skip or a configuration gap.

Usage:
    >>> integrations = Integrations.from_config(get_settings())
    >>> if integrations.observatory is not None:
    ...     result = await integrations.observatory.emit_evaluation_event(event)
    ...     if not result.success and integrations.fail_on_error:
    ...         raise result.error
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any

import httpx

from policylink.integrations.config_manager import ConfigManagerAdapter
from policylink.integrations.costops import CostOpsAdapter
from policylink.integrations.edge_agent import EdgeAgentAdapter
from policylink.integrations.governance import GovernanceAdapter
from policylink.integrations.incident_manager import IncidentManagerAdapter
from policylink.integrations.observatory import ObservatoryAdapter
from policylink.integrations.schema_registry import SchemaRegistryAdapter
from policylink.integrations.sentinel import SentinelAdapter
from policylink.integrations.shield import ShieldAdapter

if TYPE_CHECKING:
    from policylink.settings import IntegrationSettings

logger = logging.getLogger(__name__)


class IntegrationKind(StrEnum):
    """The nine integration slots. Values match the Integrations attribute names."""

    SHIELD = "shield"
    COSTOPS = "costops"
    GOVERNANCE = "governance"
    EDGE_AGENT = "edge_agent"
    INCIDENT_MANAGER = "incident_manager"
    SENTINEL = "sentinel"
    SCHEMA_REGISTRY = "schema_registry"
    CONFIG_MANAGER = "config_manager"
    OBSERVATORY = "observatory"


# Services this one consumes configuration, schemas and telemetry from.
UPSTREAM_KINDS: frozenset[IntegrationKind] = frozenset(
    {
        IntegrationKind.SCHEMA_REGISTRY,
        IntegrationKind.CONFIG_MANAGER,
        IntegrationKind.OBSERVATORY,
    }
)

Adapter = (
    ShieldAdapter
    | CostOpsAdapter
    | GovernanceAdapter
    | EdgeAgentAdapter
    | IncidentManagerAdapter
    | SentinelAdapter
    | SchemaRegistryAdapter
    | ConfigManagerAdapter
    | ObservatoryAdapter
)


@dataclass(frozen=True)
class Integrations:
    """
    Zero-or-one adapter per integration slot.

    Frozen: slots are fixed at construction and adapters are never rebuilt.
    ``fail_on_error`` is carried for callers; the registry never acts on it.
    """

    shield: ShieldAdapter | None = None
    costops: CostOpsAdapter | None = None
    governance: GovernanceAdapter | None = None
    edge_agent: EdgeAgentAdapter | None = None
    incident_manager: IncidentManagerAdapter | None = None
    sentinel: SentinelAdapter | None = None
    schema_registry: SchemaRegistryAdapter | None = None
    config_manager: ConfigManagerAdapter | None = None
    observatory: ObservatoryAdapter | None = None

    fail_on_error: bool = False

    @classmethod
    def from_config(
        cls,
        config: IntegrationSettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> Integrations:
        """
        Build the registry from configuration.

        Every slot whose URL is set gets an adapter; every other slot stays
        None. Performs no I/O and always succeeds: URLs are not validated
        here, a bad one shows up as a TransportError on first use.

        Args:
            config: IntegrationSettings, or any object with the same attributes.
            transport: Optional httpx transport handed to every adapter.

        Returns:
            Integrations with the configured slots populated.
        """
        timeout = config.timeout

        def build(url: str | None, factory: type[Any], **kwargs: Any) -> Any:
            if not url:
                return None
            return factory(url, timeout, transport=transport, **kwargs)

        integrations = cls(
            shield=build(config.shield_url, ShieldAdapter),
            costops=build(config.costops_url, CostOpsAdapter),
            governance=build(config.governance_url, GovernanceAdapter),
            edge_agent=build(config.edge_agent_url, EdgeAgentAdapter),
            incident_manager=build(
                config.incident_manager_url,
                IncidentManagerAdapter,
                service_name=config.service_name,
            ),
            sentinel=build(config.sentinel_url, SentinelAdapter, service_name=config.service_name),
            schema_registry=build(config.schema_registry_url, SchemaRegistryAdapter),
            config_manager=build(
                config.config_manager_url,
                ConfigManagerAdapter,
                namespace=config.config_namespace,
            ),
            observatory=build(
                config.observatory_url,
                ObservatoryAdapter,
                service_name=config.service_name,
            ),
            fail_on_error=config.fail_on_error,
        )

        configured = [str(kind) for kind in integrations.configured_kinds()]
        logger.info(
            f"Integrations configured: {', '.join(configured) or 'none'}",
            extra={"configured": configured, "timeout_seconds": timeout},
        )
        return integrations

    @classmethod
    def empty(cls) -> Integrations:
        """Registry with every slot empty."""
        return cls()

    def get(self, kind: IntegrationKind) -> Adapter | None:
        """Return the adapter in slot *kind*, or None if it is not configured."""
        return getattr(self, IntegrationKind(kind).value)

    def configured_kinds(self) -> list[IntegrationKind]:
        """Populated slots, in declaration order."""
        return [kind for kind in IntegrationKind if self.get(kind) is not None]

    def any_configured(self) -> bool:
        """True if at least one slot is populated."""
        return any(self.get(kind) is not None for kind in IntegrationKind)

    def any_upstream_configured(self) -> bool:
        """True if Schema Registry, Config Manager or Observatory is populated."""
        return any(self.get(kind) is not None for kind in UPSTREAM_KINDS)

    async def health_report(self) -> dict[IntegrationKind, bool]:
        """
        Probe every configured adapter concurrently.

        Absent slots are left out of the report. Health results are
        informational; nothing in the registry changes because of them.
        """
        kinds = self.configured_kinds()
        adapters = [adapter for kind in kinds if (adapter := self.get(kind)) is not None]
        results = await asyncio.gather(*(adapter.health_check() for adapter in adapters))
        return dict(zip(kinds, results, strict=True))
