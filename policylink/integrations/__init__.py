"""
Integration Layer

Uniform outbound access to the sibling platform services. Every adapter
composes one IntegrationClient and returns IntegrationResult values rather
than raising; the Integrations registry holds zero-or-one adapter per
service, decided by configuration at startup.
"""

from policylink.integrations.base import ErrorKind, IntegrationResult, IntegrationTransport
from policylink.integrations.client import IntegrationClient
from policylink.integrations.config_manager import (
    ConfigManagerAdapter,
    ConfigValue,
    ConfigValueType,
    EnforcementParams,
    FeatureFlags,
    PolicySettings,
    RuleThresholds,
)
from policylink.integrations.costops import CostOpsAdapter
from policylink.integrations.edge_agent import EdgeAgentAdapter
from policylink.integrations.exceptions import (
    DecodeError,
    IntegrationError,
    RemoteError,
    RequestTimeoutError,
    TransportError,
)
from policylink.integrations.governance import GovernanceAdapter
from policylink.integrations.incident_manager import IncidentManagerAdapter
from policylink.integrations.observatory import (
    DecisionOutcome,
    ObservatoryAdapter,
    PolicyDecisionRecord,
    PolicyEvaluationEvent,
    TelemetrySignals,
    TraceContext,
)
from policylink.integrations.registry import UPSTREAM_KINDS, IntegrationKind, Integrations
from policylink.integrations.schema_registry import (
    SchemaDefinition,
    SchemaRegistryAdapter,
    SchemaType,
    ValidationResult,
)
from policylink.integrations.sentinel import SentinelAdapter
from policylink.integrations.shield import ShieldAdapter

__all__ = [
    "UPSTREAM_KINDS",
    "ConfigManagerAdapter",
    "ConfigValue",
    "ConfigValueType",
    "CostOpsAdapter",
    "DecisionOutcome",
    "DecodeError",
    "EdgeAgentAdapter",
    "EnforcementParams",
    "ErrorKind",
    "FeatureFlags",
    "GovernanceAdapter",
    "IncidentManagerAdapter",
    "IntegrationClient",
    "IntegrationError",
    "IntegrationKind",
    "IntegrationResult",
    "IntegrationTransport",
    "Integrations",
    "ObservatoryAdapter",
    "PolicyDecisionRecord",
    "PolicyEvaluationEvent",
    "PolicySettings",
    "RemoteError",
    "RequestTimeoutError",
    "RuleThresholds",
    "SchemaDefinition",
    "SchemaRegistryAdapter",
    "SchemaType",
    "SentinelAdapter",
    "ShieldAdapter",
    "TelemetrySignals",
    "TraceContext",
    "TransportError",
    "ValidationResult",
]
