"""
policylink - Outbound integration layer for the LLM policy engine

Calls the sibling platform services (Shield, CostOps, Governance, Edge Agent,
Incident Manager, Sentinel, Schema Registry, Config Manager, Observatory)
over HTTP with one timeout, error-classification and health-check contract.

Example:
    >>> from policylink import Integrations, get_settings
    >>> integrations = Integrations.from_config(get_settings())
    >>> integrations.any_configured()
    False
"""

__version__ = "0.1.0"
__license__ = "Apache-2.0"

from policylink.integrations import IntegrationKind, IntegrationResult, Integrations
from policylink.settings import IntegrationSettings, get_settings

__all__ = [
    "IntegrationKind",
    "IntegrationResult",
    "IntegrationSettings",
    "Integrations",
    "__version__",
    "get_settings",
]
