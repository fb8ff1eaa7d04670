"""
Governance adapter - compliance checks and audit logging.

Wire fields are camelCase.
"""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Any
from urllib.parse import urlencode

import httpx

from policylink.integrations.base import (
    CamelCaseModel,
    IntegrationResult,
    IntegrationTransport,
    Severity,
)
from policylink.integrations.client import IntegrationClient

DEFAULT_AUDIT_TRAIL_LIMIT = 100


class AuditOutcome(StrEnum):
    SUCCESS = "success"
    FAILURE = "failure"


class ComplianceCheckRequest(CamelCaseModel):
    provider: str
    model: str
    prompt: str | None = None
    user_id: str | None = None
    team_id: str | None = None
    region: str | None = None
    metadata: dict[str, Any] = {}


class ComplianceViolation(CamelCaseModel):
    rule: str
    severity: Severity
    description: str
    regulation: str | None = None


class ComplianceCheckResult(CamelCaseModel):
    compliant: bool
    violations: list[ComplianceViolation] = []
    recommendations: list[str] = []


class AuditLogEntry(CamelCaseModel):
    """One auditable action taken by the policy engine."""

    event_type: str
    user_id: str | None = None
    team_id: str | None = None
    resource: str
    action: str
    result: AuditOutcome
    metadata: dict[str, Any] = {}


class AuditTrail(CamelCaseModel):
    entries: list[AuditLogEntry] = []


class ModelApproval(CamelCaseModel):
    approved: bool = False


class GovernanceAdapter:
    """Client for the Governance compliance service."""

    def __init__(
        self,
        base_url: str,
        timeout: float,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client: IntegrationTransport = IntegrationClient(
            base_url, timeout, transport=transport
        )
        self._base_url = base_url

    @property
    def base_url(self) -> str:
        return self._base_url

    async def check_compliance(
        self, request: ComplianceCheckRequest
    ) -> IntegrationResult[ComplianceCheckResult]:
        return await self._client.post("/api/v1/compliance/check", request, ComplianceCheckResult)

    async def log_audit_event(self, entry: AuditLogEntry) -> IntegrationResult[None]:
        """Send an audit entry. The response body is ignored."""
        return await self._client.post("/api/v1/audit/log", entry, None)

    async def get_audit_trail(
        self,
        *,
        user_id: str | None = None,
        team_id: str | None = None,
        event_type: str | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        limit: int = DEFAULT_AUDIT_TRAIL_LIMIT,
    ) -> IntegrationResult[AuditTrail]:
        params = {
            "userId": user_id,
            "teamId": team_id,
            "eventType": event_type,
            "startDate": start_date.isoformat() if start_date else None,
            "endDate": end_date.isoformat() if end_date else None,
            "limit": limit,
        }
        query = urlencode({k: v for k, v in params.items() if v is not None})
        return await self._client.get(f"/api/v1/audit/trail?{query}", AuditTrail)

    async def is_model_approved(
        self, provider: str, model: str
    ) -> IntegrationResult[ModelApproval]:
        """Ask whether *model* from *provider* is on the approved list."""
        query = urlencode({"provider": provider, "model": model})
        return await self._client.get(f"/api/v1/models/approved?{query}", ModelApproval)

    async def health_check(self) -> bool:
        return await self._client.health_check()
