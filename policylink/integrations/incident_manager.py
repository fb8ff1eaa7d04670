"""
Incident Manager adapter - alerting on policy violations.
"""

from __future__ import annotations

from enum import StrEnum

import httpx
from pydantic import BaseModel

from policylink.integrations.base import IntegrationResult, IntegrationTransport, Severity
from policylink.integrations.client import IntegrationClient

DEFAULT_SERVICE_NAME = "llm-policy-engine"


class IncidentStatus(StrEnum):
    OPEN = "open"
    ACKNOWLEDGED = "acknowledged"
    RESOLVED = "resolved"


class IncidentReport(BaseModel):
    """A policy violation worth paging someone about."""

    title: str
    severity: Severity
    policy_id: str
    description: str | None = None
    rule_id: str | None = None
    decision_id: str | None = None
    labels: dict[str, str] = {}


class IncidentAck(BaseModel):
    incident_id: str
    created: bool = True


class BatchIncidentRequest(BaseModel):
    source: str
    incidents: list[IncidentReport]


class BatchIncidentAck(BaseModel):
    created_count: int
    rejected_count: int
    incident_ids: list[str] = []


class Incident(BaseModel):
    incident_id: str
    title: str
    severity: Severity
    status: IncidentStatus
    created_at: str | None = None
    resolved_at: str | None = None


class IncidentResolution(BaseModel):
    resolution: str
    resolved_by: str | None = None


class IncidentManagerAdapter:
    """Client for the Incident Manager alerting service."""

    def __init__(
        self,
        base_url: str,
        timeout: float,
        *,
        service_name: str = DEFAULT_SERVICE_NAME,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Args:
            base_url: Incident Manager root URL.
            timeout: Per-call budget in seconds.
            service_name: Source name attached to batch submissions.
            transport: Optional httpx transport override.
        """
        self._client: IntegrationTransport = IntegrationClient(
            base_url, timeout, transport=transport
        )
        self._base_url = base_url
        self._service_name = service_name

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def service_name(self) -> str:
        return self._service_name

    async def create_incident(self, report: IncidentReport) -> IntegrationResult[IncidentAck]:
        return await self._client.post("/api/v1/incidents", report, IncidentAck)

    async def create_incidents_batch(
        self, reports: list[IncidentReport]
    ) -> IntegrationResult[BatchIncidentAck]:
        request = BatchIncidentRequest(source=self._service_name, incidents=reports)
        return await self._client.post("/api/v1/incidents/batch", request, BatchIncidentAck)

    async def get_incident(self, incident_id: str) -> IntegrationResult[Incident]:
        return await self._client.get(f"/api/v1/incidents/{incident_id}", Incident)

    async def resolve_incident(
        self, incident_id: str, resolution: IncidentResolution
    ) -> IntegrationResult[Incident]:
        return await self._client.post(
            f"/api/v1/incidents/{incident_id}/resolve", resolution, Incident
        )

    async def health_check(self) -> bool:
        return await self._client.health_check()
