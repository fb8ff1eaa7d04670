"""
Sentinel adapter - security event reporting and anomaly monitoring.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any
from urllib.parse import urlencode

import httpx
from pydantic import BaseModel

from policylink.integrations.base import IntegrationResult, IntegrationTransport, Severity
from policylink.integrations.client import IntegrationClient

DEFAULT_SERVICE_NAME = "llm-policy-engine"
DEFAULT_ANOMALY_WINDOW_SECONDS = 300


class ThreatLevelName(StrEnum):
    LOW = "low"
    ELEVATED = "elevated"
    HIGH = "high"
    CRITICAL = "critical"


class SecurityEvent(BaseModel):
    """A security-relevant observation made during policy evaluation."""

    event_id: str
    timestamp: str  # ISO 8601
    event_type: str
    severity: Severity
    policy_id: str | None = None
    user_id: str | None = None
    details: dict[str, Any] = {}


class SecurityEventAck(BaseModel):
    accepted: bool
    event_id: str | None = None


class BatchSecurityEventRequest(BaseModel):
    source: str
    events: list[SecurityEvent]


class BatchSecurityEventAck(BaseModel):
    accepted_count: int
    rejected_count: int
    rejected_ids: list[str] = []


class ThreatLevel(BaseModel):
    service: str
    level: ThreatLevelName = ThreatLevelName.LOW
    score: float = 0.0
    updated_at: str | None = None


class Anomaly(BaseModel):
    anomaly_id: str
    anomaly_type: str
    severity: Severity
    detected_at: str
    description: str | None = None


class SentinelAdapter:
    """Client for the Sentinel security-monitoring service."""

    def __init__(
        self,
        base_url: str,
        timeout: float,
        *,
        service_name: str = DEFAULT_SERVICE_NAME,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
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

    async def report_security_event(
        self, event: SecurityEvent
    ) -> IntegrationResult[SecurityEventAck]:
        return await self._client.post("/api/v1/events/security", event, SecurityEventAck)

    async def report_security_events_batch(
        self, events: list[SecurityEvent]
    ) -> IntegrationResult[BatchSecurityEventAck]:
        request = BatchSecurityEventRequest(source=self._service_name, events=events)
        return await self._client.post(
            "/api/v1/events/security/batch", request, BatchSecurityEventAck
        )

    async def get_threat_level(self, service: str) -> IntegrationResult[ThreatLevel]:
        """Current threat level Sentinel assigns to *service*."""
        return await self._client.get(f"/api/v1/threat-level/{service}", ThreatLevel)

    async def list_anomalies(
        self,
        service: str,
        window_seconds: int = DEFAULT_ANOMALY_WINDOW_SECONDS,
    ) -> IntegrationResult[list[Anomaly]]:
        """Anomalies detected for *service* in the trailing window."""
        query = urlencode({"service": service, "window_seconds": window_seconds})
        return await self._client.get(f"/api/v1/anomalies?{query}", list[Anomaly])

    async def health_check(self) -> bool:
        return await self._client.health_check()
