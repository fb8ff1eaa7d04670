"""
Shield adapter - prompt injection and threat detection.

Wire fields are camelCase.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

import httpx

from policylink.integrations.base import (
    CamelCaseModel,
    IntegrationResult,
    IntegrationTransport,
    Severity,
)
from policylink.integrations.client import IntegrationClient


class ThreatType(StrEnum):
    PROMPT_INJECTION = "prompt_injection"
    JAILBREAK = "jailbreak"
    DATA_EXFILTRATION = "data_exfiltration"
    PII_LEAKAGE = "pii_leakage"
    TOXIC_CONTENT = "toxic_content"


class ShieldScanRequest(CamelCaseModel):
    """A prompt to scan."""

    prompt: str
    model: str | None = None
    context: dict[str, Any] = {}


class ThreatLocation(CamelCaseModel):
    start: int
    end: int


class ShieldThreat(CamelCaseModel):
    """A threat detected in a prompt."""

    type: ThreatType
    severity: Severity
    confidence: float
    details: str
    location: ThreatLocation | None = None


class ShieldScanResult(CamelCaseModel):
    """Verdict for a single prompt."""

    safe: bool
    threats: list[ShieldThreat] = []
    score: float = 1.0
    scan_time_ms: int = 0


class BatchScanRequest(CamelCaseModel):
    requests: list[ShieldScanRequest]


class BatchScanResult(CamelCaseModel):
    results: list[ShieldScanResult] = []


class ShieldAdapter:
    """Client for the Shield threat-detection service."""

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

    async def scan_prompt(self, request: ShieldScanRequest) -> IntegrationResult[ShieldScanResult]:
        """Scan a single prompt for threats."""
        return await self._client.post("/api/v1/scan", request, ShieldScanResult)

    async def scan_batch(
        self, requests: list[ShieldScanRequest]
    ) -> IntegrationResult[BatchScanResult]:
        """Scan several prompts in one call."""
        return await self._client.post(
            "/api/v1/scan/batch", BatchScanRequest(requests=requests), BatchScanResult
        )

    async def health_check(self) -> bool:
        return await self._client.health_check()
