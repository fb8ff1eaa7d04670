"""
CostOps adapter - budget enforcement and cost tracking.

Wire fields are camelCase.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any
from urllib.parse import urlencode

import httpx

from policylink.integrations.base import CamelCaseModel, IntegrationResult, IntegrationTransport
from policylink.integrations.client import IntegrationClient


class CostTrackingRequest(CamelCaseModel):
    """Usage of one LLM call, to be priced and recorded."""

    provider: str
    model: str
    input_tokens: int
    output_tokens: int
    user_id: str | None = None
    team_id: str | None = None
    project_id: str | None = None
    metadata: dict[str, Any] = {}


class CostBreakdown(CamelCaseModel):
    input_cost: float
    output_cost: float


class BudgetStatus(CamelCaseModel):
    remaining: float
    limit: float
    percentage: float


class CostTrackingResult(CamelCaseModel):
    cost: float
    currency: str = "USD"
    breakdown: CostBreakdown
    budget_status: BudgetStatus | None = None


class BudgetCheckRequest(CamelCaseModel):
    """Pre-flight budget check for an estimated cost."""

    user_id: str | None = None
    team_id: str | None = None
    project_id: str | None = None
    estimated_cost: float


class BudgetCheckResult(CamelCaseModel):
    allowed: bool
    remaining: float
    limit: float
    percentage: float
    warning: str | None = None


class CostSummary(CamelCaseModel):
    total: float
    currency: str = "USD"
    breakdown: dict[str, float] = {}


class CostOpsAdapter:
    """Client for the CostOps cost-tracking service."""

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

    async def track_cost(
        self, request: CostTrackingRequest
    ) -> IntegrationResult[CostTrackingResult]:
        """Record the cost of an LLM call."""
        return await self._client.post("/api/v1/track", request, CostTrackingResult)

    async def check_budget(
        self, request: BudgetCheckRequest
    ) -> IntegrationResult[BudgetCheckResult]:
        """Ask whether an estimated spend fits the remaining budget."""
        return await self._client.post("/api/v1/budget/check", request, BudgetCheckResult)

    async def get_cost_summary(
        self,
        *,
        user_id: str | None = None,
        team_id: str | None = None,
        project_id: str | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> IntegrationResult[CostSummary]:
        """
        Get aggregated spend, optionally filtered.

        Only the filters that are given end up in the query string.
        """
        params = {
            "userId": user_id,
            "teamId": team_id,
            "projectId": project_id,
            "startDate": start_date.isoformat() if start_date else None,
            "endDate": end_date.isoformat() if end_date else None,
        }
        query = urlencode({k: v for k, v in params.items() if v is not None})
        path = f"/api/v1/summary?{query}" if query else "/api/v1/summary"
        return await self._client.get(path, CostSummary)

    async def health_check(self) -> bool:
        return await self._client.health_check()
