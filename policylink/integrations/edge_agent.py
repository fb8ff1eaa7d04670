"""
Edge Agent adapter - policy distribution to edge locations.

Wire fields are camelCase. Policies travel as opaque JSON objects; their
shape belongs to the policy engine, not to this adapter.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

import httpx

from policylink.integrations.base import CamelCaseModel, IntegrationResult, IntegrationTransport
from policylink.integrations.client import IntegrationClient


class DeploymentStatus(StrEnum):
    PENDING = "pending"
    DEPLOYED = "deployed"
    FAILED = "failed"


class EdgeDeploymentRequest(CamelCaseModel):
    policy: dict[str, Any]
    regions: list[str]
    priority: int | None = None


class EdgeRegionStatus(CamelCaseModel):
    region: str
    status: DeploymentStatus
    endpoint: str | None = None
    error: str | None = None


class EdgeDeploymentResult(CamelCaseModel):
    deployment_id: str
    status: DeploymentStatus
    regions: list[EdgeRegionStatus] = []


class EdgeSyncRequest(CamelCaseModel):
    policy_ids: list[str] | None = None
    force: bool | None = None


class EdgeSyncResult(CamelCaseModel):
    synced: int = 0
    failed: int = 0
    errors: list[str] = []


class EdgeLocations(CamelCaseModel):
    locations: list[str] = []


class EdgeAgentAdapter:
    """Client for the Edge Agent distribution service."""

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

    async def deploy_policy(
        self, request: EdgeDeploymentRequest
    ) -> IntegrationResult[EdgeDeploymentResult]:
        """Push a policy to the given regions."""
        return await self._client.post("/api/v1/deploy", request, EdgeDeploymentResult)

    async def sync_policies(self, request: EdgeSyncRequest) -> IntegrationResult[EdgeSyncResult]:
        """Reconcile edge copies with the central policy store."""
        return await self._client.post("/api/v1/sync", request, EdgeSyncResult)

    async def get_deployment_status(
        self, deployment_id: str
    ) -> IntegrationResult[EdgeDeploymentResult]:
        return await self._client.get(f"/api/v1/deployments/{deployment_id}", EdgeDeploymentResult)

    async def get_edge_locations(self) -> IntegrationResult[EdgeLocations]:
        return await self._client.get("/api/v1/locations", EdgeLocations)

    async def health_check(self) -> bool:
        return await self._client.health_check()
