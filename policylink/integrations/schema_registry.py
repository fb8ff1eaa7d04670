"""
Schema Registry adapter - schema lookup and policy document validation.

Consumes from the Schema Registry only. The types below describe what this
service sends and receives; none of them are the registry's own internal
types.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field

from policylink.integrations.base import IntegrationResult, IntegrationTransport
from policylink.integrations.client import IntegrationClient


class SchemaType(StrEnum):
    JSON_SCHEMA = "json-schema"
    AVRO = "avro"
    PROTOBUF = "protobuf"
    OPEN_API = "open-api"


class CompatibilityLevel(StrEnum):
    NONE = "NONE"
    BACKWARD = "BACKWARD"  # new schema reads data written by the old one
    FORWARD = "FORWARD"  # old schema reads data written by the new one
    FULL = "FULL"
    BACKWARD_TRANSITIVE = "BACKWARD_TRANSITIVE"
    FORWARD_TRANSITIVE = "FORWARD_TRANSITIVE"
    FULL_TRANSITIVE = "FULL_TRANSITIVE"


class SchemaMetadata(BaseModel):
    subject: str = ""
    description: str | None = None
    owner: str | None = None
    tags: list[str] = []
    created_at: str | None = None
    updated_at: str | None = None


class SchemaDefinition(BaseModel):
    """A registered schema and its content.

    The schema body is exposed as ``content`` (``schema`` on the wire).
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    subject: str
    version: int
    schema_type: SchemaType
    content: Any = Field(alias="schema")
    metadata: SchemaMetadata = Field(default_factory=SchemaMetadata)


class PolicyDocumentSchema(BaseModel):
    """A policy document in the shape the registry validates."""

    api_version: str
    kind: str
    policies: list[Any]


class RuleSchema(BaseModel):
    id: str
    name: str
    condition: Any
    action: Any


class ValidationIssue(BaseModel):
    path: str
    message: str
    code: str | None = None


class ValidationWarning(BaseModel):
    path: str
    message: str


class ValidationResult(BaseModel):
    valid: bool
    errors: list[ValidationIssue] = []
    warnings: list[ValidationWarning] = []


class CompatibilityCheckRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    subject: str
    content: Any = Field(alias="schema")
    compatibility_level: CompatibilityLevel = CompatibilityLevel.BACKWARD


class CompatibilityIssue(BaseModel):
    issue_type: str
    description: str
    path: str | None = None


class CompatibilityResult(BaseModel):
    compatible: bool
    issues: list[CompatibilityIssue] = []


class SchemaRegistryAdapter:
    """
    Client for consuming schema definitions from the Schema Registry.

    Every method is a single call; nothing is cached here. Subjects are
    placed into paths verbatim, so callers must pass URL-safe names.
    """

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

    async def get_schema(self, subject: str) -> IntegrationResult[SchemaDefinition]:
        """Fetch the latest schema registered under *subject*."""
        return await self._client.get(f"/api/v1/schemas/{subject}/latest", SchemaDefinition)

    async def get_schema_version(
        self, subject: str, version: int
    ) -> IntegrationResult[SchemaDefinition]:
        """Fetch one specific version of a schema."""
        return await self._client.get(
            f"/api/v1/schemas/{subject}/versions/{version}", SchemaDefinition
        )

    async def validate_policy_document(
        self, document: PolicyDocumentSchema
    ) -> IntegrationResult[ValidationResult]:
        """Validate a whole policy document against the registered policy schema."""
        return await self._client.post(
            "/api/v1/validate/policy-document", document, ValidationResult
        )

    async def validate_rule_structure(
        self, rule: RuleSchema
    ) -> IntegrationResult[ValidationResult]:
        """Validate a single rule against the registered rule schema."""
        return await self._client.post("/api/v1/validate/policy-rule", rule, ValidationResult)

    async def check_compatibility(
        self, request: CompatibilityCheckRequest
    ) -> IntegrationResult[CompatibilityResult]:
        """Check whether a new schema is compatible with the registered one."""
        return await self._client.post("/api/v1/compatibility/check", request, CompatibilityResult)

    async def list_policy_schemas(self) -> IntegrationResult[list[SchemaMetadata]]:
        """List the schemas tagged as policy-related."""
        return await self._client.get("/api/v1/schemas?filter=policy", list[SchemaMetadata])

    async def health_check(self) -> bool:
        return await self._client.health_check()
