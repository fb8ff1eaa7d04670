"""
Base types shared by the transport and every adapter.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Generic, Protocol, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

if TYPE_CHECKING:
    from policylink.integrations.exceptions import IntegrationError

T = TypeVar("T")


class ErrorKind(StrEnum):
    """Classification of an integration failure."""

    TRANSPORT = "transport"
    TIMEOUT = "timeout"
    REMOTE = "remote"
    DECODE = "decode"


@dataclass(frozen=True)
class IntegrationResult(Generic[T]):
    """Result of a single integration call.

    Carries either the decoded value or the classified failure, never both.
    Adapter methods always return one of these instead of raising, so that
    each caller decides whether a given integration is best-effort or
    mandatory.
    """

    value: T | None = None
    error: IntegrationError | None = None

    @classmethod
    def ok(cls, value: T) -> IntegrationResult[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: IntegrationError) -> IntegrationResult[T]:
        return cls(error=error)

    @property
    def success(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value, or raise the carried IntegrationError."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]

    def unwrap_or(self, default: T) -> T:
        """Return the value, or *default* if the call failed."""
        if self.error is not None:
            return default
        return self.value  # type: ignore[return-value]


class IntegrationTransport(Protocol):
    """What an adapter needs from its transport.

    IntegrationClient is the production implementation; tests may hand an
    adapter any object with this shape.
    """

    async def get(self, path: str, response_type: Any) -> IntegrationResult[Any]: ...

    async def post(self, path: str, body: Any, response_type: Any) -> IntegrationResult[Any]: ...

    async def health_check(self) -> bool: ...


class CamelCaseModel(BaseModel):
    """Payload model whose wire field names are camelCase.

    Python code uses snake_case attribute names; either form is accepted
    when constructing or decoding.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Severity(StrEnum):
    """Severity scale shared by findings from several services."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"
