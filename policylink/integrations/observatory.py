"""
Observatory adapter - evaluation telemetry and trace context.

Emits policy evaluation events and decision records to the Observatory,
registers evaluation spans, and reads back the aggregated telemetry that
can feed into policy decisions (error rates, latency percentiles, cost).

Consumes from the Observatory only; none of these types are the
Observatory's own internal types.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any
from urllib.parse import urlencode

import httpx
from pydantic import BaseModel, Field

from policylink.integrations.base import IntegrationResult, IntegrationTransport
from policylink.integrations.client import IntegrationClient

DEFAULT_SERVICE_NAME = "llm-policy-engine"
DEFAULT_SIGNAL_WINDOW_SECONDS = 300

# W3C trace-flags bit for "sampled"
TRACE_FLAG_SAMPLED = 0x01


class DecisionOutcome(StrEnum):
    ALLOW = "allow"
    DENY = "deny"
    WARN = "warn"
    MODIFY = "modify"
    ERROR = "error"


class SpanKind(StrEnum):
    INTERNAL = "INTERNAL"
    SERVER = "SERVER"
    CLIENT = "CLIENT"
    PRODUCER = "PRODUCER"
    CONSUMER = "CONSUMER"


class SpanStatus(StrEnum):
    UNSET = "UNSET"
    OK = "OK"
    ERROR = "ERROR"


class SignalType(StrEnum):
    ERROR_RATE = "error_rate"
    LATENCY = "latency"
    REQUEST_RATE = "request_rate"
    TOKEN_USAGE = "token_usage"
    COST = "cost"
    AVAILABILITY = "availability"


class HealthStatus(StrEnum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"
    UNKNOWN = "unknown"


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


class PolicyEvaluationEvent(BaseModel):
    """One policy evaluation, as reported to the Observatory."""

    event_id: str
    timestamp: str  # ISO 8601
    trace_id: str | None = None
    span_id: str | None = None
    policy_id: str
    rule_id: str | None = None
    decision: DecisionOutcome
    duration_ms: float
    cached: bool = False
    context: dict[str, str] = {}
    labels: dict[str, str] = {}


class BatchEventRequest(BaseModel):
    service: str
    events: list[PolicyEvaluationEvent]


class EventAck(BaseModel):
    accepted: bool
    event_id: str | None = None


class BatchEventAck(BaseModel):
    accepted_count: int
    rejected_count: int
    rejected_ids: list[str] = []


# ---------------------------------------------------------------------------
# Tracing
# ---------------------------------------------------------------------------


class TraceContext(BaseModel):
    trace_id: str
    parent_span_id: str | None = None
    trace_flags: int = 0
    trace_state: str | None = None  # W3C tracestate
    baggage: dict[str, str] = {}

    @classmethod
    def create(cls, trace_id: str) -> TraceContext:
        """New sampled context for *trace_id*."""
        return cls(trace_id=trace_id, trace_flags=TRACE_FLAG_SAMPLED)

    @property
    def is_sampled(self) -> bool:
        return bool(self.trace_flags & TRACE_FLAG_SAMPLED)


class PolicySpan(BaseModel):
    name: str
    trace_id: str
    parent_span_id: str | None = None
    start_time: str  # ISO 8601
    kind: SpanKind = SpanKind.INTERNAL
    attributes: dict[str, Any] = {}


class SpanRegistration(BaseModel):
    span_id: str
    registered_at: str


class SpanResult(BaseModel):
    end_time: str  # ISO 8601
    status: SpanStatus
    status_message: str | None = None
    attributes: dict[str, Any] = {}


# ---------------------------------------------------------------------------
# Telemetry signals
# ---------------------------------------------------------------------------


class TelemetrySignalRequest(BaseModel):
    service: str
    model: str | None = None
    provider: str | None = None
    time_window_seconds: int = DEFAULT_SIGNAL_WINDOW_SECONDS
    signal_types: list[SignalType] = []


class LatencyPercentiles(BaseModel):
    p50: float | None = None
    p90: float | None = None
    p95: float | None = None
    p99: float | None = None


class TokenUsage(BaseModel):
    input_tokens: int
    output_tokens: int
    total_tokens: int


class TelemetrySignals(BaseModel):
    timestamp: str
    time_window_seconds: int
    error_rate: float | None = None  # percentage
    latency_percentiles: LatencyPercentiles = Field(default_factory=LatencyPercentiles)
    request_rate: float | None = None  # per second
    token_usage: TokenUsage | None = None
    cost: float | None = None
    availability: float | None = None  # percentage


class CurrentMetrics(BaseModel):
    timestamp: str
    service: str
    model: str | None = None
    active_requests: int
    error_count: int  # last minute
    avg_latency_ms: float  # last minute
    health_status: HealthStatus


class TelemetryThreshold(BaseModel):
    signal_type: SignalType
    operator: str  # gt, lt, eq, gte, lte
    value: float


class TelemetrySubscription(BaseModel):
    name: str
    services: list[str] = []
    signal_types: list[SignalType] = []
    callback_url: str | None = None
    threshold: TelemetryThreshold | None = None


class SubscriptionAck(BaseModel):
    subscription_id: str
    active: bool


# ---------------------------------------------------------------------------
# Decision analytics
# ---------------------------------------------------------------------------


class PolicyDecisionRecord(BaseModel):
    decision_id: str
    timestamp: str
    user_id: str | None = None
    model: str | None = None
    provider: str | None = None
    policy_id: str
    decision: DecisionOutcome
    latency_ms: float
    reason: str | None = None
    metadata: dict[str, Any] = {}


class RecordAck(BaseModel):
    accepted: bool
    record_id: str | None = None


class ObservatoryAdapter:
    """
    Client for the Observatory telemetry service.

    Trace and span IDs are placed into paths verbatim; callers must pass
    URL-safe identifiers.
    """

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
            base_url: Observatory root URL.
            timeout: Per-call budget in seconds.
            service_name: Name this service reports its telemetry under.
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

    async def emit_evaluation_event(
        self, event: PolicyEvaluationEvent
    ) -> IntegrationResult[EventAck]:
        """Send one evaluation event for aggregation."""
        return await self._client.post("/api/v1/events/policy-evaluation", event, EventAck)

    async def emit_evaluation_events_batch(
        self, events: list[PolicyEvaluationEvent]
    ) -> IntegrationResult[BatchEventAck]:
        """Send several evaluation events attributed to this service."""
        request = BatchEventRequest(service=self._service_name, events=events)
        return await self._client.post("/api/v1/events/batch", request, BatchEventAck)

    async def get_trace_context(self, trace_id: str) -> IntegrationResult[TraceContext]:
        """Fetch the distributed trace context for *trace_id*."""
        return await self._client.get(f"/api/v1/traces/{trace_id}/context", TraceContext)

    async def register_span(self, span: PolicySpan) -> IntegrationResult[SpanRegistration]:
        return await self._client.post("/api/v1/spans/register", span, SpanRegistration)

    async def complete_span(self, span_id: str, result: SpanResult) -> IntegrationResult[None]:
        """Close a span. The response body is ignored."""
        return await self._client.post(f"/api/v1/spans/{span_id}/complete", result, None)

    async def get_telemetry_signals(
        self, request: TelemetrySignalRequest
    ) -> IntegrationResult[TelemetrySignals]:
        """Aggregated telemetry that may influence policy decisions."""
        return await self._client.post("/api/v1/signals/query", request, TelemetrySignals)

    async def get_current_metrics(
        self, service: str, model: str | None = None
    ) -> IntegrationResult[CurrentMetrics]:
        params = {"service": service, "model": model}
        query = urlencode({k: v for k, v in params.items() if v is not None})
        return await self._client.get(f"/api/v1/metrics/current?{query}", CurrentMetrics)

    async def subscribe_telemetry(
        self, request: TelemetrySubscription
    ) -> IntegrationResult[SubscriptionAck]:
        return await self._client.post("/api/v1/subscriptions/telemetry", request, SubscriptionAck)

    async def record_decision(self, decision: PolicyDecisionRecord) -> IntegrationResult[RecordAck]:
        """Record a policy decision for analytics."""
        return await self._client.post("/api/v1/analytics/decisions", decision, RecordAck)

    async def health_check(self) -> bool:
        return await self._client.health_check()
