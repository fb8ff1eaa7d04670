"""
policylink.integrations.client - Shared integration transport

One IntegrationClient performs typed GET/POST exchanges against a fixed base
URL with a single timeout budget per call, and classifies every failure into
the taxonomy in policylink.integrations.exceptions. All nine adapters compose
one of these; none of them talk to httpx directly.

Usage:
    >>> client = IntegrationClient("http://observatory:9000", timeout=5.0)
    >>> result = await client.get("/api/v1/traces/abc/context", TraceContext)
    >>> if result.success:
    ...     ctx = result.value

Policy:
    - No retries and no backoff. A failed call is returned as data.
    - The timeout is a total deadline for the exchange, enforced with
      asyncio.wait_for on top of httpx's own per-phase timeouts.
    - Pooling and concurrency limits are whatever httpx provides.
"""

from __future__ import annotations

import asyncio
import logging
from functools import lru_cache
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from policylink.integrations.base import IntegrationResult
from policylink.integrations.exceptions import (
    DecodeError,
    IntegrationError,
    RemoteError,
    RequestTimeoutError,
    TransportError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

HEALTH_CHECK_PATH = "/health"

# Upper bound for the liveness check; the configured timeout is used if shorter.
HEALTH_CHECK_TIMEOUT = 2.0

_DEFAULT_HEADERS = {
    "Accept": "application/json",
    "User-Agent": "policylink/0.1",
}

_JSON_HEADERS = {"Content-Type": "application/json"}


@lru_cache(maxsize=256)
def _type_adapter(response_type: Any) -> TypeAdapter[Any]:
    return TypeAdapter(response_type)


def _encode_body(body: Any) -> bytes:
    """Serialize a request body to JSON bytes.

    Raises PydanticSerializationError (a ValueError) or TypeError when the
    body holds something JSON cannot represent.
    """
    if isinstance(body, BaseModel):
        return body.model_dump_json(by_alias=True, exclude_none=True).encode("utf-8")
    return _type_adapter(Any).dump_json(body)


def _error_body(response: httpx.Response) -> Any:
    """Best-effort decode of a non-success response body."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class IntegrationClient:
    """
    Typed HTTP client bound to one base URL and one timeout.

    Construction stores the endpoint descriptor and nothing else: no I/O,
    no URL parsing, so it cannot fail. A malformed base URL surfaces as a
    TransportError on the first call.

    Instances are immutable and safe to share between concurrent callers.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Args:
            base_url: Root URL of the service, e.g. "http://shield:8080".
            timeout: Per-call budget in seconds.
            transport: Optional httpx transport (tests use httpx.MockTransport).
        """
        self._base_url = base_url
        self._timeout = timeout
        self._transport = transport

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def timeout(self) -> float:
        return self._timeout

    async def get(self, path: str, response_type: type[T]) -> IntegrationResult[T]:
        """
        Issue a GET at ``base_url + path`` and decode a 2xx body into *response_type*.

        Args:
            path: Path (and optional query string) relative to the base URL.
                Identifiers interpolated into it must already be URL-safe.
            response_type: Anything pydantic's TypeAdapter accepts, or None to
                ignore the success body.

        Returns:
            IntegrationResult with the decoded value or the classified failure.
        """
        return await self._exchange("GET", path, response_type)

    async def post(self, path: str, body: Any, response_type: type[T]) -> IntegrationResult[T]:
        """
        Serialize *body* as JSON, POST it, and decode the response like get().

        Pydantic models are dumped by alias with None fields omitted. A body
        that cannot be serialized is returned as a DecodeError without any
        request being sent.
        """
        return await self._exchange("POST", path, response_type, body=body)

    async def health_check(self) -> bool:
        """
        Probe the service's liveness endpoint.

        Returns True only for a 2xx answer within budget. Every failure,
        including a timeout, yields False; this method never raises.
        """
        budget = min(self._timeout, HEALTH_CHECK_TIMEOUT)
        try:
            response = await asyncio.wait_for(
                self._send("GET", HEALTH_CHECK_PATH, content=None, timeout=budget),
                timeout=budget,
            )
        except Exception as exc:
            logger.debug(f"Health check failed for {self._base_url}: {exc}", exc_info=True)
            return False

        return response.is_success

    async def _send(
        self, method: str, path: str, *, content: bytes | None, timeout: float
    ) -> httpx.Response:
        async with httpx.AsyncClient(
            base_url=self._base_url,
            timeout=timeout,
            headers=_DEFAULT_HEADERS,
            transport=self._transport,
        ) as client:
            if content is None:
                return await client.request(method, path)
            return await client.request(method, path, content=content, headers=_JSON_HEADERS)

    async def _exchange(
        self,
        method: str,
        path: str,
        response_type: Any,
        *,
        body: Any = None,
    ) -> IntegrationResult[Any]:
        content: bytes | None = None
        if body is not None:
            try:
                content = _encode_body(body)
            except (TypeError, ValueError) as exc:
                return self._fail(
                    method,
                    path,
                    DecodeError(f"{method} {path} request body could not be serialized: {exc}"),
                )

        try:
            response = await asyncio.wait_for(
                self._send(method, path, content=content, timeout=self._timeout),
                timeout=self._timeout,
            )
        except (TimeoutError, httpx.TimeoutException):
            return self._fail(
                method,
                path,
                RequestTimeoutError(
                    f"{method} {path} exceeded {self._timeout}s budget",
                    timeout=self._timeout,
                ),
            )
        except (httpx.RequestError, httpx.InvalidURL) as exc:
            return self._fail(method, path, TransportError(f"{method} {path} failed: {exc}"))

        if not response.is_success:
            error = RemoteError(response.status_code, _error_body(response))
            return self._fail(method, path, error)

        if response_type is None:
            return IntegrationResult.ok(None)

        try:
            value = _type_adapter(response_type).validate_json(response.content)
        except ValidationError as exc:
            return self._fail(
                method,
                path,
                DecodeError(f"{method} {path} returned an undecodable body: {exc}"),
            )

        return IntegrationResult.ok(value)

    def _fail(self, method: str, path: str, error: IntegrationError) -> IntegrationResult[Any]:
        logger.debug(
            f"{method} {path} -> {error.kind}",
            extra={"base_url": self._base_url, "error_kind": str(error.kind)},
        )
        return IntegrationResult.failure(error)
