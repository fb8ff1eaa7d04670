"""
policylink.integrations.exceptions - Integration failure taxonomy

Every failure an integration call can produce is one of four kinds. They are
Exception subclasses so callers can re-raise them (``result.unwrap()``), but
the transport never raises them: it returns them inside an IntegrationResult.

Serialization failures in either direction are DecodeError: a response body
that does not fit the expected type, and a request body that cannot be
encoded as JSON. The latter is detected before anything is sent.

Example:
    >>> result = await registry.observatory.emit_evaluation_event(event)
    >>> if isinstance(result.error, RequestTimeoutError):
    ...     logger.info(f"Observatory slow, dropping event: {result.error}")
"""

from __future__ import annotations

from typing import Any

from policylink.integrations.base import ErrorKind


class IntegrationError(Exception):
    """Base class for all integration failures."""

    kind: ErrorKind

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class TransportError(IntegrationError):
    """
    Raised when a connection could not be established or was dropped.

    This covers:
    - Connection refused
    - DNS resolution failures
    - TLS handshake failures
    - Malformed base URLs (detected on first use)
    """

    kind = ErrorKind.TRANSPORT


class RequestTimeoutError(IntegrationError):
    """Raised when no response arrived within the configured budget."""

    kind = ErrorKind.TIMEOUT

    def __init__(self, message: str, timeout: float) -> None:
        super().__init__(message)
        self.timeout = timeout


class RemoteError(IntegrationError):
    """
    Raised when the remote service answered with a non-success status.

    ``body`` is the decoded JSON error body when the service sent one,
    the raw text when it did not parse, or None for an empty body.
    """

    kind = ErrorKind.REMOTE

    def __init__(self, status_code: int, body: Any = None) -> None:
        super().__init__(f"remote service returned HTTP {status_code}")
        self.status_code = status_code
        self.body = body


class DecodeError(IntegrationError):
    """
    Raised when a JSON body could not be converted.

    Either a success response did not deserialize into the expected type,
    or a request body could not be serialized and nothing was sent.
    """

    kind = ErrorKind.DECODE


__all__ = [
    "DecodeError",
    "IntegrationError",
    "RemoteError",
    "RequestTimeoutError",
    "TransportError",
]
