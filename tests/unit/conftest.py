"""
Shared fixtures for integration-layer tests.

StubServer is a raw asyncio HTTP server (no external dependencies) used where
real socket behaviour matters: slow responses and servers that accept a
connection but never answer. Everything else uses httpx.MockTransport.
"""

import asyncio
import json
from http import HTTPStatus
from typing import Any

import httpx
import pytest


class StubServer:
    """Minimal HTTP server that answers every request the same way."""

    def __init__(self) -> None:
        self.status = 200
        self.body = "{}"
        self.delay = 0.0
        self.hang = False
        self.requests: list[str] = []
        self._release = asyncio.Event()
        self._server: asyncio.Server | None = None

    @property
    def url(self) -> str:
        assert self._server is not None
        port = self._server.sockets[0].getsockname()[1]
        return f"http://127.0.0.1:{port}"

    def respond(self, status: int = 200, body: Any = None, delay: float = 0.0) -> None:
        self.status = status
        self.body = body if isinstance(body, str) else json.dumps(body or {})
        self.delay = delay
        self.hang = False

    def never_respond(self) -> None:
        """Accept connections and read requests, but never answer."""
        self.hang = True

    async def start(self) -> None:
        self._server = await asyncio.start_server(self._handle, "127.0.0.1", 0)

    async def stop(self) -> None:
        self._release.set()
        if self._server:
            self._server.close()
            await self._server.wait_closed()

    async def _handle(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        try:
            request_line = await reader.readline()
            content_length = 0
            while True:
                line = await reader.readline()
                if line in {b"\r\n", b"\n", b""}:
                    break
                name, _, value = line.decode("latin-1").partition(":")
                if name.strip().lower() == "content-length":
                    content_length = int(value.strip())
            if content_length:
                await reader.readexactly(content_length)
            self.requests.append(request_line.decode("latin-1").strip())

            if self.hang:
                await self._release.wait()
                return
            if self.delay:
                try:
                    await asyncio.wait_for(self._release.wait(), timeout=self.delay)
                    return
                except TimeoutError:
                    pass

            body = self.body.encode("utf-8")
            head = (
                f"HTTP/1.1 {self.status} {HTTPStatus(self.status).phrase}\r\n"
                "Content-Type: application/json\r\n"
                f"Content-Length: {len(body)}\r\n"
                "Connection: close\r\n\r\n"
            )
            writer.write(head.encode("latin-1") + body)
            await writer.drain()
        except (ConnectionError, asyncio.IncompleteReadError):
            pass
        finally:
            writer.close()


@pytest.fixture
async def stub_server():
    """A running StubServer, stopped after the test."""
    server = StubServer()
    await server.start()
    yield server
    await server.stop()


@pytest.fixture
def unused_url() -> str:
    """URL of a local port nothing is listening on."""
    import socket

    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        port = sock.getsockname()[1]
    return f"http://127.0.0.1:{port}"


def json_transport(
    status: int = 200,
    payload: Any = None,
    *,
    seen: list[httpx.Request] | None = None,
) -> httpx.MockTransport:
    """MockTransport answering every request with *status* and JSON *payload*."""

    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status, json=payload if payload is not None else {})

    return httpx.MockTransport(handler)


@pytest.fixture
def make_transport():
    """Factory fixture for json_transport()."""
    return json_transport
