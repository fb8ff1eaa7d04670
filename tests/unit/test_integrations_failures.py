"""
Failure handling shared by every adapter.

Each adapter is driven through one representative call against transports
that refuse, stall, answer with an error status, or answer with garbage.
Every case must come back as a classified failure, never an exception.
"""

import time

import httpx
import pytest

from policylink.integrations.config_manager import ConfigManagerAdapter
from policylink.integrations.costops import CostOpsAdapter
from policylink.integrations.edge_agent import EdgeAgentAdapter
from policylink.integrations.exceptions import (
    DecodeError,
    RemoteError,
    RequestTimeoutError,
    TransportError,
)
from policylink.integrations.governance import GovernanceAdapter
from policylink.integrations.incident_manager import IncidentManagerAdapter
from policylink.integrations.observatory import ObservatoryAdapter
from policylink.integrations.schema_registry import SchemaRegistryAdapter
from policylink.integrations.sentinel import SentinelAdapter
from policylink.integrations.shield import ShieldAdapter, ShieldScanRequest

# (adapter class, coroutine factory exercising one typed call)
CALLS = [
    pytest.param(
        ShieldAdapter, lambda a: a.scan_prompt(ShieldScanRequest(prompt="p")), id="shield"
    ),
    pytest.param(CostOpsAdapter, lambda a: a.get_cost_summary(), id="costops"),
    pytest.param(GovernanceAdapter, lambda a: a.is_model_approved("p", "m"), id="governance"),
    pytest.param(EdgeAgentAdapter, lambda a: a.get_edge_locations(), id="edge_agent"),
    pytest.param(IncidentManagerAdapter, lambda a: a.get_incident("i-1"), id="incident_manager"),
    pytest.param(SentinelAdapter, lambda a: a.get_threat_level("svc"), id="sentinel"),
    pytest.param(SchemaRegistryAdapter, lambda a: a.get_schema("subj"), id="schema_registry"),
    pytest.param(ConfigManagerAdapter, lambda a: a.get_config("key"), id="config_manager"),
    pytest.param(ObservatoryAdapter, lambda a: a.get_trace_context("t-1"), id="observatory"),
]

ADAPTERS = [pytest.param(p.values[0], id=p.id) for p in CALLS]


def _refuse(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)


def _stall(request: httpx.Request) -> httpx.Response:
    raise httpx.ReadTimeout("timed out", request=request)


class TestEveryAdapter:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(("adapter_cls", "call"), CALLS)
    async def test_refused_is_transport_error(self, adapter_cls, call):
        adapter = adapter_cls("http://svc", 1.0, transport=httpx.MockTransport(_refuse))
        result = await call(adapter)
        assert isinstance(result.error, TransportError)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(("adapter_cls", "call"), CALLS)
    async def test_stalled_is_timeout(self, adapter_cls, call):
        adapter = adapter_cls("http://svc", 1.0, transport=httpx.MockTransport(_stall))
        result = await call(adapter)
        assert isinstance(result.error, RequestTimeoutError)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(("adapter_cls", "call"), CALLS)
    async def test_silent_server_is_timeout(self, adapter_cls, call, stub_server):
        stub_server.never_respond()
        started = time.monotonic()
        result = await call(adapter_cls(stub_server.url, 0.3))
        assert isinstance(result.error, RequestTimeoutError)
        assert time.monotonic() - started < 2.0

    @pytest.mark.asyncio
    @pytest.mark.parametrize(("adapter_cls", "call"), CALLS)
    async def test_error_status_is_remote_error(self, adapter_cls, call, make_transport):
        adapter = adapter_cls("http://svc", 1.0, transport=make_transport(500, {"error": "boom"}))
        result = await call(adapter)
        assert isinstance(result.error, RemoteError)
        assert result.error.status_code == 500
        assert result.error.body == {"error": "boom"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize(("adapter_cls", "call"), CALLS)
    async def test_garbage_is_decode_error(self, adapter_cls, call):
        transport = httpx.MockTransport(lambda r: httpx.Response(200, text="<html>"))
        adapter = adapter_cls("http://svc", 1.0, transport=transport)
        result = await call(adapter)
        assert isinstance(result.error, DecodeError)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(("adapter_cls", "call"), CALLS)
    async def test_unreachable_port(self, adapter_cls, call, unused_url):
        result = await call(adapter_cls(unused_url, 1.0))
        assert isinstance(result.error, TransportError)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("adapter_cls", ADAPTERS)
    async def test_health_check(self, adapter_cls):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200 if request.url.path == "/health" else 404)

        healthy = adapter_cls("http://svc", 1.0, transport=httpx.MockTransport(handler))
        refused = adapter_cls("http://svc", 1.0, transport=httpx.MockTransport(_refuse))

        assert await healthy.health_check() is True
        assert await refused.health_check() is False

    @pytest.mark.parametrize("adapter_cls", ADAPTERS)
    def test_construction_never_fails(self, adapter_cls):
        adapter = adapter_cls("::not a url::", 0.5)
        assert adapter.base_url == "::not a url::"
