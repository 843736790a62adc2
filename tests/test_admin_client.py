# ============================================================================
# ADMIN CLIENT TESTS
# ============================================================================
# EPOCH: 1 - BOUNCE COORDINATION
# STATUS: Tests - Management-plane HTTP client
# PURPOSE: Verify status parsing, kill requests and error mapping
# CREATED: 18 OCT 2026
# ============================================================================
"""
Admin Client Tests

Uses httpx.MockTransport; no server required.

Run with:
    pytest tests/test_admin_client.py -v
"""

import asyncio
import json

import httpx
import pytest

from clients import HttpAdminClient, http_admin_client_factory
from core.errors import AdminClientError
from core.models import ClusterSpec, FoundationDBCluster, ProcessAddress


# ============================================================================
# HELPERS
# ============================================================================

STATUS_DOC = {
    "client": {"database_status": {"available": True}},
    "cluster": {
        "processes": {
            "abc": {
                "address": "10.0.0.1:4500:tls",
                "version": "7.1.26",
                "locality": {"instance_id": "storage-1"},
                "uptime_seconds": 42.0,
            }
        }
    },
}


def _make_client(handler):
    return HttpAdminClient(
        "http://admin.test/clusters/prod/fdb-a",
        transport=httpx.MockTransport(handler),
    )


def _run(coro_factory, handler):
    async def _inner():
        async with _make_client(handler) as client:
            return await coro_factory(client)
    return asyncio.run(_inner())


# ============================================================================
# STATUS
# ============================================================================

class TestGetStatus:
    """Tests for HttpAdminClient.get_status."""

    def test_parses_status(self):
        seen = []

        def handler(request):
            seen.append((request.method, request.url.path))
            return httpx.Response(200, json=STATUS_DOC)

        status = _run(lambda c: c.get_status(), handler)

        assert seen == [("GET", "/clusters/prod/fdb-a/status")]
        assert status.available is True
        assert status.process_list()[0].process_group_id == "storage-1"

    def test_http_error_raises(self):
        def handler(request):
            return httpx.Response(503, text="unavailable")

        with pytest.raises(AdminClientError) as exc_info:
            _run(lambda c: c.get_status(), handler)
        assert exc_info.value.status_code == 503

    def test_invalid_json_raises(self):
        def handler(request):
            return httpx.Response(200, text="not json")

        with pytest.raises(AdminClientError):
            _run(lambda c: c.get_status(), handler)

    def test_transport_error_raises(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(AdminClientError):
            _run(lambda c: c.get_status(), handler)

    def test_timeout_raises(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(AdminClientError):
            _run(lambda c: c.get_status(), handler)


# ============================================================================
# KILL
# ============================================================================

class TestKillProcesses:
    """Tests for HttpAdminClient.kill_processes."""

    def test_posts_rendered_addresses(self):
        bodies = []

        def handler(request):
            bodies.append((request.method, request.url.path, json.loads(request.content)))
            return httpx.Response(204)

        addresses = [
            ProcessAddress.parse("10.0.0.1:4500:tls"),
            ProcessAddress.parse("[2001:db8::1]:4500"),
        ]
        _run(lambda c: c.kill_processes(addresses), handler)

        assert bodies == [(
            "POST",
            "/clusters/prod/fdb-a/kill",
            {"addresses": ["10.0.0.1:4500:tls", "[2001:db8::1]:4500"]},
        )]

    def test_rejected_kill_raises(self):
        def handler(request):
            return httpx.Response(500, json={"detail": "boom"})

        with pytest.raises(AdminClientError):
            _run(lambda c: c.kill_processes([ProcessAddress.parse("10.0.0.1:4500")]), handler)


# ============================================================================
# FACTORY
# ============================================================================

class TestFactory:
    """Tests for http_admin_client_factory."""

    def test_per_cluster_base_url(self):
        factory = http_admin_client_factory("http://admin.test/")
        cluster = FoundationDBCluster(name="fdb-a", namespace="prod", spec=ClusterSpec(version="7.1.26"))
        client = factory(cluster)
        try:
            assert client._base_url == "http://admin.test/clusters/prod/fdb-a"
        finally:
            asyncio.run(client.close())

    def test_base_url_from_environment(self, monkeypatch):
        from core.config import reset_defaults

        monkeypatch.setenv("ADMIN_API_URL", "http://env-admin:9000")
        reset_defaults()
        cluster = FoundationDBCluster(name="fdb-a", spec=ClusterSpec(version="7.1.26"))
        client = http_admin_client_factory()(cluster)
        try:
            assert client._base_url == "http://env-admin:9000/clusters/default/fdb-a"
        finally:
            asyncio.run(client.close())
