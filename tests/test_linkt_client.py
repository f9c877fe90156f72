import asyncio

import httpx
import pytest

from outreach_planner.clients.linkt_client import LinktAPIError, LinktClient


def _client(handler):
    return LinktClient(
        api_key="test-key",
        base_url="https://linkt.test/",
        transport=httpx.MockTransport(handler),
    )


def test_retrieve_signal():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json={"id": "sig_1", "entity_ids": ["ent_1"]})

    data = asyncio.run(_client(handler).retrieve_signal("sig_1"))

    assert data == {"id": "sig_1", "entity_ids": ["ent_1"]}
    assert seen["url"] == "https://linkt.test/v1/signal/sig_1"
    assert seen["auth"] == "Bearer test-key"


def test_retrieve_entity():
    def handler(request):
        return httpx.Response(200, json={"entity_type": "person", "data": {"name": "Jane"}})

    data = asyncio.run(_client(handler).retrieve_entity("ent_1"))

    assert data["entity_type"] == "person"


def test_error_status_raises():
    def handler(request):
        return httpx.Response(404, json={"detail": "not found"})

    with pytest.raises(LinktAPIError, match="404"):
        asyncio.run(_client(handler).retrieve_signal("missing"))


def test_non_object_response_raises():
    def handler(request):
        return httpx.Response(200, json=["unexpected"])

    with pytest.raises(LinktAPIError):
        asyncio.run(_client(handler).retrieve_entity("ent_1"))


def test_transport_error_raises():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(LinktAPIError):
        asyncio.run(_client(handler).retrieve_signal("sig_1"))
