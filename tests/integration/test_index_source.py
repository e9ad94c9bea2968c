"""Integration tests — fastapi_tenantinfo.cluster

``HTTPIndexSource`` is exercised against an ``httpx.MockTransport`` that
plays the cluster's ``_alias`` endpoint.
"""

from __future__ import annotations

import httpx
import pytest

from fastapi_tenantinfo.cluster import HTTPIndexSource, StaticIndexSource
from fastapi_tenantinfo.core.exceptions import ClusterStateError

pytestmark = pytest.mark.integration

BASE = "http://search.test:9200"

ALIASES = {
    ".kibana_3105_ab": {"aliases": {}},
    ".kibana_1": {"aliases": {".kibana": {}}},
    "logs-2024.01.01": {"aliases": {"logs": {}, "recent": {}}},
    "logs-2024.01.02": {"aliases": {"logs": {}}},
}


def _source(handler) -> HTTPIndexSource:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HTTPIndexSource(BASE + "/", client=client)


async def test_static_source_preserves_order():
    source = StaticIndexSource(["b", "a", "c"])
    assert list(await source.index_and_alias_names()) == ["b", "a", "c"]
    await source.close()


async def test_collects_indices_and_aliases_sorted():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=ALIASES)

    names = await _source(handler).index_and_alias_names()

    assert list(names) == [
        ".kibana",
        ".kibana_1",
        ".kibana_3105_ab",
        "logs",
        "logs-2024.01.01",
        "logs-2024.01.02",
        "recent",
    ]
    assert str(seen[0].url) == f"{BASE}/_alias"
    assert seen[0].method == "GET"


async def test_entries_without_aliases_tolerated():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"a": {}, "b": None, "c": {"aliases": []}})

    assert list(await _source(handler).index_and_alias_names()) == ["a", "b", "c"]


async def test_empty_cluster():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={})

    assert list(await _source(handler).index_and_alias_names()) == []


@pytest.mark.parametrize("status", [401, 404, 503])
async def test_http_error_status(status):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, json={"error": "nope"})

    with pytest.raises(ClusterStateError, match=str(status)) as exc:
        await _source(handler).index_and_alias_names()
    assert exc.value.details["url"] == f"{BASE}/_alias"


async def test_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ClusterStateError, match="alias lookup failed"):
        await _source(handler).index_and_alias_names()


async def test_invalid_json():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"<html>", headers={"content-type": "text/html"})

    with pytest.raises(ClusterStateError, match="invalid JSON"):
        await _source(handler).index_and_alias_names()


async def test_unexpected_document():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=["not", "an", "object"])

    with pytest.raises(ClusterStateError, match="unexpected document"):
        await _source(handler).index_and_alias_names()


async def test_close_leaves_injected_client_open():
    client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200, json={})))
    source = HTTPIndexSource(BASE, client=client)
    await source.close()
    assert not client.is_closed
    await client.aclose()


async def test_close_owned_client():
    source = HTTPIndexSource(BASE, timeout=1.0, auth=("kibanaserver", "pw"))
    await source.close()
    assert source._client.is_closed
