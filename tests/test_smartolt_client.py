from __future__ import annotations

import httpx
import pytest

from olt_graph.domain.pipeline.errors import FetchError, InvalidInputError
from olt_graph.domain.telemetry.models import GraphType
from olt_graph.infrastructure.clients.smartolt_http import SmartOltClient, normalize_base_url
from tests._images import make_png


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("https://acme.smartolt.com/api", "https://acme.smartolt.com/api"),
        ("https://acme.smartolt.com/api/", "https://acme.smartolt.com/api"),
        ("https://acme.smartolt.com", "https://acme.smartolt.com/api"),
        ("https://acme.smartolt.com/", "https://acme.smartolt.com/api"),
        ("   ", ""),
    ],
)
def test_normalize_base_url(raw: str, expected: str) -> None:
    assert normalize_base_url(raw) == expected


def test_resolve_image_url() -> None:
    client = SmartOltClient(base_url="https://acme.smartolt.com", api_key="k")

    assert client.resolve_image_url("https://cdn.example/x.png") == "https://cdn.example/x.png"
    assert client.resolve_image_url("/onu/x") == "https://acme.smartolt.com/api/onu/x"
    assert client.resolve_image_url("onu/x") == "https://acme.smartolt.com/api/onu/x"


def test_traffic_graph_url_quotes_identifier() -> None:
    client = SmartOltClient(base_url="https://acme.smartolt.com/api", api_key="k")

    url = client.traffic_graph_url("HWTC 12/34", GraphType.WEEKLY)

    assert url == "https://acme.smartolt.com/api/onu/get_onu_traffic_graph/HWTC%2012%2F34/weekly"


def test_traffic_graph_url_requires_identifier() -> None:
    client = SmartOltClient(base_url="https://acme.smartolt.com/api", api_key="k")

    with pytest.raises(InvalidInputError):
        client.traffic_graph_url("  ", GraphType.DAILY)


@pytest.mark.asyncio
async def test_fetch_sends_token_and_returns_bytes() -> None:
    body = make_png(3, 3)
    seen: dict[str, str] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["token"] = request.headers.get("X-Token", "")
        seen["accept"] = request.headers.get("Accept", "")
        return httpx.Response(200, content=body, headers={"Content-Type": "image/png"})

    async with SmartOltClient(
        base_url="https://acme.smartolt.com/api",
        api_key="secret-token",
        transport=httpx.MockTransport(handler),
    ) as client:
        resp = await client.fetch(client.traffic_graph_url("abc", GraphType.DAILY))

    assert seen == {"token": "secret-token", "accept": "image/*"}
    assert resp.status_code == 200
    assert resp.content_type == "image/png"
    assert resp.body == body
    assert resp.url.endswith("/onu/get_onu_traffic_graph/abc/daily")


@pytest.mark.asyncio
async def test_fetch_returns_non_2xx_without_raising() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, text="hourly limit", headers={"Content-Type": "text/plain"})

    async with SmartOltClient(
        base_url="https://acme.smartolt.com/api", api_key="k", transport=httpx.MockTransport(handler)
    ) as client:
        resp = await client.fetch("https://acme.smartolt.com/api/onu/x")

    assert resp.status_code == 403
    assert resp.content_type == "text/plain"


@pytest.mark.asyncio
async def test_fetch_network_error_wrapped() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    async with SmartOltClient(
        base_url="https://acme.smartolt.com/api", api_key="k", transport=httpx.MockTransport(handler)
    ) as client:
        with pytest.raises(FetchError) as exc_info:
            await client.fetch("https://acme.smartolt.com/api/onu/x")

    assert exc_info.value.unauthorized is False


@pytest.mark.asyncio
async def test_fetch_without_api_key() -> None:
    async with SmartOltClient(base_url="https://acme.smartolt.com/api", api_key="") as client:
        with pytest.raises(FetchError) as exc_info:
            await client.fetch("https://acme.smartolt.com/api/onu/x")

    assert exc_info.value.unauthorized is True


@pytest.mark.asyncio
async def test_fetch_outside_context_manager() -> None:
    client = SmartOltClient(base_url="https://acme.smartolt.com/api", api_key="k")

    with pytest.raises(RuntimeError):
        await client.fetch("https://acme.smartolt.com/api/onu/x")


@pytest.mark.asyncio
async def test_fetch_without_base_url() -> None:
    async with SmartOltClient(base_url="", api_key="k") as client:
        with pytest.raises(FetchError, match="base URL") as exc_info:
            await client.fetch(client.traffic_graph_url("abc", GraphType.DAILY))

    assert exc_info.value.unauthorized is True
