"""Testes da fonte remota de rotas."""

from __future__ import annotations

import httpx
import pytest

from app.infra.sync.remote_source import RemoteRouteSource, extract_candidates
from utils.errors import SyncSourceError

URL = "https://config.example/routes"


def _client(handler) -> httpx.AsyncClient:  # noqa: ANN001
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestExtractCandidates:
    def test_plain_list(self) -> None:
        assert extract_candidates([{"a": 1}, "x", None]) == [{"a": 1}]

    @pytest.mark.parametrize("key", ["routes", "configs", "data"])
    def test_envelopes(self, key: str) -> None:
        assert extract_candidates({key: [{"a": 1}]}) == [{"a": 1}]

    @pytest.mark.parametrize("body", [{"routes": "x"}, {}, "text", 3, None])
    def test_rejects_bodies_without_list(self, body: object) -> None:
        with pytest.raises(SyncSourceError):
            extract_candidates(body)


@pytest.mark.asyncio
async def test_fetch_sends_bearer_token() -> None:
    captured: dict[str, httpx.Request] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["request"] = request
        return httpx.Response(200, json={"routes": [{"phoneNumber": "1", "targetUrl": "https://a"}]})

    async with _client(handler) as client:
        candidates = await RemoteRouteSource(client, URL, token="secret").fetch_candidates()

    assert candidates == [{"phoneNumber": "1", "targetUrl": "https://a"}]
    assert captured["request"].headers["authorization"] == "Bearer secret"
    assert str(captured["request"].url) == URL


@pytest.mark.asyncio
async def test_fetch_without_token_has_no_authorization() -> None:
    captured: dict[str, httpx.Request] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["request"] = request
        return httpx.Response(200, json=[])

    async with _client(handler) as client:
        assert await RemoteRouteSource(client, URL).fetch_candidates() == []

    assert "authorization" not in captured["request"].headers


@pytest.mark.asyncio
async def test_bad_status_raises() -> None:
    async with _client(lambda request: httpx.Response(500)) as client:
        with pytest.raises(SyncSourceError):
            await RemoteRouteSource(client, URL).fetch_candidates()


@pytest.mark.asyncio
async def test_invalid_json_raises() -> None:
    async with _client(lambda request: httpx.Response(200, content=b"<html>")) as client:
        with pytest.raises(SyncSourceError):
            await RemoteRouteSource(client, URL).fetch_candidates()


@pytest.mark.asyncio
async def test_transport_error_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    async with _client(handler) as client:
        with pytest.raises(SyncSourceError):
            await RemoteRouteSource(client, URL).fetch_candidates()
