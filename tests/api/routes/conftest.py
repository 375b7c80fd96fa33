"""Fixtures compartilhadas dos testes de rota (app completo + destino fake)."""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable, Iterator

import httpx
import pytest
from fastapi.testclient import TestClient

from app.app import create_app
from app.domain.route_config import RouteConfig, RouteStrategy
from app.infra.stores.memory_stores import MemoryRouteRegistry

Handler = Callable[[httpx.Request], httpx.Response]


class ChunkedBody(httpx.AsyncByteStream):
    """Corpo entregue em pedaços, como numa conexão real."""

    def __init__(self, content: bytes, chunk_size: int = 4) -> None:
        self._content = content
        self._chunk_size = chunk_size

    async def __aiter__(self) -> AsyncIterator[bytes]:
        for start in range(0, len(self._content), self._chunk_size):
            yield self._content[start : start + self._chunk_size]


def as_streaming(response: httpx.Response) -> httpx.Response:
    """Mesma resposta, mas com corpo ainda não lido."""
    return httpx.Response(
        response.status_code,
        headers=response.headers,
        stream=ChunkedBody(response.content),
    )


class Upstream:
    """Destino fake: registra requisições e responde via handler configurável."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.handler: Handler = lambda request: httpx.Response(
            200, json={"ok": True}, headers={"x-upstream": "yes"}
        )

    def __call__(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        return as_streaming(self.handler(request))

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


SENDER_ROUTE = RouteConfig(
    id="sender-1",
    phone_number="5511999990000",
    target_url="https://backend-a.example/api",
    description="backend A",
)
BUSINESS_ROUTE = RouteConfig(
    id="business-1",
    route_by=RouteStrategy.BUSINESS,
    phone_number_id="1000",
    target_url="https://backend-b.example/hooks/wa",
)
INACTIVE_ROUTE = RouteConfig(
    id="inactive-1",
    phone_number="5521888880000",
    target_url="https://backend-c.example",
    active=False,
)


@pytest.fixture
def upstream() -> Upstream:
    return Upstream()


@pytest.fixture
def registry() -> MemoryRouteRegistry:
    return MemoryRouteRegistry([SENDER_ROUTE, BUSINESS_ROUTE, INACTIVE_ROUTE])


@pytest.fixture
def client(
    monkeypatch: pytest.MonkeyPatch,
    upstream: Upstream,
    registry: MemoryRouteRegistry,
) -> Iterator[TestClient]:
    monkeypatch.setenv("WHATSAPP_VERIFY_TOKEN", "verify-me")
    monkeypatch.delenv("SYNC_SOURCE_URL", raising=False)
    monkeypatch.delenv("SYNC_ENABLED", raising=False)
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(upstream))
    app = create_app(registry=registry, http_client=http_client)
    with TestClient(app) as test_client:
        yield test_client
