"""Testes do ciclo de vida da aplicação (job de sincronização e cliente HTTP)."""

from __future__ import annotations

import time
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient

from app.app import create_app
from app.infra.stores.memory_stores import MemoryRouteRegistry


class _Source:
    def __init__(self) -> None:
        self.calls = 0

    async def fetch_candidates(self) -> list[dict[str, Any]]:
        self.calls += 1
        return [{"phoneNumber": "5511", "targetUrl": "https://s.example"}]


def _http_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(200)))


def test_scheduler_runs_when_sync_enabled(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SYNC_ENABLED", "true")
    monkeypatch.setenv("SYNC_INTERVAL_SECONDS", "3600")
    source = _Source()
    registry = MemoryRouteRegistry()
    app = create_app(registry=registry, http_client=_http_client(), source=source)

    with TestClient(app) as client:
        scheduler = app.state.sync_scheduler
        assert scheduler is not None
        assert scheduler.is_running is True
        for _ in range(50):
            if client.get("/health").json()["sync"]["last_status"] == "completed":
                break
            time.sleep(0.02)

    assert scheduler.is_running is False
    assert source.calls == 1
    assert len(registry.list_all()) == 1


def test_scheduler_not_started_when_disabled(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SYNC_ENABLED", raising=False)
    app = create_app(registry=MemoryRouteRegistry(), http_client=_http_client(), source=_Source())

    with TestClient(app):
        assert app.state.sync_scheduler is None


def test_injected_http_client_is_not_closed() -> None:
    http_client = _http_client()
    app = create_app(registry=MemoryRouteRegistry(), http_client=http_client)

    with TestClient(app):
        pass

    assert app.state.owns_http_client is False
    assert http_client.is_closed is False
