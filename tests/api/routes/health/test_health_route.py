"""Testes dos endpoints de health e readiness."""

from __future__ import annotations

import json
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from starlette.requests import Request

from api.routes.health.router import readiness_check
from app.infra.stores.memory_stores import MemoryRouteRegistry


def _build_request_with_state(state: SimpleNamespace) -> Request:
    scope = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": "GET",
        "path": "/ready",
        "raw_path": b"/ready",
        "query_string": b"",
        "headers": [],
        "app": SimpleNamespace(state=state),
    }

    async def _receive() -> dict[str, object]:
        return {"type": "http.request", "body": b"", "more_body": False}

    return Request(scope, _receive)


class _FailingRegistry:
    def list_all(self):  # noqa: ANN201
        raise ConnectionError("redis down")


@pytest.mark.asyncio
async def test_readiness_returns_not_ready_when_registry_fails() -> None:
    request = _build_request_with_state(SimpleNamespace(registry=_FailingRegistry()))

    response = await readiness_check(request)
    payload = json.loads(response.body.decode("utf-8"))

    assert response.status_code == 503
    assert payload["status"] == "not_ready"
    assert payload["checks"]["registry"]["status"] == "failed"
    assert payload["checks"]["registry"]["error"] == "ConnectionError"


@pytest.mark.asyncio
async def test_readiness_returns_ready_with_readable_registry() -> None:
    request = _build_request_with_state(SimpleNamespace(registry=MemoryRouteRegistry()))

    response = await readiness_check(request)
    payload = json.loads(response.body.decode("utf-8"))

    assert response.status_code == 200
    assert payload["status"] == "ready"
    assert payload["checks"]["registry"]["status"] == "ok"


def test_health_reports_routes_and_sync_state(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "healthy"
    assert payload["service"] == "phone-proxy-router"
    assert payload["routes"] == 3
    assert payload["registry_backend"] == "memory"
    assert payload["sync"] == {
        "configured": False,
        "running": False,
        "last_status": None,
        "last_finished_at": None,
    }
