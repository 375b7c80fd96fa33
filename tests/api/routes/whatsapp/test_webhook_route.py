"""Testes dos endpoints de webhook WhatsApp."""

from __future__ import annotations

import json
from types import SimpleNamespace

import httpx
import pytest
from fastapi.testclient import TestClient
from starlette.requests import Request

from api.routes.whatsapp import webhook
from app.app import create_app
from app.infra.stores.memory_stores import MemoryRouteRegistry

WEBHOOK_PATH = "/webhook/whatsapp"


def _build_request(*, method: str, query_string: str = "") -> Request:
    scope = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": method,
        "path": "/",
        "raw_path": b"/",
        "query_string": query_string.encode("utf-8"),
        "headers": [],
    }

    async def _receive() -> dict[str, object]:
        return {"type": "http.request", "body": b"", "more_body": False}

    return Request(scope, _receive)


def _event(*, phone_number_id: str = "9999", sender: str = "5511999990000") -> dict:
    return {
        "object": "whatsapp_business_account",
        "entry": [
            {
                "id": "WABA-1",
                "changes": [
                    {
                        "field": "messages",
                        "value": {
                            "metadata": {
                                "display_phone_number": "15550001111",
                                "phone_number_id": phone_number_id,
                            },
                            "messages": [{"from": sender, "id": "wamid.1", "type": "text"}],
                        },
                    }
                ],
            }
        ],
    }


@pytest.mark.asyncio
async def test_verify_webhook_success(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        webhook,
        "get_whatsapp_settings",
        lambda: SimpleNamespace(verify_token="token"),
    )

    request = _build_request(
        method="GET",
        query_string="hub.mode=subscribe&hub.verify_token=token&hub.challenge=abc",
    )
    response = await webhook.verify_webhook(request)

    assert response.status_code == 200
    assert response.body == b"abc"


@pytest.mark.asyncio
async def test_verify_webhook_without_configured_token(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        webhook,
        "get_whatsapp_settings",
        lambda: SimpleNamespace(verify_token=""),
    )

    request = _build_request(
        method="GET",
        query_string="hub.mode=subscribe&hub.verify_token=&hub.challenge=abc",
    )
    response = await webhook.verify_webhook(request)

    assert response.status_code == 403


def test_verify_through_app(client: TestClient) -> None:
    ok = client.get(
        WEBHOOK_PATH,
        params={"hub.mode": "subscribe", "hub.verify_token": "verify-me", "hub.challenge": "42"},
    )
    denied = client.get(
        WEBHOOK_PATH,
        params={"hub.mode": "subscribe", "hub.verify_token": "nope", "hub.challenge": "42"},
    )

    assert ok.status_code == 200
    assert ok.text == "42"
    assert denied.status_code == 403
    assert denied.text == "Forbidden"


def test_event_is_forwarded_to_exact_target_url(client: TestClient, upstream) -> None:
    body = json.dumps(_event()).encode()

    response = client.post(WEBHOOK_PATH, content=body, headers={"Content-Type": "application/json"})

    assert response.status_code == 200
    assert response.json() == {"ok": True}
    assert str(upstream.last.url) == "https://backend-a.example/api"
    assert upstream.last.content == body
    assert upstream.last.headers["x-forwarded-phone"] == "5511999990000"


def test_business_id_takes_precedence(client: TestClient, upstream) -> None:
    response = client.post(WEBHOOK_PATH, json=_event(phone_number_id="1000"))

    assert response.status_code == 200
    assert str(upstream.last.url) == "https://backend-b.example/hooks/wa"


@pytest.mark.parametrize("body", [b"{invalid", b'{"object": "page", "entry": []}'])
def test_malformed_payload_returns_400(client: TestClient, upstream, body: bytes) -> None:
    response = client.post(WEBHOOK_PATH, content=body)

    assert response.status_code == 400
    assert response.json()["error"] == "malformed_payload"
    assert upstream.requests == []


def test_unroutable_event_is_acknowledged(client: TestClient, upstream) -> None:
    response = client.post(WEBHOOK_PATH, json=_event(sender="4433"))

    assert response.status_code == 200
    assert response.json() == {"status": "ignored", "reason": "route_not_found"}
    assert upstream.requests == []


def test_event_without_identity_is_acknowledged(client: TestClient, upstream) -> None:
    response = client.post(WEBHOOK_PATH, json={"object": "whatsapp_business_account", "entry": []})

    assert response.status_code == 200
    assert response.json()["reason"] == "missing_identity"


def test_inactive_route_is_acknowledged(client: TestClient, upstream) -> None:
    response = client.post(WEBHOOK_PATH, json=_event(sender="5521888880000"))

    assert response.status_code == 200
    assert response.json() == {"status": "ignored", "reason": "route_inactive"}
    assert upstream.requests == []


def test_upstream_error_status_is_acknowledged(client: TestClient, upstream) -> None:
    upstream.handler = lambda request: httpx.Response(500, content=b"boom")

    response = client.post(WEBHOOK_PATH, json=_event())

    assert response.status_code == 200
    assert response.json() == {
        "status": "upstream_error",
        "reason": "upstream_status",
        "upstreamStatus": 500,
    }


def test_upstream_unavailable_is_acknowledged(client: TestClient, upstream) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timeout", request=request)

    upstream.handler = handler

    response = client.post(WEBHOOK_PATH, json=_event())

    assert response.status_code == 200
    assert response.json() == {"status": "upstream_error", "reason": "upstream_unavailable"}


def test_deeply_nested_body_returns_400(client: TestClient, upstream) -> None:
    response = client.post(WEBHOOK_PATH, content=b"[" * 100_000 + b"]" * 100_000)

    assert response.status_code == 400
    assert response.json()["error"] == "malformed_payload"
    assert upstream.requests == []


def test_webhook_served_at_configured_path(
    monkeypatch: pytest.MonkeyPatch,
    upstream,
    registry: MemoryRouteRegistry,
) -> None:
    monkeypatch.setenv("WHATSAPP_VERIFY_TOKEN", "verify-me")
    monkeypatch.setenv("WHATSAPP_WEBHOOK_PATH", "/hooks/meta")
    monkeypatch.delenv("SYNC_SOURCE_URL", raising=False)
    monkeypatch.delenv("SYNC_ENABLED", raising=False)
    app = create_app(
        registry=registry,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(upstream)),
    )

    with TestClient(app) as test_client:
        challenge = test_client.get(
            "/hooks/meta",
            params={"hub.mode": "subscribe", "hub.verify_token": "verify-me", "hub.challenge": "42"},
        )
        received = test_client.post("/hooks/meta", json=_event(phone_number_id="1000"))

    assert challenge.status_code == 200
    assert challenge.text == "42"
    assert received.status_code == 200
    assert str(upstream.last.url) == "https://backend-b.example/hooks/wa"
