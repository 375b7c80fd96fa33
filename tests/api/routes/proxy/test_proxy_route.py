"""Testes do proxy genérico (ANY /proxy/{path})."""

from __future__ import annotations

import json

import httpx
import pytest
from fastapi.testclient import TestClient


def _whatsapp_event(*, phone_number_id: str, sender: str) -> dict:
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


def test_forwards_by_header_and_strips_prefix(client: TestClient, upstream) -> None:
    response = client.get(
        "/proxy/items/5?x=1",
        headers={"X-Phone-Number": "+55 (11) 99999-0000", "X-Custom": "keep"},
    )

    assert response.status_code == 200
    assert response.json() == {"ok": True}
    assert response.headers["x-upstream"] == "yes"

    forwarded = upstream.last
    assert str(forwarded.url) == "https://backend-a.example/api/items/5?x=1"
    assert forwarded.method == "GET"
    assert forwarded.headers["x-forwarded-phone"] == "+55 (11) 99999-0000"
    assert forwarded.headers["x-custom"] == "keep"
    assert forwarded.headers["host"] == "backend-a.example"


def test_phone_from_query_param(client: TestClient, upstream) -> None:
    response = client.get("/proxy/status", params={"phone": "11999990000"})

    assert response.status_code == 200
    assert upstream.last.url.path == "/api/status"


def test_phone_from_json_body_and_body_passthrough(client: TestClient, upstream) -> None:
    body = json.dumps({"phoneNumber": "5511999990000", "text": "olá"}).encode()

    response = client.post(
        "/proxy/messages", content=body, headers={"Content-Type": "application/json"}
    )

    assert response.status_code == 200
    assert upstream.last.method == "POST"
    assert upstream.last.content == body
    assert upstream.last.headers["content-type"] == "application/json"


def test_whatsapp_event_body_routes_by_business_id(client: TestClient, upstream) -> None:
    response = client.post("/proxy/any", json=_whatsapp_event(phone_number_id="1000", sender="777"))

    assert response.status_code == 200
    assert str(upstream.last.url) == "https://backend-b.example/hooks/wa/any"
    assert upstream.last.headers["x-forwarded-phone"] == "777"


def test_missing_identity_returns_400_with_hint(client: TestClient, upstream) -> None:
    response = client.get("/proxy/items")

    assert response.status_code == 400
    payload = response.json()
    assert payload["error"] == "missing_identity"
    assert "x-phone-number" in payload["hint"]
    assert upstream.requests == []


def test_unknown_phone_returns_404(client: TestClient, upstream) -> None:
    response = client.get("/proxy/items", headers={"X-Phone-Number": "4433"})

    assert response.status_code == 404
    assert response.json()["error"] == "route_not_found"
    assert response.json()["phoneNumber"] == "4433"
    assert upstream.requests == []


def test_inactive_route_returns_403(client: TestClient, upstream) -> None:
    response = client.get("/proxy/items", headers={"X-Phone-Number": "5521888880000"})

    assert response.status_code == 403
    assert response.json()["error"] == "route_inactive"
    assert upstream.requests == []


def test_upstream_status_is_relayed_unchanged(client: TestClient, upstream) -> None:
    upstream.handler = lambda request: httpx.Response(
        418, content=b"teapot", headers={"content-type": "text/plain", "x-reason": "tea"}
    )

    response = client.delete("/proxy/items/5", headers={"X-Phone-Number": "11999990000"})

    assert response.status_code == 418
    assert response.content == b"teapot"
    assert response.headers["x-reason"] == "tea"


def test_upstream_unavailable_returns_502(client: TestClient, upstream) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    upstream.handler = handler

    response = client.get("/proxy/items", headers={"X-Phone-Number": "11999990000"})

    assert response.status_code == 502
    assert response.json()["error"] == "upstream_unavailable"


def test_correlation_id_is_echoed(client: TestClient) -> None:
    response = client.get(
        "/proxy/items",
        headers={"X-Phone-Number": "11999990000", "X-Correlation-ID": "corr-123"},
    )

    assert response.headers["x-correlation-id"] == "corr-123"


@pytest.mark.parametrize(
    ("path", "forwarded_path", "forwarded_query"),
    [
        ("/proxy/files/a%2Fb", b"/api/files/a%2Fb", b""),
        ("/proxy/items/a%3Fb?x=1", b"/api/items/a%3Fb?x=1", b"x=1"),
        ("/proxy/search/caf%C3%A9?q=a%20b", b"/api/search/caf%C3%A9?q=a%20b", b"q=a%20b"),
    ],
)
def test_encoded_path_is_forwarded_verbatim(
    client: TestClient,
    upstream,
    path: str,
    forwarded_path: bytes,
    forwarded_query: bytes,
) -> None:
    response = client.get(path, headers={"X-Phone-Number": "11999990000"})

    assert response.status_code == 200
    assert upstream.last.url.raw_path == forwarded_path
    assert upstream.last.url.query == forwarded_query


def test_deeply_nested_body_is_forwarded_as_opaque_bytes(client: TestClient, upstream) -> None:
    body = b"[" * 100_000 + b"]" * 100_000

    response = client.post(
        "/proxy/x",
        content=body,
        headers={"X-Phone-Number": "11999990000", "Content-Type": "application/json"},
    )

    assert response.status_code == 200
    assert len(upstream.requests) == 1
    assert upstream.last.content == body


def test_streamed_upstream_body_is_relayed_whole(client: TestClient, upstream) -> None:
    payload = b"0123456789" * 50
    upstream.handler = lambda request: httpx.Response(200, content=payload)

    response = client.get("/proxy/blob", headers={"X-Phone-Number": "11999990000"})

    assert response.status_code == 200
    assert response.content == payload
