"""Testes da conversão Starlette -> ForwardRequest."""

from __future__ import annotations

import pytest
from starlette.requests import Request

from api.routes.proxy.responses import build_forward_request, raw_request_path


def _request(
    *,
    path: str,
    raw_path: bytes | None,
    query_string: bytes = b"",
    root_path: str = "",
) -> Request:
    scope: dict[str, object] = {
        "type": "http",
        "method": "GET",
        "path": path,
        "root_path": root_path,
        "query_string": query_string,
        "headers": [(b"x-phone-number", b"5551234")],
    }
    if raw_path is not None:
        scope["raw_path"] = raw_path
    return Request(scope)


@pytest.mark.parametrize(
    ("path", "raw_path", "expected"),
    [
        ("/proxy/files/a/b", b"/proxy/files/a%2Fb", "/proxy/files/a%2Fb"),
        ("/proxy/items/a?b", b"/proxy/items/a%3Fb", "/proxy/items/a%3Fb"),
        ("/proxy/items", b"/proxy/items?x=1", "/proxy/items"),
    ],
)
def test_raw_path_keeps_escapes(path: str, raw_path: bytes, expected: str) -> None:
    assert raw_request_path(_request(path=path, raw_path=raw_path)) == expected


def test_root_path_is_removed() -> None:
    request = _request(path="/router/proxy/a", raw_path=b"/router/proxy/a%2Fb", root_path="/router")

    assert raw_request_path(request) == "/proxy/a%2Fb"


def test_without_raw_path_decoded_path_is_requoted() -> None:
    assert raw_request_path(_request(path="/proxy/a b", raw_path=None)) == "/proxy/a%20b"


def test_forward_request_uses_raw_query_and_headers() -> None:
    request = _request(
        path="/proxy/items/a?b",
        raw_path=b"/proxy/items/a%3Fb",
        query_string=b"x=1&q=a%20b",
    )

    forward = build_forward_request(request, b"payload")

    assert forward.path == "/proxy/items/a%3Fb"
    assert forward.query == "x=1&q=a%20b"
    assert forward.header("X-Phone-Number") == "5551234"
    assert forward.body == b"payload"
