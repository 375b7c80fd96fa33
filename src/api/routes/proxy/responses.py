"""Conversão entre Starlette e os modelos de encaminhamento do core."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from fastapi import Request, Response
from fastapi.responses import JSONResponse, StreamingResponse
from starlette.background import BackgroundTask

from app.protocols.forwarder import ForwardRequest

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from app.protocols.forwarder import ForwardResponse
    from utils.errors import RoutingError


def raw_request_path(request: Request) -> str:
    """Path como chegou no fio (escapes como %2F e %3F intactos), sem o root_path."""
    scope = request.scope
    raw_path = scope.get("raw_path")
    if raw_path:
        path = raw_path.split(b"?", 1)[0].decode("latin-1")
    else:
        path = quote(scope["path"], safe="/:@!$&'()*+,;=-._~")

    root_path = quote(scope.get("root_path", ""), safe="/")
    if root_path and (path == root_path or path.startswith(root_path + "/")):
        path = path[len(root_path) :] or "/"
    return path


def build_forward_request(request: Request, raw_body: bytes) -> ForwardRequest:
    """Requisição de entrada sem dependência de framework (path, query e headers brutos)."""
    headers = tuple(
        (key.decode("latin-1"), value.decode("latin-1")) for key, value in request.headers.raw
    )
    return ForwardRequest(
        method=request.method,
        path=raw_request_path(request),
        query=request.scope.get("query_string", b"").decode("latin-1"),
        headers=headers,
        body=raw_body,
    )


def _raw_headers(headers: list[tuple[str, str]]) -> list[tuple[bytes, bytes]]:
    return [(key.lower().encode("latin-1"), value.encode("latin-1")) for key, value in headers]


def relay_streaming(forwarded: ForwardResponse) -> Response:
    """Devolve a resposta do destino em streaming, sem modificar status/corpo."""

    async def body() -> AsyncIterator[bytes]:
        if forwarded.stream is None:
            yield forwarded.content
            return
        try:
            async for chunk in forwarded.stream:
                yield chunk
        finally:
            await forwarded.aclose()

    response = StreamingResponse(
        body(),
        status_code=forwarded.status_code,
        background=BackgroundTask(forwarded.aclose),
    )
    response.raw_headers = _raw_headers(forwarded.headers)
    return response


def relay_buffered(forwarded: ForwardResponse, content: bytes) -> Response:
    """Devolve a resposta do destino já lida por completo."""
    response = Response(content=content, status_code=forwarded.status_code)
    headers = [(key, value) for key, value in forwarded.headers if key.lower() != "content-length"]
    headers.append(("content-length", str(len(content))))
    response.raw_headers = _raw_headers(headers)
    return response


def routing_error_response(exc: RoutingError, **extra: Any) -> JSONResponse:
    """Resposta JSON de erro do proxy genérico: {"error", "detail", ...}."""
    content: dict[str, Any] = {"error": exc.code, "detail": str(exc)}
    if exc.phone:
        content["phoneNumber"] = exc.phone
    content.update(extra)
    return JSONResponse(status_code=exc.status_code, content=content)
