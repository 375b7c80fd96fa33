"""Middleware ASGI de correlation_id.

Implementado em ASGI puro para não bufferizar respostas em streaming
do proxy.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from app.observability.correlation import (
    CORRELATION_HEADER,
    get_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Message, Receive, Scope, Send


class CorrelationIdMiddleware:
    """Define o correlation_id por requisição e ecoa no header da resposta."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        incoming = None
        for key, value in scope.get("headers", []):
            if key.decode("latin-1").lower() == CORRELATION_HEADER:
                incoming = value.decode("latin-1")
                break

        token = set_correlation_id(incoming)
        correlation_id = get_correlation_id()

        async def send_with_header(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = [
                    (key, value)
                    for key, value in message.get("headers", [])
                    if key.decode("latin-1").lower() != CORRELATION_HEADER
                ]
                headers.append((CORRELATION_HEADER.encode("latin-1"), correlation_id.encode("latin-1")))
                message["headers"] = headers
            await send(message)

        try:
            await self.app(scope, receive, send_with_header)
        finally:
            reset_correlation_id(token)
