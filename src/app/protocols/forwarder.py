"""Protocolo de encaminhamento HTTP e modelos de requisição/resposta.

Evita dependência direta do core na camada api (httpx/Starlette).
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable
from dataclasses import dataclass, field
from typing import Protocol


@dataclass(frozen=True, slots=True)
class ForwardRequest:
    """Requisição de entrada, independente de framework."""

    method: str
    path: str
    query: str = ""
    headers: tuple[tuple[str, str], ...] = ()
    body: bytes = b""

    def header(self, name: str) -> str | None:
        lowered = name.lower()
        for key, value in self.headers:
            if key.lower() == lowered:
                return value
        return None


@dataclass(slots=True)
class ForwardResponse:
    """Resposta do destino a ser devolvida sem modificação.

    `stream` produz o corpo bruto; `close` libera a conexão upstream.
    """

    status_code: int
    headers: list[tuple[str, str]] = field(default_factory=list)
    stream: AsyncIterator[bytes] | None = None
    content: bytes = b""
    close: Callable[[], Awaitable[None]] | None = None

    async def read(self) -> bytes:
        """Consome o corpo inteiro (usado quando não há streaming)."""
        if self.stream is None:
            return self.content
        try:
            chunks = [chunk async for chunk in self.stream]
        finally:
            self.stream = None
            await self.aclose()
        self.content = b"".join(chunks)
        return self.content

    async def aclose(self) -> None:
        if self.close is not None:
            close, self.close = self.close, None
            await close()


class ForwarderProtocol(Protocol):
    """Contrato mínimo para encaminhar uma requisição ao destino."""

    async def forward(
        self,
        request: ForwardRequest,
        *,
        target_url: str,
        strip_prefix: str,
        extra_headers: dict[str, str],
    ) -> ForwardResponse: ...
