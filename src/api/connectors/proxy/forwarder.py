"""Encaminhamento HTTP transparente para o destino da rota.

Único ponto de IO de saída no caminho da requisição. Sem retries:
falha de transporte vira UpstreamUnavailableError e a resposta do
destino (qualquer status) é devolvida sem modificação.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

import httpx

from app.observability import record_latency
from app.protocols.forwarder import ForwardResponse
from utils.errors import UpstreamUnavailableError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from app.protocols.forwarder import ForwardRequest

logger = logging.getLogger(__name__)

HOP_BY_HOP_HEADERS = frozenset(
    {
        "connection",
        "keep-alive",
        "proxy-authenticate",
        "proxy-authorization",
        "proxy-connection",
        "te",
        "trailer",
        "trailers",
        "transfer-encoding",
        "upgrade",
    }
)

# Recalculados pelo cliente HTTP (host aponta para o destino).
_REWRITTEN_REQUEST_HEADERS = frozenset({"host", "content-length"})


def strip_route_prefix(path: str, prefix: str) -> str:
    """Remove o prefixo de roteamento do início do path.

    `/proxy/items/5` com prefixo `/proxy` vira `/items/5`. Paths que
    não começam pelo prefixo (segmento inteiro) ficam intactos.
    """
    if not prefix or prefix == "/":
        return path
    if path == prefix:
        return ""
    if path.startswith(prefix + "/"):
        return path[len(prefix) :]
    return path


def build_target_url(target_url: str, path: str, prefix: str, query: str = "") -> str:
    """Monta a URL final: destino + path sem prefixo + query bruta."""
    remainder = strip_route_prefix(path, prefix)
    if remainder:
        url = target_url.rstrip("/") + "/" + remainder.lstrip("/")
    else:
        url = target_url
    if query:
        url = f"{url}?{query}"
    return url


def _connection_tokens(headers: Iterable[tuple[str, str]]) -> set[str]:
    tokens: set[str] = set()
    for key, value in headers:
        if key.lower() == "connection":
            tokens.update(token.strip().lower() for token in value.split(",") if token.strip())
    return tokens


def filter_request_headers(
    headers: Iterable[tuple[str, str]],
    extra_headers: dict[str, str] | None = None,
) -> list[tuple[str, str]]:
    """Copia headers de entrada sem hop-by-hop, host e content-length."""
    pairs = list(headers)
    dropped = HOP_BY_HOP_HEADERS | _REWRITTEN_REQUEST_HEADERS | _connection_tokens(pairs)
    overridden = {name.lower() for name in (extra_headers or {})}
    result = [
        (key, value)
        for key, value in pairs
        if key.lower() not in dropped and key.lower() not in overridden
    ]
    result.extend((extra_headers or {}).items())
    return result


def filter_response_headers(headers: Iterable[tuple[str, str]]) -> list[tuple[str, str]]:
    """Headers do destino sem hop-by-hop."""
    pairs = list(headers)
    dropped = HOP_BY_HOP_HEADERS | _connection_tokens(pairs)
    return [(key, value) for key, value in pairs if key.lower() not in dropped]


def create_forwarding_client(
    *,
    request_timeout_seconds: float = 30.0,
    connect_timeout_seconds: float = 10.0,
) -> httpx.AsyncClient:
    """Cria o AsyncClient compartilhado (aberto no startup, fechado no shutdown)."""
    timeout = httpx.Timeout(request_timeout_seconds, connect=connect_timeout_seconds)
    return httpx.AsyncClient(timeout=timeout, follow_redirects=False)


class HttpForwarder:
    """Encaminha uma requisição para o destino via httpx, em streaming."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def forward(
        self,
        request: ForwardRequest,
        *,
        target_url: str,
        strip_prefix: str,
        extra_headers: dict[str, str],
    ) -> ForwardResponse:
        url = build_target_url(target_url, request.path, strip_prefix, request.query)
        outbound = self._client.build_request(
            request.method,
            url,
            headers=filter_request_headers(request.headers, extra_headers),
            content=request.body,
        )

        start = time.perf_counter()
        try:
            response = await self._client.send(outbound, stream=True)
        except httpx.TransportError as exc:
            logger.warning(
                "upstream_unavailable",
                extra={
                    "method": request.method,
                    "target_host": outbound.url.host,
                    "error_type": type(exc).__name__,
                },
            )
            raise UpstreamUnavailableError(f"destino indisponível: {outbound.url.host}") from exc

        latency_ms = (time.perf_counter() - start) * 1000
        record_latency("forwarder", "forward", latency_ms)
        logger.info(
            "proxy_forwarded",
            extra={
                "method": request.method,
                "target_host": outbound.url.host,
                "status_code": response.status_code,
                "latency_ms": round(latency_ms, 2),
            },
        )

        headers = filter_response_headers(response.headers.multi_items())
        if response.is_stream_consumed:
            # Corpo já carregado pelo transporte: aiter_raw não pode ser usado.
            return ForwardResponse(
                status_code=response.status_code,
                headers=headers,
                content=response.content,
                close=response.aclose,
            )

        return ForwardResponse(
            status_code=response.status_code,
            headers=headers,
            stream=response.aiter_raw(),
            close=response.aclose,
        )
