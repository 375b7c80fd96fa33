"""Fonte remota de definições de rota (HTTP JSON)."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from utils.errors import SyncSourceError

logger = logging.getLogger(__name__)

# Envelopes aceitos quando o corpo não é uma lista
_ENVELOPE_KEYS = ("routes", "configs", "data")


def extract_candidates(body: Any) -> list[dict[str, Any]]:
    """Extrai a lista de candidatas do corpo da fonte.

    Aceita uma lista JSON ou um objeto com `routes`/`configs`/`data`.
    Itens que não são objetos são descartados aqui.

    Raises:
        SyncSourceError: corpo sem lista reconhecível.
    """
    items = body
    if isinstance(body, dict):
        items = next(
            (body[key] for key in _ENVELOPE_KEYS if isinstance(body.get(key), list)),
            None,
        )
    if not isinstance(items, list):
        raise SyncSourceError("resposta da fonte não contém lista de rotas")
    return [item for item in items if isinstance(item, dict)]


class RemoteRouteSource:
    """Busca o lote completo de rotas em SYNC_SOURCE_URL."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        url: str,
        *,
        token: str = "",
        timeout_seconds: float = 15.0,
    ) -> None:
        self._client = client
        self._url = url
        self._token = token
        self._timeout = timeout_seconds

    @property
    def url(self) -> str:
        return self._url

    async def fetch_candidates(self) -> list[dict[str, Any]]:
        headers = {"Accept": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"

        try:
            response = await self._client.get(self._url, headers=headers, timeout=self._timeout)
        except httpx.TransportError as exc:
            logger.warning(
                "sync_source_unavailable",
                extra={"error_type": type(exc).__name__},
            )
            raise SyncSourceError("fonte de rotas indisponível") from exc

        if not response.is_success:
            logger.warning("sync_source_bad_status", extra={"status_code": response.status_code})
            raise SyncSourceError(f"fonte de rotas respondeu {response.status_code}")

        try:
            body = response.json()
        except ValueError as exc:
            raise SyncSourceError("resposta da fonte não é JSON") from exc

        candidates = extract_candidates(body)
        logger.info("sync_source_fetched", extra={"candidates": len(candidates)})
        return candidates
