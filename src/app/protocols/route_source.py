"""Protocolo da fonte externa de definições de rota."""

from __future__ import annotations

from typing import Any, Protocol


class RouteSourceProtocol(Protocol):
    """Fornece o lote completo de candidatas para sincronização."""

    async def fetch_candidates(self) -> list[dict[str, Any]]: ...
