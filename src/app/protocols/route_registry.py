"""Protocolo do registry de rotas.

O core depende apenas deste contrato. Implementações devem garantir
semântica de snapshot atômico: leituras concorrentes a uma escrita
observam o conjunto antigo ou o novo, nunca uma mistura.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from app.domain.route_config import (
        RouteConfig,
        RouteConfigCreate,
        RouteConfigUpdate,
        SyncOutcome,
    )


class RouteRegistryProtocol(ABC):
    """Contrato de leitura/escrita sobre regras de roteamento."""

    @abstractmethod
    def list_all(self) -> Sequence[RouteConfig]:
        """Snapshot completo mais recente, em ordem de inserção."""

    @abstractmethod
    def find_by_id(self, route_id: str) -> RouteConfig | None:
        """Regra pelo id ou None."""

    @abstractmethod
    def add(self, fields: RouteConfigCreate) -> RouteConfig:
        """Cria regra local (synced=False) com id e timestamps novos."""

    @abstractmethod
    def update(self, route_id: str, fields: RouteConfigUpdate) -> RouteConfig | None:
        """Aplica alteração parcial; None se o id não existir."""

    @abstractmethod
    def remove(self, route_id: str) -> bool:
        """Remove a regra; False se o id não existir."""

    @abstractmethod
    def sync_from_external(self, candidates: Iterable[Mapping[str, Any]]) -> SyncOutcome:
        """Substitui todo o subconjunto synced=True pelo lote mapeado.

        Regras locais (synced=False) permanecem intactas.
        """
