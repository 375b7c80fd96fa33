"""Registry de rotas em memória — desenvolvimento, testes e base do store em arquivo.

ATENÇÃO: sem persistência entre reinícios.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any

from app.infra.stores.route_snapshot import (
    Snapshot,
    apply_add,
    apply_remove,
    apply_sync,
    apply_update,
    find_in,
)
from app.protocols.route_registry import RouteRegistryProtocol

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from app.domain.route_config import (
        RouteConfig,
        RouteConfigCreate,
        RouteConfigUpdate,
        SyncOutcome,
    )

logger = logging.getLogger(__name__)


class MemoryRouteRegistry(RouteRegistryProtocol):
    """Registry com snapshot imutável trocado sob lock.

    Leitores nunca bloqueiam: `list_all` devolve a tupla corrente.
    Escritores são serializados por `_write_lock` e publicam a nova tupla
    com uma única atribuição.
    """

    backend_name = "memory"

    def __init__(self, routes: Iterable[RouteConfig] = ()) -> None:
        self._snapshot: Snapshot = tuple(routes)
        self._write_lock = threading.Lock()

    def _commit(self, snapshot: Snapshot) -> None:
        """Publica o novo snapshot. Subclasses persistem antes de publicar."""
        self._snapshot = snapshot

    def list_all(self) -> Snapshot:
        return self._snapshot

    def find_by_id(self, route_id: str) -> RouteConfig | None:
        return find_in(self._snapshot, route_id)

    def add(self, fields: RouteConfigCreate) -> RouteConfig:
        with self._write_lock:
            snapshot, route = apply_add(self._snapshot, fields)
            self._commit(snapshot)
        logger.info(
            "route_added",
            extra={"route_id": route.id, "route_by": route.route_by.value, "backend": self.backend_name},
        )
        return route

    def update(self, route_id: str, fields: RouteConfigUpdate) -> RouteConfig | None:
        with self._write_lock:
            snapshot, route = apply_update(self._snapshot, route_id, fields)
            if route is None:
                return None
            self._commit(snapshot)
        logger.info("route_updated", extra={"route_id": route_id, "backend": self.backend_name})
        return route

    def remove(self, route_id: str) -> bool:
        with self._write_lock:
            snapshot, removed = apply_remove(self._snapshot, route_id)
            if not removed:
                return False
            self._commit(snapshot)
        logger.info("route_removed", extra={"route_id": route_id, "backend": self.backend_name})
        return True

    def sync_from_external(self, candidates: Iterable[Mapping[str, Any]]) -> SyncOutcome:
        with self._write_lock:
            snapshot, outcome = apply_sync(self._snapshot, candidates)
            self._commit(snapshot)
        logger.info("routes_synced", extra={**outcome.as_dict(), "backend": self.backend_name})
        return outcome
