"""Redis Route Registry — registry compartilhado entre instâncias.

O snapshot inteiro vive em uma única chave (JSON). Escritas usam
WATCH/MULTI (transação otimista); leituras fazem um GET, portanto
sempre observam um conjunto completo.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, TypeVar

from redis.exceptions import RedisError

from app.infra.stores.route_snapshot import (
    Snapshot,
    apply_add,
    apply_remove,
    apply_sync,
    apply_update,
    dump_snapshot,
    find_in,
    load_snapshot,
)
from app.protocols.route_registry import RouteRegistryProtocol
from utils.errors import RedisConnectionError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping

    from redis import Redis
    from redis.client import Pipeline

    from app.domain.route_config import (
        RouteConfig,
        RouteConfigCreate,
        RouteConfigUpdate,
        SyncOutcome,
    )

logger = logging.getLogger(__name__)

DEFAULT_ROUTES_KEY = "proxy_router:routes"

T = TypeVar("T")


class RedisRouteRegistry(RouteRegistryProtocol):
    """Registry de rotas em Redis (Upstash compatível).

    Args:
        redis_client: Cliente Redis síncrono
        key: Chave que armazena o snapshot
    """

    backend_name = "redis"

    def __init__(self, redis_client: Redis[bytes], key: str = DEFAULT_ROUTES_KEY) -> None:
        self._redis = redis_client
        self._key = key

    def _decode(self, raw: bytes | str | None) -> Snapshot:
        if raw is None:
            return ()
        try:
            return load_snapshot(raw)
        except ValueError as exc:
            logger.error(
                "route_snapshot_corrupted",
                extra={"key": self._key, "error_type": type(exc).__name__},
            )
            return ()

    def _read(self) -> Snapshot:
        try:
            raw = self._redis.get(self._key)
        except RedisError as exc:
            raise RedisConnectionError("Falha ao ler rotas no Redis") from exc
        return self._decode(raw)

    def _mutate(self, operation: Callable[[Snapshot], tuple[Snapshot | None, T]]) -> T:
        """Executa read-modify-write atômico; operation devolve (novo snapshot|None, resultado)."""

        def _apply(pipe: Pipeline[bytes]) -> T:
            current = self._decode(pipe.get(self._key))
            snapshot, result = operation(current)
            if snapshot is not None:
                pipe.multi()
                pipe.set(self._key, dump_snapshot(snapshot))
            return result

        try:
            return self._redis.transaction(_apply, self._key, value_from_callable=True)
        except RedisError as exc:
            raise RedisConnectionError("Falha ao gravar rotas no Redis") from exc

    # ──────────────────────────────────────────────────────────────
    # RouteRegistryProtocol
    # ──────────────────────────────────────────────────────────────

    def list_all(self) -> Snapshot:
        return self._read()

    def find_by_id(self, route_id: str) -> RouteConfig | None:
        return find_in(self._read(), route_id)

    def add(self, fields: RouteConfigCreate) -> RouteConfig:
        route = self._mutate(lambda current: apply_add(current, fields))
        logger.info("route_added", extra={"route_id": route.id, "backend": self.backend_name})
        return route

    def update(self, route_id: str, fields: RouteConfigUpdate) -> RouteConfig | None:
        def _operation(current: Snapshot) -> tuple[Snapshot | None, RouteConfig | None]:
            snapshot, route = apply_update(current, route_id, fields)
            return (snapshot if route is not None else None), route

        route = self._mutate(_operation)
        if route is not None:
            logger.info("route_updated", extra={"route_id": route_id, "backend": self.backend_name})
        return route

    def remove(self, route_id: str) -> bool:
        def _operation(current: Snapshot) -> tuple[Snapshot | None, bool]:
            snapshot, removed = apply_remove(current, route_id)
            return (snapshot if removed else None), removed

        removed = self._mutate(_operation)
        if removed:
            logger.info("route_removed", extra={"route_id": route_id, "backend": self.backend_name})
        return removed

    def sync_from_external(self, candidates: Iterable[Mapping[str, Any]]) -> SyncOutcome:
        batch = list(candidates)
        outcome = self._mutate(lambda current: apply_sync(current, batch))
        logger.info("routes_synced", extra={**outcome.as_dict(), "backend": self.backend_name})
        return outcome
