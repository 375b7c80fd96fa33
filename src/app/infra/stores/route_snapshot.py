"""Operações puras sobre snapshots imutáveis de rotas.

Cada função recebe a tupla atual e devolve uma nova; os stores apenas
decidem como trocar a referência atomicamente (lock, transação Redis...).
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from app.domain.route_config import RouteConfig, SyncOutcome, route_from_candidate

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from app.domain.route_config import RouteConfigCreate, RouteConfigUpdate

Snapshot = tuple[RouteConfig, ...]


def find_in(snapshot: Snapshot, route_id: str) -> RouteConfig | None:
    return next((route for route in snapshot if route.id == route_id), None)


def apply_add(snapshot: Snapshot, fields: RouteConfigCreate) -> tuple[Snapshot, RouteConfig]:
    route = fields.build()
    return (*snapshot, route), route


def apply_update(
    snapshot: Snapshot,
    route_id: str,
    fields: RouteConfigUpdate,
) -> tuple[Snapshot, RouteConfig | None]:
    for index, current in enumerate(snapshot):
        if current.id == route_id:
            updated = current.with_changes(fields.changes())
            return (*snapshot[:index], updated, *snapshot[index + 1 :]), updated
    return snapshot, None


def apply_remove(snapshot: Snapshot, route_id: str) -> tuple[Snapshot, bool]:
    remaining = tuple(route for route in snapshot if route.id != route_id)
    return remaining, len(remaining) != len(snapshot)


def apply_sync(
    snapshot: Snapshot,
    candidates: Iterable[Mapping[str, Any]],
) -> tuple[Snapshot, SyncOutcome]:
    """Mantém locais na ordem original e anexa o lote sincronizado."""
    local = tuple(route for route in snapshot if not route.synced)
    fresh: list[RouteConfig] = []
    dropped = 0
    for candidate in candidates:
        route = route_from_candidate(candidate)
        if route is None:
            dropped += 1
            continue
        fresh.append(route)
    outcome = SyncOutcome(
        added=len(fresh),
        removed=len(snapshot) - len(local),
        dropped=dropped,
        local=len(local),
    )
    return (*local, *fresh), outcome


def dump_snapshot(snapshot: Snapshot) -> str:
    """Serializa para JSON (camelCase, indentado)."""
    return json.dumps([route.to_wire() for route in snapshot], indent=2, ensure_ascii=False)


def load_snapshot(raw: str | bytes) -> Snapshot:
    """Desserializa JSON gerado por dump_snapshot.

    Raises:
        ValueError: conteúdo não é uma lista de rotas válidas.
    """
    data = json.loads(raw)
    if not isinstance(data, list):
        raise ValueError("snapshot_not_a_list")
    return tuple(RouteConfig.model_validate(item) for item in data)
