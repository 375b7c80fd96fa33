"""Registry de rotas persistido em arquivo JSON.

Formato: lista de RouteConfig em camelCase, indentação de 2 espaços.
A gravação usa arquivo temporário + os.replace para nunca deixar o
arquivo parcialmente escrito.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

from app.infra.stores.memory_stores import MemoryRouteRegistry
from app.infra.stores.route_snapshot import Snapshot, dump_snapshot, load_snapshot
from utils.errors import RegistryPersistenceError

if TYPE_CHECKING:
    from app.domain.route_config import RouteConfig

logger = logging.getLogger(__name__)


def _read_routes(path: Path) -> tuple[RouteConfig, ...]:
    if not path.exists():
        return ()
    try:
        return load_snapshot(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        # Arquivo ilegível/corrompido: inicia vazio em vez de derrubar o boot.
        logger.error(
            "route_file_load_failed",
            extra={"path": str(path), "error_type": type(exc).__name__},
        )
        return ()


class FileRouteRegistry(MemoryRouteRegistry):
    """MemoryRouteRegistry que grava cada snapshot no disco antes de publicá-lo."""

    backend_name = "file"

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        routes = _read_routes(self._path)
        super().__init__(routes)
        logger.info("route_file_loaded", extra={"path": str(self._path), "routes": len(routes)})

    @property
    def path(self) -> Path:
        return self._path

    def _commit(self, snapshot: Snapshot) -> None:
        self._write(snapshot)
        super()._commit(snapshot)

    def _write(self, snapshot: Snapshot) -> None:
        payload = dump_snapshot(snapshot)
        tmp_name: str | None = None
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self._path.parent,
                prefix=f".{self._path.name}.",
                suffix=".tmp",
                delete=False,
            ) as handle:
                tmp_name = handle.name
                handle.write(payload)
            os.replace(tmp_name, self._path)
        except OSError as exc:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            logger.error(
                "route_file_write_failed",
                extra={"path": str(self._path), "error_type": type(exc).__name__},
            )
            raise RegistryPersistenceError("Falha ao gravar arquivo de rotas") from exc
