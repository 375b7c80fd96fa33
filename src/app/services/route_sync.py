"""Sincronização de rotas com a fonte externa.

RouteSyncService executa uma passada (buscar lote -> substituir o
subconjunto synced). No máximo uma passada em voo: um novo disparo
durante outra passada retorna `skipped` imediatamente, sem fila.

RouteSyncScheduler dispara passadas periódicas em uma task asyncio
cancelável, criada no lifespan da aplicação.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Literal

from app.observability import record_sync

if TYPE_CHECKING:
    from app.domain.route_config import SyncOutcome
    from app.protocols.route_registry import RouteRegistryProtocol
    from app.protocols.route_source import RouteSourceProtocol

logger = logging.getLogger(__name__)

SyncStatus = Literal["completed", "skipped", "failed"]


@dataclass(frozen=True, slots=True)
class SyncResult:
    """Resultado de um disparo de sincronização."""

    status: SyncStatus
    trigger: str
    outcome: SyncOutcome | None = None
    error: str | None = None
    finished_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def as_dict(self) -> dict[str, object]:
        data: dict[str, object] = {
            "status": self.status,
            "trigger": self.trigger,
            "finishedAt": self.finished_at.isoformat(),
        }
        if self.outcome is not None:
            data.update(self.outcome.as_dict())
        if self.error:
            data["error"] = self.error
        return data


class SyncNotConfiguredError(RuntimeError):
    """Nenhuma fonte de sincronização configurada."""


class RouteSyncService:
    """Executa passadas de sincronização, uma de cada vez."""

    def __init__(
        self,
        registry: RouteRegistryProtocol,
        source: RouteSourceProtocol | None,
    ) -> None:
        self._registry = registry
        self._source = source
        self._lock = asyncio.Lock()
        self._last_result: SyncResult | None = None

    @property
    def is_configured(self) -> bool:
        return self._source is not None

    @property
    def is_running(self) -> bool:
        return self._lock.locked()

    @property
    def last_result(self) -> SyncResult | None:
        return self._last_result

    async def run_once(self, *, trigger: str = "manual") -> SyncResult:
        """Executa uma passada completa.

        Returns:
            SyncResult `completed`, ou `skipped` se outra passada está em voo.

        Raises:
            SyncNotConfiguredError: sem fonte configurada
            SyncSourceError: fonte indisponível ou resposta inválida
            InfrastructureError: falha ao persistir o novo snapshot
        """
        if self._source is None:
            raise SyncNotConfiguredError("SYNC_SOURCE_URL não configurado")

        # Sem await entre o teste e a aquisição: atômico no event loop.
        if self._lock.locked():
            logger.info("sync_skipped", extra={"trigger": trigger, "reason": "already_running"})
            return SyncResult(status="skipped", trigger=trigger)

        async with self._lock:
            start = time.perf_counter()
            logger.info("sync_started", extra={"trigger": trigger})
            try:
                candidates = await self._source.fetch_candidates()
                outcome = await asyncio.to_thread(self._registry.sync_from_external, candidates)
            except Exception as exc:
                self._last_result = SyncResult(
                    status="failed", trigger=trigger, error=type(exc).__name__
                )
                logger.warning(
                    "sync_failed",
                    extra={"trigger": trigger, "error_type": type(exc).__name__},
                )
                raise

            latency_ms = (time.perf_counter() - start) * 1000
            record_sync(outcome.as_dict(), latency_ms)
            result = SyncResult(status="completed", trigger=trigger, outcome=outcome)
            self._last_result = result
            logger.info("sync_completed", extra={"trigger": trigger, **outcome.as_dict()})
            return result


class RouteSyncScheduler:
    """Task periódica que chama `RouteSyncService.run_once`.

    Uma passada com falha é logada e o loop continua no próximo intervalo.
    """

    def __init__(
        self,
        service: RouteSyncService,
        interval_seconds: float,
        *,
        run_on_start: bool = True,
    ) -> None:
        self._service = service
        self._interval = interval_seconds
        self._run_on_start = run_on_start
        self._task: asyncio.Task[None] | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.is_running:
            return
        self._task = asyncio.create_task(self._loop(), name="route_sync_scheduler")
        logger.info("sync_scheduler_started", extra={"interval_seconds": self._interval})

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        logger.info("sync_scheduler_stopped")

    async def _loop(self) -> None:
        if not self._run_on_start:
            await asyncio.sleep(self._interval)
        while True:
            try:
                await self._service.run_once(trigger="scheduled")
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                logger.warning(
                    "sync_scheduled_pass_failed",
                    extra={"error_type": type(exc).__name__},
                )
            await asyncio.sleep(self._interval)
