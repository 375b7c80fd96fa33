"""Endpoints de health check."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Literal

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from api.routes.dependencies import get_registry, get_sync_service
from config.settings import get_base_settings

router = APIRouter()


class SyncState(BaseModel):
    """Estado da sincronização exposto no health."""

    configured: bool
    running: bool
    last_status: str | None = None
    last_finished_at: str | None = None


class HealthResponse(BaseModel):
    """Resposta do health check."""

    status: str
    service: str
    timestamp: str
    routes: int
    registry_backend: str
    sync: SyncState
    version: str = "1.0.0"


@dataclass(frozen=True, slots=True)
class DependencyCheck:
    """Resultado de checagem de dependência."""

    status: Literal["ok", "failed"]
    latency_ms: float | None = None
    error: str | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "latency_ms": self.latency_ms,
            "error": self.error,
        }


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Liveness probe com contagem de rotas e estado da sincronização."""
    registry = get_registry(request)
    sync_service = get_sync_service(request)
    last = sync_service.last_result
    routes = await asyncio.to_thread(registry.list_all)

    return HealthResponse(
        status="healthy",
        service=get_base_settings().service_name,
        timestamp=datetime.now(UTC).isoformat(),
        routes=len(routes),
        registry_backend=getattr(registry, "backend_name", type(registry).__name__),
        sync=SyncState(
            configured=sync_service.is_configured,
            running=sync_service.is_running,
            last_status=last.status if last else None,
            last_finished_at=last.finished_at.isoformat() if last else None,
        ),
    )


@router.get("/ready")
async def readiness_check(request: Request) -> JSONResponse:
    """Readiness probe: registry legível (e Redis respondendo, quando usado)."""
    registry_check = await _check_registry(get_registry(request))
    ready = registry_check.status == "ok"

    payload = {
        "status": "ready" if ready else "not_ready",
        "checks": {"registry": registry_check.as_dict()},
        "timestamp": datetime.now(UTC).isoformat(),
    }
    return JSONResponse(content=payload, status_code=200 if ready else 503)


async def _check_registry(registry: Any) -> DependencyCheck:
    started_at = time.perf_counter()
    try:
        await asyncio.wait_for(asyncio.to_thread(registry.list_all), timeout=2.0)
    except TimeoutError:
        return DependencyCheck(status="failed", error="timeout")
    except Exception as exc:
        return DependencyCheck(status="failed", error=type(exc).__name__)
    latency_ms = (time.perf_counter() - started_at) * 1000
    return DependencyCheck(status="ok", latency_ms=round(latency_ms, 2))
