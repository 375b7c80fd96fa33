"""Entrypoint do roteador de proxy por telefone.

Expõe a factory da aplicação ASGI (FastAPI).

Uso (produção):
    uvicorn app.app:create_app --factory --host 0.0.0.0 --port 3500

Uso (desenvolvimento):
    python -m app.app
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import create_api_router
from app.bootstrap import initialize_app, validate_runtime_settings
from app.bootstrap.clients import create_http_client
from app.bootstrap.dependencies import build_components
from app.observability import CorrelationIdMiddleware
from app.services.route_sync import RouteSyncScheduler
from config.logging import get_logger
from config.settings import get_base_settings, get_proxy_settings, get_sync_settings

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    import httpx

    from app.protocols.forwarder import ForwarderProtocol
    from app.protocols.route_registry import RouteRegistryProtocol
    from app.protocols.route_source import RouteSourceProtocol

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Gerencia ciclo de vida da aplicação.

    Startup:
    - Valida configurações
    - Inicia o job periódico de sincronização (quando habilitado)

    Shutdown:
    - Cancela o job de sincronização
    - Fecha o cliente HTTP compartilhado
    """
    service_name = get_base_settings().service_name
    logger.info("app_starting", extra={"service": service_name})
    validate_runtime_settings()

    sync_settings = get_sync_settings()
    scheduler: RouteSyncScheduler | None = None
    if sync_settings.enabled and app.state.sync_service.is_configured:
        scheduler = RouteSyncScheduler(app.state.sync_service, sync_settings.interval_seconds)
        scheduler.start()
    app.state.sync_scheduler = scheduler

    yield

    logger.info("app_shutting_down", extra={"service": service_name})
    if scheduler is not None:
        await scheduler.stop()
    if app.state.owns_http_client:
        await app.state.http_client.aclose()


def create_app(
    *,
    registry: RouteRegistryProtocol | None = None,
    forwarder: ForwarderProtocol | None = None,
    source: RouteSourceProtocol | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> FastAPI:
    """Cria e configura a aplicação FastAPI.

    Colaboradores não informados são criados a partir das settings.

    Returns:
        Aplicação FastAPI configurada.
    """
    initialize_app()

    fastapi_app = FastAPI(
        title="Phone Proxy Router",
        description="Roteamento de webhooks e chamadas de API por número de telefone",
        version="1.0.0",
        lifespan=lifespan,
    )

    fastapi_app.state.owns_http_client = http_client is None
    fastapi_app.state.http_client = http_client or create_http_client(get_proxy_settings())
    components = build_components(
        fastapi_app.state.http_client,
        registry=registry,
        forwarder=forwarder,
        source=source,
    )
    fastapi_app.state.registry = components.registry
    fastapi_app.state.dispatcher = components.dispatcher
    fastapi_app.state.sync_service = components.sync_service
    fastapi_app.state.sync_scheduler = None

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    fastapi_app.add_middleware(CorrelationIdMiddleware)

    fastapi_app.include_router(create_api_router())

    logger.info(
        "app_configured",
        extra={
            "registry_backend": getattr(components.registry, "backend_name", "custom"),
            "sync_configured": components.sync_service.is_configured,
        },
    )
    return fastapi_app


def main() -> None:
    """Entrypoint para execução direta (desenvolvimento)."""
    import uvicorn

    port = get_base_settings().port
    logger.info("app_dev_server_starting", extra={"port": port})
    uvicorn.run(
        "app.app:create_app",
        factory=True,
        host="0.0.0.0",
        port=port,
        reload=get_base_settings().is_development,
    )


if __name__ == "__main__":
    main()
