"""Factories do roteador baseadas em configuração de ambiente.

Composition root: liga implementações concretas (registry, forwarder,
fonte remota) aos serviços do core.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from api.connectors.proxy import HttpForwarder
from app.bootstrap.clients import create_redis_client
from app.infra.stores import FileRouteRegistry, MemoryRouteRegistry, RedisRouteRegistry
from app.infra.sync import RemoteRouteSource
from app.services.proxy_dispatcher import ProxyDispatcher
from app.services.route_resolver import RouteResolver
from app.services.route_sync import RouteSyncService
from config.settings import (
    get_base_settings,
    get_proxy_settings,
    get_registry_settings,
    get_sync_settings,
    get_whatsapp_settings,
)

if TYPE_CHECKING:
    import httpx

    from app.protocols.forwarder import ForwarderProtocol
    from app.protocols.route_registry import RouteRegistryProtocol
    from app.protocols.route_source import RouteSourceProtocol
    from config.settings import RegistrySettings, SyncSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RouterComponents:
    """Colaboradores montados no app.state."""

    registry: RouteRegistryProtocol
    dispatcher: ProxyDispatcher
    sync_service: RouteSyncService


def create_route_registry(settings: RegistrySettings | None = None) -> RouteRegistryProtocol:
    """Cria o registry conforme REGISTRY_BACKEND (memory|file|redis)."""
    settings = settings or get_registry_settings()

    if settings.backend == "redis":
        client = create_redis_client(get_base_settings().redis_url)
        logger.info("route_registry_selected", extra={"backend": "redis", "key": settings.redis_key})
        return RedisRouteRegistry(client, key=settings.redis_key)

    if settings.backend == "memory":
        logger.info("route_registry_selected", extra={"backend": "memory"})
        return MemoryRouteRegistry()

    logger.info("route_registry_selected", extra={"backend": "file", "path": settings.file_path})
    return FileRouteRegistry(settings.file_path)


def create_route_source(
    http_client: httpx.AsyncClient,
    settings: SyncSettings | None = None,
) -> RouteSourceProtocol | None:
    """Fonte remota de rotas, ou None quando SYNC_SOURCE_URL está vazio."""
    settings = settings or get_sync_settings()
    if not settings.is_configured:
        return None
    return RemoteRouteSource(
        http_client,
        settings.source_url,
        token=settings.source_token,
        timeout_seconds=settings.timeout_seconds,
    )


def create_dispatcher(
    registry: RouteRegistryProtocol,
    forwarder: ForwarderProtocol,
) -> ProxyDispatcher:
    return ProxyDispatcher(
        RouteResolver(registry),
        forwarder,
        get_proxy_settings(),
        webhook_prefix=get_whatsapp_settings().webhook_path,
    )


def build_components(
    http_client: httpx.AsyncClient,
    *,
    registry: RouteRegistryProtocol | None = None,
    forwarder: ForwarderProtocol | None = None,
    source: RouteSourceProtocol | None = None,
) -> RouterComponents:
    """Monta o grafo de colaboradores; parâmetros explícitos substituem os padrões."""
    registry = registry if registry is not None else create_route_registry()
    forwarder = forwarder if forwarder is not None else HttpForwarder(http_client)
    source = source if source is not None else create_route_source(http_client)
    return RouterComponents(
        registry=registry,
        dispatcher=create_dispatcher(registry, forwarder),
        sync_service=RouteSyncService(registry, source),
    )
