"""Acesso aos colaboradores montados no app.state pelo bootstrap."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Request

if TYPE_CHECKING:
    from app.protocols.route_registry import RouteRegistryProtocol
    from app.services.proxy_dispatcher import ProxyDispatcher
    from app.services.route_sync import RouteSyncService


def get_registry(request: Request) -> RouteRegistryProtocol:
    return request.app.state.registry


def get_dispatcher(request: Request) -> ProxyDispatcher:
    return request.app.state.dispatcher


def get_sync_service(request: Request) -> RouteSyncService:
    return request.app.state.sync_service
