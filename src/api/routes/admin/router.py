"""API administrativa de rotas: /api/config.

Endpoints:
- GET    /api/config         lista todas as regras
- POST   /api/config         cria regra local (201)
- GET    /api/config/{id}    detalhe
- PUT    /api/config/{id}    alteração parcial
- DELETE /api/config/{id}    remoção
- POST   /api/config/sync    sincronização forçada com a fonte remota

Sem autenticação: o serviço deve ficar atrás de rede privada.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, TypeVar

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from api.routes.dependencies import get_registry, get_sync_service
from app.domain.route_config import RouteConfigCreate, RouteConfigUpdate
from app.services.route_sync import SyncNotConfiguredError
from utils.errors import InfrastructureError, SyncSourceError

logger = logging.getLogger(__name__)

router = APIRouter()

ModelT = TypeVar("ModelT", bound=BaseModel)


class _BadRequest(Exception):
    def __init__(self, detail: Any) -> None:
        super().__init__("bad_request")
        self.detail = detail


def _error(status_code: int, error: str, detail: Any = None) -> JSONResponse:
    content: dict[str, Any] = {"error": error}
    if detail is not None:
        content["detail"] = detail
    return JSONResponse(status_code=status_code, content=content)


def _not_found(route_id: str) -> JSONResponse:
    return _error(status.HTTP_404_NOT_FOUND, "route_not_found", f"rota {route_id} não encontrada")


async def _parse_model(request: Request, model: type[ModelT]) -> ModelT:
    try:
        payload = json.loads(await request.body() or b"{}")
    except (ValueError, RecursionError) as exc:
        raise _BadRequest("corpo JSON inválido") from exc
    if not isinstance(payload, dict):
        raise _BadRequest("corpo deve ser um objeto JSON")
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise _BadRequest(
            [
                {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
                for err in exc.errors()
            ]
        ) from exc


def _persistence_failed(exc: InfrastructureError, operation: str) -> JSONResponse:
    logger.error(
        "route_persistence_failed",
        extra={"operation": operation, "error_type": type(exc).__name__},
    )
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "persistence_error")


@router.get("")
async def list_routes(request: Request) -> JSONResponse:
    try:
        routes = await asyncio.to_thread(get_registry(request).list_all)
    except InfrastructureError as exc:
        return _persistence_failed(exc, "list")
    return JSONResponse(content=[route.to_wire() for route in routes])


@router.post("")
async def create_route(request: Request) -> JSONResponse:
    try:
        fields = await _parse_model(request, RouteConfigCreate)
    except _BadRequest as exc:
        return _error(status.HTTP_400_BAD_REQUEST, "validation_error", exc.detail)

    try:
        route = await asyncio.to_thread(get_registry(request).add, fields)
    except InfrastructureError as exc:
        return _persistence_failed(exc, "add")
    return JSONResponse(status_code=status.HTTP_201_CREATED, content=route.to_wire())


@router.post("/sync")
async def force_sync(request: Request) -> JSONResponse:
    """Dispara uma passada de sincronização (mesmo colaborador do job periódico)."""
    service = get_sync_service(request)
    try:
        result = await service.run_once(trigger="manual")
    except SyncNotConfiguredError:
        return _error(status.HTTP_503_SERVICE_UNAVAILABLE, "sync_not_configured")
    except SyncSourceError as exc:
        return _error(status.HTTP_502_BAD_GATEWAY, "sync_source_error", str(exc))
    except InfrastructureError as exc:
        return _persistence_failed(exc, "sync")

    status_code = status.HTTP_202_ACCEPTED if result.status == "skipped" else status.HTTP_200_OK
    return JSONResponse(status_code=status_code, content=result.as_dict())


@router.get("/{route_id}")
async def get_route(request: Request, route_id: str) -> JSONResponse:
    try:
        route = await asyncio.to_thread(get_registry(request).find_by_id, route_id)
    except InfrastructureError as exc:
        return _persistence_failed(exc, "get")
    if route is None:
        return _not_found(route_id)
    return JSONResponse(content=route.to_wire())


@router.put("/{route_id}")
async def update_route(request: Request, route_id: str) -> JSONResponse:
    try:
        fields = await _parse_model(request, RouteConfigUpdate)
    except _BadRequest as exc:
        return _error(status.HTTP_400_BAD_REQUEST, "validation_error", exc.detail)

    try:
        route = await asyncio.to_thread(get_registry(request).update, route_id, fields)
    except ValidationError as exc:
        return _error(status.HTTP_400_BAD_REQUEST, "validation_error", str(exc))
    except InfrastructureError as exc:
        return _persistence_failed(exc, "update")

    if route is None:
        return _not_found(route_id)
    return JSONResponse(content=route.to_wire())


@router.delete("/{route_id}")
async def delete_route(request: Request, route_id: str) -> JSONResponse:
    try:
        removed = await asyncio.to_thread(get_registry(request).remove, route_id)
    except InfrastructureError as exc:
        return _persistence_failed(exc, "remove")

    if not removed:
        return _not_found(route_id)
    return JSONResponse(content={"message": "rota removida", "id": route_id})
