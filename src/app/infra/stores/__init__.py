"""Implementações do registry de rotas (memória, arquivo JSON, Redis)."""

from app.infra.stores.file_route_registry import FileRouteRegistry
from app.infra.stores.memory_stores import MemoryRouteRegistry
from app.infra.stores.redis_route_registry import RedisRouteRegistry

__all__ = [
    "FileRouteRegistry",
    "MemoryRouteRegistry",
    "RedisRouteRegistry",
]
