"""Exceções utilitárias compartilhadas."""

from .exceptions import (
    InfrastructureError,
    MalformedPayloadError,
    MissingIdentityError,
    RedisConnectionError,
    RegistryPersistenceError,
    RouteInactiveError,
    RouteNotFoundError,
    RoutingError,
    SyncSourceError,
    UpstreamUnavailableError,
)

__all__ = [
    "InfrastructureError",
    "MalformedPayloadError",
    "MissingIdentityError",
    "RedisConnectionError",
    "RegistryPersistenceError",
    "RouteInactiveError",
    "RouteNotFoundError",
    "RoutingError",
    "SyncSourceError",
    "UpstreamUnavailableError",
]
