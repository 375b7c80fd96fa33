"""Protocolos e contratos do core da aplicação."""

from .forwarder import ForwarderProtocol, ForwardRequest, ForwardResponse
from .identity import NormalizedIdentity
from .route_registry import RouteRegistryProtocol
from .route_source import RouteSourceProtocol

__all__ = [
    "ForwardRequest",
    "ForwardResponse",
    "ForwarderProtocol",
    "NormalizedIdentity",
    "RouteRegistryProtocol",
    "RouteSourceProtocol",
]
