"""Conector de encaminhamento HTTP para os destinos das rotas."""

from .forwarder import (
    HOP_BY_HOP_HEADERS,
    HttpForwarder,
    build_target_url,
    create_forwarding_client,
    filter_request_headers,
    filter_response_headers,
    strip_route_prefix,
)

__all__ = [
    "HOP_BY_HOP_HEADERS",
    "HttpForwarder",
    "build_target_url",
    "create_forwarding_client",
    "filter_request_headers",
    "filter_response_headers",
    "strip_route_prefix",
]
