"""Observabilidade — correlation_id e métricas em logs estruturados.

Uso:
    from app.observability import get_correlation_id, set_correlation_id
    from app.observability import record_latency, record_route_resolution
"""

from app.observability.correlation import (
    CORRELATION_HEADER,
    generate_correlation_id,
    get_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)
from app.observability.metrics import record_latency, record_route_resolution, record_sync
from app.observability.middleware import CorrelationIdMiddleware

__all__ = [
    "CORRELATION_HEADER",
    "CorrelationIdMiddleware",
    "generate_correlation_id",
    "get_correlation_id",
    "record_latency",
    "record_route_resolution",
    "record_sync",
    "reset_correlation_id",
    "set_correlation_id",
]
