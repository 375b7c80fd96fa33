"""Registro de métricas via structured logging.

As métricas são registradas como logs estruturados e agregadas
posteriormente pelo coletor de logs.

Métricas suportadas:
- Latência: tempo de execução por componente/operação
- Resolução de rota: estratégia vencedora (ou ausência de rota)
- Sincronização: contagens de cada passada

Uso:
    from app.observability import record_latency, record_route_resolution

    start = time.perf_counter()
    # ... operação ...
    record_latency("forwarder", "forward", (time.perf_counter() - start) * 1000)
"""

from __future__ import annotations

import logging

from app.observability.correlation import get_correlation_id

logger = logging.getLogger(__name__)


def record_latency(
    component: str,
    operation: str,
    latency_ms: float,
    correlation_id: str | None = None,
) -> None:
    """Registra latência de operação.

    Args:
        component: Nome do componente (ex: "forwarder", "route_sync")
        operation: Nome da operação (ex: "forward", "run_once")
        latency_ms: Latência em milissegundos
        correlation_id: ID de correlação (default: contexto atual)
    """
    logger.info(
        "metric_latency",
        extra={
            "metric_type": "latency",
            "component": component,
            "operation": operation,
            "latency_ms": round(latency_ms, 2),
            "correlation_id": correlation_id or get_correlation_id(),
        },
    )


def record_route_resolution(
    channel: str,
    strategy: str | None,
    route_id: str | None = None,
) -> None:
    """Registra o resultado de uma resolução de rota.

    Args:
        channel: Origem da requisição ("proxy" ou "webhook")
        strategy: Estratégia vencedora (business|sender|default) ou None
        route_id: Rota escolhida, quando houver
    """
    logger.info(
        "metric_route_resolution",
        extra={
            "metric_type": "route_resolution",
            "component": "route_resolver",
            "channel": channel,
            "strategy": strategy or "none",
            "route_id": route_id,
            "resolved": strategy is not None,
        },
    )


def record_sync(outcome: dict[str, int], latency_ms: float) -> None:
    """Registra contagens de uma passada de sincronização."""
    logger.info(
        "metric_route_sync",
        extra={
            "metric_type": "route_sync",
            "component": "route_sync",
            "latency_ms": round(latency_ms, 2),
            **outcome,
        },
    )
