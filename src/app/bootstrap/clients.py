"""Factories de clientes externos — Redis e HTTP."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import TYPE_CHECKING

from api.connectors.proxy import create_forwarding_client

if TYPE_CHECKING:
    import httpx
    from redis import Redis

    from config.settings import ProxySettings

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def create_redis_client(redis_url: str) -> Redis[bytes]:
    """Cria cliente Redis síncrono (singleton por URL).

    Raises:
        ValueError: Se REDIS_URL não configurado
    """
    import redis

    if not redis_url:
        msg = "REDIS_URL não configurado"
        raise ValueError(msg)

    client: Redis[bytes] = redis.from_url(
        redis_url,
        decode_responses=False,
        socket_timeout=5.0,
        socket_connect_timeout=5.0,
        retry_on_timeout=True,
    )

    host = client.connection_pool.connection_kwargs.get("host", "unknown")
    logger.info("redis_client_created", extra={"host": host})
    return client


def create_http_client(settings: ProxySettings) -> httpx.AsyncClient:
    """Cria o AsyncClient compartilhado do encaminhamento e da sincronização.

    O chamador é dono do ciclo de vida (fechar no shutdown).
    """
    client = create_forwarding_client(
        request_timeout_seconds=settings.request_timeout_seconds,
        connect_timeout_seconds=settings.connect_timeout_seconds,
    )
    logger.info(
        "http_client_created",
        extra={
            "request_timeout_seconds": settings.request_timeout_seconds,
            "connect_timeout_seconds": settings.connect_timeout_seconds,
        },
    )
    return client
