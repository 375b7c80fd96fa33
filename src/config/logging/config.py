"""Configuração centralizada de logging.

Uso:
    from config.logging import configure_logging, get_logger

    # Na inicialização do serviço (app/bootstrap/)
    configure_logging(level="INFO", service_name="phone-proxy-router")

    # Em qualquer módulo
    logger = get_logger(__name__)
    logger.info("route_added", extra={"route_id": route.id})
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Literal

from config.logging.filters import CorrelationIdFilter
from config.logging.formatters import create_json_formatter, create_text_formatter

if TYPE_CHECKING:
    from collections.abc import Callable

LogFormat = Literal["json", "text"]

VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})
VALID_LOG_FORMATS = frozenset({"json", "text"})

DEFAULT_SERVICE_NAME = "phone-proxy-router"


def configure_logging(
    level: str = "INFO",
    service_name: str = DEFAULT_SERVICE_NAME,
    correlation_id_getter: Callable[[], str] | None = None,
    log_format: str = "json",
    environment: str | None = None,
) -> None:
    """Configura o root logger com um único handler em stdout.

    Args:
        level: Nível de log (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        service_name: Nome do serviço para identificação nos logs.
        correlation_id_getter: Função que retorna o correlation_id atual.
        log_format: "json" (padrão) ou "text".
        environment: Ambiente incluído em todo record (opcional).

    Raises:
        ValueError: Se o nível ou o formato forem inválidos.
    """
    level_upper = level.upper()
    if level_upper not in VALID_LOG_LEVELS:
        raise ValueError(
            f"Nível de log inválido: {level}. "
            f"Válidos: {', '.join(sorted(VALID_LOG_LEVELS))}"
        )

    format_lower = log_format.lower()
    if format_lower not in VALID_LOG_FORMATS:
        raise ValueError(
            f"Formato de log inválido: {log_format}. "
            f"Válidos: {', '.join(sorted(VALID_LOG_FORMATS))}"
        )

    formatter = create_text_formatter() if format_lower == "text" else create_json_formatter()

    handler = logging.StreamHandler()
    handler.setLevel(level_upper)
    handler.setFormatter(formatter)
    handler.addFilter(CorrelationIdFilter(service_name, correlation_id_getter, environment=environment))

    root = logging.getLogger()
    root.setLevel(level_upper)
    # Substituir handlers existentes para evitar duplicação
    root.handlers = [handler]


def get_logger(name: str) -> logging.Logger:
    """Retorna logger para o módulo (o filter injeta service e correlation_id)."""
    return logging.getLogger(name)
