"""Configuração de logging estruturado.

Uso:
    from config.logging import configure_logging, get_logger

    configure_logging(level="INFO", service_name="phone-proxy-router")
    logger = get_logger(__name__)
    logger.info("sync_completed", extra={"added": 3})

Campos obrigatórios em todo log:
- correlation_id
- service
- level
- logger
- message
- asctime
"""

from config.logging.config import (
    DEFAULT_SERVICE_NAME,
    VALID_LOG_FORMATS,
    VALID_LOG_LEVELS,
    configure_logging,
    get_logger,
)
from config.logging.filters import CorrelationIdFilter
from config.logging.formatters import (
    FIELD_RENAME_MAP,
    REQUIRED_LOG_FIELDS,
    create_json_formatter,
    create_text_formatter,
)

__all__ = [
    "DEFAULT_SERVICE_NAME",
    "FIELD_RENAME_MAP",
    "REQUIRED_LOG_FIELDS",
    "VALID_LOG_FORMATS",
    "VALID_LOG_LEVELS",
    "CorrelationIdFilter",
    "configure_logging",
    "create_json_formatter",
    "create_text_formatter",
    "get_logger",
]
