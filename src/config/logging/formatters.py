"""Formatters de logging.

JSON (padrão) com campos obrigatórios:
- asctime, level, logger, message, correlation_id, service

Texto simples (LOG_FORMAT=text) para desenvolvimento local.
Telefones nunca são logados em claro (ver mask_phone).
"""

from __future__ import annotations

import logging

from pythonjsonlogger.json import JsonFormatter

# Ordem estável dos campos obrigatórios no output JSON
REQUIRED_LOG_FIELDS = (
    "asctime",
    "levelname",
    "name",
    "message",
    "correlation_id",
    "service",
)

FIELD_RENAME_MAP = {
    "levelname": "level",
    "name": "logger",
}

TEXT_FORMAT = "%(asctime)s %(levelname)-8s [%(correlation_id)s] %(name)s: %(message)s"


def create_json_formatter() -> JsonFormatter:
    """Cria formatter JSON com campos padronizados.

    Exemplo de output:
        {
            "asctime": "2026-02-02 10:30:00,123",
            "level": "INFO",
            "logger": "api.connectors.proxy.forwarder",
            "message": "proxy_forwarded",
            "correlation_id": "4f1c...",
            "service": "phone-proxy-router",
            "status_code": 200
        }
    """
    format_string = " ".join(f"%({field})s" for field in REQUIRED_LOG_FIELDS)
    return JsonFormatter(format_string, rename_fields=FIELD_RENAME_MAP)


def create_text_formatter() -> logging.Formatter:
    """Formatter legível para terminal (sem campos extras)."""
    return logging.Formatter(TEXT_FORMAT)
