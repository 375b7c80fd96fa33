"""Correlation_id por requisição.

Chega no header X-Correlation-ID ou é gerado; vai para todos os logs
da requisição e volta no header da resposta. ContextVar mantém o valor
isolado por task asyncio.
"""

from __future__ import annotations

import re
import uuid
from contextvars import ContextVar, Token

CORRELATION_HEADER = "x-correlation-id"

# Valor do cliente é ecoado em header e logs: só tokens curtos e imprimíveis.
_ACCEPTED_ID = re.compile(r"[A-Za-z0-9._:\-]{1,128}")

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def get_correlation_id() -> str:
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None = None) -> Token[str]:
    """Define o correlation_id do contexto atual.

    Valor ausente ou fora do formato aceito é substituído por um novo ID.

    Returns:
        Token para reset_correlation_id().
    """
    value = (correlation_id or "").strip()
    if not _ACCEPTED_ID.fullmatch(value):
        value = generate_correlation_id()
    return _correlation_id.set(value)


def reset_correlation_id(token: Token[str]) -> None:
    _correlation_id.reset(token)


def generate_correlation_id() -> str:
    return uuid.uuid4().hex
