"""Filter de contexto dos logs.

Campos fixos do processo (service, environment) e o correlation_id da
requisição corrente entram em todo record, sem depender do chamador.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable


def _no_correlation_id() -> str:
    return ""


class CorrelationIdFilter(logging.Filter):
    """Enriquece o record; nunca descarta.

    correlation_id explícito em `extra` (ex.: job de sincronização) tem
    precedência sobre o do contexto.
    """

    def __init__(
        self,
        service_name: str,
        correlation_id_getter: Callable[[], str] | None = None,
        *,
        environment: str | None = None,
    ) -> None:
        super().__init__()
        self._static = {"service": service_name}
        if environment:
            self._static["environment"] = environment
        self._current_correlation_id = correlation_id_getter or _no_correlation_id

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "correlation_id", None):
            record.correlation_id = self._current_correlation_id()
        for key, value in self._static.items():
            setattr(record, key, value)
        return True
