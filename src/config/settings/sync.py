"""Settings da sincronização periódica com a fonte remota de rotas."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class SyncSettings:
    """Configurações de sincronização.

    Attributes:
        enabled: Liga o job periódico
        source_url: Endpoint que devolve a lista de rotas (JSON)
        source_token: Bearer token opcional para a fonte
        interval_seconds: Intervalo entre passadas
        timeout_seconds: Timeout da chamada à fonte
    """

    enabled: bool = False
    source_url: str = ""
    source_token: str = ""
    interval_seconds: float = 300.0
    timeout_seconds: float = 15.0

    @property
    def is_configured(self) -> bool:
        return bool(self.source_url)

    def validate(self) -> list[str]:
        errors: list[str] = []

        if self.enabled and not self.source_url:
            errors.append("SYNC_ENABLED requer SYNC_SOURCE_URL")

        if self.interval_seconds <= 0:
            errors.append("SYNC_INTERVAL_SECONDS deve ser > 0")

        if self.timeout_seconds <= 0:
            errors.append("SYNC_TIMEOUT_SECONDS deve ser > 0")

        return errors


def _load_from_env() -> SyncSettings:
    return SyncSettings(
        enabled=os.getenv("SYNC_ENABLED", "").lower() in ("true", "1", "yes"),
        source_url=os.getenv("SYNC_SOURCE_URL", ""),
        source_token=os.getenv("SYNC_SOURCE_TOKEN", ""),
        interval_seconds=float(os.getenv("SYNC_INTERVAL_SECONDS", "300")),
        timeout_seconds=float(os.getenv("SYNC_TIMEOUT_SECONDS", "15")),
    )


@lru_cache(maxsize=1)
def get_sync_settings() -> SyncSettings:
    """Retorna instância cacheada de SyncSettings."""
    return _load_from_env()
