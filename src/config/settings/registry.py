"""Settings do registry de rotas."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from config.settings.base.core import BaseSettings

RegistryBackend = Literal["memory", "file", "redis"]

_VALID_BACKENDS = ("memory", "file", "redis")


@dataclass(frozen=True)
class RegistrySettings:
    """Configurações de armazenamento das rotas.

    Attributes:
        backend: memory|file|redis
        file_path: Arquivo JSON (backend=file)
        redis_key: Chave do snapshot (backend=redis)
    """

    backend: RegistryBackend = "file"
    file_path: str = "data/config.json"
    redis_key: str = "proxy_router:routes"

    def validate(self, base: BaseSettings) -> list[str]:
        """Valida configurações do registry.

        Args:
            base: BaseSettings para verificar ambiente e REDIS_URL.
        """
        errors: list[str] = []

        if self.backend not in _VALID_BACKENDS:
            errors.append(f"REGISTRY_BACKEND inválido: {self.backend}")

        if self.backend == "memory" and not base.is_development:
            errors.append("REGISTRY_BACKEND=memory proibido em staging/production")

        if self.backend == "file" and not self.file_path:
            errors.append("REGISTRY_BACKEND=file requer REGISTRY_FILE_PATH")

        if self.backend == "redis" and not base.redis_url:
            errors.append("REGISTRY_BACKEND=redis requer REDIS_URL configurado")

        return errors


def _load_from_env() -> RegistrySettings:
    backend_str = os.getenv("REGISTRY_BACKEND", "file").lower()
    backend: RegistryBackend = backend_str if backend_str in _VALID_BACKENDS else "file"  # type: ignore[assignment]
    return RegistrySettings(
        backend=backend,
        file_path=os.getenv("REGISTRY_FILE_PATH", "data/config.json"),
        redis_key=os.getenv("REGISTRY_REDIS_KEY", "proxy_router:routes"),
    )


@lru_cache(maxsize=1)
def get_registry_settings() -> RegistrySettings:
    """Retorna instância cacheada de RegistrySettings."""
    return _load_from_env()
