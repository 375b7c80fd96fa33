"""Configuração do pytest para o roteador de proxy por telefone."""

import sys
from pathlib import Path

import pytest

# Adiciona src/ ao PYTHONPATH para permitir imports absolutos
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from config.settings import (  # noqa: E402
    get_base_settings,
    get_proxy_settings,
    get_registry_settings,
    get_sync_settings,
    get_whatsapp_settings,
)

_CACHED_SETTINGS = (
    get_base_settings,
    get_proxy_settings,
    get_registry_settings,
    get_sync_settings,
    get_whatsapp_settings,
)


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Settings são relidas do ambiente a cada teste (monkeypatch.setenv)."""
    for getter in _CACHED_SETTINGS:
        getter.cache_clear()
    yield
    for getter in _CACHED_SETTINGS:
        getter.cache_clear()
