"""Agregador de settings do roteador.

Re-exporta as settings de cada módulo. Organização por domínio para
isolamento de mudanças.
"""

from __future__ import annotations

# Base settings
from config.settings.base import (
    DEFAULT_PORT,
    DEFAULT_SERVICE_NAME,
    BaseSettings,
    Environment,
    get_base_settings,
)

# Proxy / encaminhamento
from config.settings.proxy import ProxySettings, get_proxy_settings

# Registry de rotas
from config.settings.registry import RegistryBackend, RegistrySettings, get_registry_settings

# Sincronização
from config.settings.sync import SyncSettings, get_sync_settings

# Webhook WhatsApp
from config.settings.whatsapp import WhatsAppSettings, get_whatsapp_settings

__all__ = [
    "DEFAULT_PORT",
    "DEFAULT_SERVICE_NAME",
    "BaseSettings",
    "Environment",
    "ProxySettings",
    "RegistryBackend",
    "RegistrySettings",
    "SyncSettings",
    "WhatsAppSettings",
    "get_base_settings",
    "get_proxy_settings",
    "get_registry_settings",
    "get_sync_settings",
    "get_whatsapp_settings",
]
