"""Settings do webhook WhatsApp (Meta Cloud API)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class WhatsAppSettings:
    """Configurações do endpoint de webhook.

    Attributes:
        verify_token: Token compartilhado do handshake hub.verify_token
        webhook_path: Caminho do endpoint (GET verificação, POST eventos)
    """

    verify_token: str = ""
    webhook_path: str = "/webhook/whatsapp"

    def validate(self) -> list[str]:
        errors: list[str] = []

        if not self.verify_token:
            errors.append("WHATSAPP_VERIFY_TOKEN não configurado")

        if not self.webhook_path.startswith("/"):
            errors.append("WHATSAPP_WEBHOOK_PATH deve começar com '/'")

        return errors


def _load_from_env() -> WhatsAppSettings:
    return WhatsAppSettings(
        verify_token=os.getenv("WHATSAPP_VERIFY_TOKEN", ""),
        webhook_path=os.getenv("WHATSAPP_WEBHOOK_PATH", "/webhook/whatsapp").rstrip("/")
        or "/webhook/whatsapp",
    )


@lru_cache(maxsize=1)
def get_whatsapp_settings() -> WhatsAppSettings:
    """Retorna instância cacheada de WhatsAppSettings."""
    return _load_from_env()
