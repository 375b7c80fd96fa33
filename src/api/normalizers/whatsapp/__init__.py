"""Normalizer WhatsApp — identidade de roteamento a partir do webhook.

Reconhece o envelope `whatsapp_business_account` e extrai remitente,
phone_number_id, display_phone_number e metadados da mensagem.
"""

from app.protocols.identity import NormalizedIdentity

from .extractor import (
    STATUS_MESSAGE_TYPE,
    WHATSAPP_OBJECT,
    is_recognized,
    parse_identity,
    routing_phone,
)

__all__ = [
    "STATUS_MESSAGE_TYPE",
    "WHATSAPP_OBJECT",
    "NormalizedIdentity",
    "is_recognized",
    "parse_identity",
    "routing_phone",
]
