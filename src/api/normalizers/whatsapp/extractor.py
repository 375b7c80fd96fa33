"""Extrator de identidade de payloads WhatsApp Business API.

Responsabilidades:
- Detectar o envelope de webhook da Meta (object + lista entry)
- Achatar entry[0].changes[0].value em NormalizedIdentity

Não faz validação de negócio - apenas extração estrutural tolerante a
campos ausentes.
"""

from __future__ import annotations

from typing import Any

from app.protocols.identity import NormalizedIdentity

from ._extraction_helpers import (
    extract_contact_name,
    extract_sender_phone,
    first_change_value,
    first_item,
    text_field,
)

WHATSAPP_OBJECT = "whatsapp_business_account"
STATUS_MESSAGE_TYPE = "status"


def is_recognized(payload: Any) -> bool:
    """True se o payload é um evento WhatsApp Business com lista `entry`."""
    return (
        isinstance(payload, dict)
        and payload.get("object") == WHATSAPP_OBJECT
        and isinstance(payload.get("entry"), list)
    )


def parse_identity(payload: Any) -> NormalizedIdentity | None:
    """Extrai a identidade do primeiro change do primeiro entry.

    Returns:
        NormalizedIdentity, ou None se o envelope não for reconhecido.
    """
    if not is_recognized(payload):
        return None

    entry, change, value = first_change_value(payload)
    metadata = value.get("metadata") if value is not None else None
    metadata = metadata if isinstance(metadata, dict) else None
    message = first_item(value, "messages")

    return NormalizedIdentity(
        business_account_id=text_field(entry, "id"),
        phone_number_id=text_field(metadata, "phone_number_id"),
        display_phone_number=text_field(metadata, "display_phone_number"),
        sender_phone=extract_sender_phone(value),
        message_type=text_field(message, "type") or STATUS_MESSAGE_TYPE,
        message_id=text_field(message, "id"),
        timestamp=text_field(message, "timestamp"),
        contact_name=extract_contact_name(value),
        field=text_field(change, "field"),
    )


def routing_phone(payload: dict[str, Any], *, use_business_phone: bool = False) -> str | None:
    """Telefone usado para roteamento: do negócio (display) ou do remitente."""
    identity = parse_identity(payload)
    if identity is None:
        return None
    if use_business_phone:
        return identity.display_phone_number
    return identity.sender_phone
