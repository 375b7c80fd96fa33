"""Parse do corpo do webhook e checagem do envelope (sem PII)."""

from __future__ import annotations

import json
from typing import Any

from api.normalizers.whatsapp import is_recognized
from utils.errors import MalformedPayloadError


class InvalidJsonError(MalformedPayloadError):
    """Corpo não é JSON válido."""


class UnrecognizedPayloadError(MalformedPayloadError):
    """JSON válido, mas fora do envelope whatsapp_business_account."""


def parse_json_body(raw_body: bytes) -> Any:
    """Decodifica o corpo; vazio -> None.

    Raises:
        InvalidJsonError: corpo não vazio e não decodificável
    """
    if not raw_body or not raw_body.strip():
        return None
    try:
        return json.loads(raw_body)
    except (ValueError, RecursionError) as exc:
        # Aninhamento excessivo estoura a recursão do decoder.
        raise InvalidJsonError("invalid_json") from exc


def parse_webhook_request(raw_body: bytes) -> dict[str, Any]:
    """Decodifica e valida o envelope do evento.

    Raises:
        InvalidJsonError: JSON inválido
        UnrecognizedPayloadError: envelope não reconhecido

    Returns:
        Payload reconhecido (dict).
    """
    payload = parse_json_body(raw_body)
    if not is_recognized(payload):
        raise UnrecognizedPayloadError("unrecognized_payload")
    return payload
