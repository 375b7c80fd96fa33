"""Conector WhatsApp — borda do webhook da Meta Cloud API.

Responsabilidades:
- Handshake de verificação (hub.challenge)
- Parsing do corpo e checagem do envelope
"""

from .webhook import (
    InvalidJsonError,
    UnrecognizedPayloadError,
    WebhookChallengeError,
    parse_json_body,
    parse_webhook_request,
    verify_webhook_challenge,
)

__all__ = [
    "InvalidJsonError",
    "UnrecognizedPayloadError",
    "WebhookChallengeError",
    "parse_json_body",
    "parse_webhook_request",
    "verify_webhook_challenge",
]
