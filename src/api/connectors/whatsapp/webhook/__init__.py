"""Webhook WhatsApp: handshake de verificação e parsing do evento."""

from .receive import (
    InvalidJsonError,
    UnrecognizedPayloadError,
    parse_json_body,
    parse_webhook_request,
)
from .verify import WebhookChallengeError, verify_webhook_challenge

__all__ = [
    "InvalidJsonError",
    "UnrecognizedPayloadError",
    "WebhookChallengeError",
    "parse_json_body",
    "parse_webhook_request",
    "verify_webhook_challenge",
]
