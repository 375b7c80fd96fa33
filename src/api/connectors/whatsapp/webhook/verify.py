"""Handshake de verificação do webhook (GET com hub.*)."""

from __future__ import annotations

import hmac

SUBSCRIBE_MODE = "subscribe"


class WebhookChallengeError(ValueError):
    """Handshake recusado: modo ou token não conferem."""


def verify_webhook_challenge(
    hub_mode: str | None,
    hub_verify_token: str | None,
    hub_challenge: str | None,
    expected_token: str | None,
) -> str:
    """Confere modo e token; devolve o challenge a ser ecoado.

    Raises:
        WebhookChallengeError: token não configurado, modo diferente de
            "subscribe" ou token divergente.
    """
    if not expected_token:
        raise WebhookChallengeError("missing_verify_token")

    if hub_mode != SUBSCRIBE_MODE:
        raise WebhookChallengeError("invalid_mode")

    if not hmac.compare_digest((hub_verify_token or "").encode(), expected_token.encode()):
        raise WebhookChallengeError("token_mismatch")

    return hub_challenge or ""
