"""Endpoints de webhook do WhatsApp.

Endpoints:
- GET  {webhook_path}: verificação (Meta challenge)
- POST {webhook_path}: eventos, encaminhados à rota resolvida

Política de resposta do POST:
- corpo inválido ou envelope não reconhecido: 400
- destino respondeu 2xx: resposta repassada
- qualquer outra falha: 200 com nota de diagnóstico (a Meta reenvia
  eventos que recebem não-2xx)
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Request, Response, status
from fastapi.responses import JSONResponse

from api.connectors.whatsapp.webhook import (
    WebhookChallengeError,
    parse_webhook_request,
    verify_webhook_challenge,
)
from api.normalizers.whatsapp import parse_identity
from api.routes.dependencies import get_dispatcher
from api.routes.proxy.responses import build_forward_request, relay_buffered
from app.services.phone_matcher import mask_phone
from config.settings import get_whatsapp_settings
from utils.errors import MalformedPayloadError, RoutingError, UpstreamUnavailableError

logger = logging.getLogger(__name__)

router = APIRouter()

ACK_IGNORED = "ignored"
ACK_UPSTREAM_ERROR = "upstream_error"


def _ack(ack_status: str, reason: str, **extra: Any) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={"status": ack_status, "reason": reason, **extra},
    )


@router.get("")
async def verify_webhook(request: Request) -> Response:
    """Handshake: ecoa hub.challenge quando modo e token conferem."""
    settings = get_whatsapp_settings()
    hub_mode = request.query_params.get("hub.mode")

    try:
        challenge = verify_webhook_challenge(
            hub_mode=hub_mode,
            hub_verify_token=request.query_params.get("hub.verify_token"),
            hub_challenge=request.query_params.get("hub.challenge"),
            expected_token=settings.verify_token,
        )
    except WebhookChallengeError as exc:
        logger.warning(
            "webhook_verification_failed",
            extra={"channel": "whatsapp", "error": str(exc)},
        )
        return Response(
            content="Forbidden",
            media_type="text/plain",
            status_code=status.HTTP_403_FORBIDDEN,
        )

    logger.info("webhook_verified", extra={"channel": "whatsapp", "hub_mode": hub_mode})
    return Response(content=challenge, media_type="text/plain", status_code=status.HTTP_200_OK)


@router.post("")
async def receive_webhook(request: Request) -> Response:
    """Recebe um evento e o encaminha ao backend responsável pelo número."""
    raw_body = await request.body()

    try:
        payload = parse_webhook_request(raw_body)
    except MalformedPayloadError as exc:
        logger.warning(
            "webhook_payload_rejected",
            extra={"channel": "whatsapp", "error": str(exc), "payload_size": len(raw_body)},
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.code, "detail": str(exc)},
        )

    identity = parse_identity(payload)
    logger.info(
        "webhook_received",
        extra={
            "channel": "whatsapp",
            "field": identity.field,
            "message_type": identity.message_type,
            "phone_number_id": identity.phone_number_id,
            "sender": mask_phone(identity.sender_phone),
            "payload_size": len(raw_body),
        },
    )

    dispatcher = get_dispatcher(request)
    try:
        forwarded = await dispatcher.dispatch_webhook(
            build_forward_request(request, raw_body), identity
        )
        content = await forwarded.read()
    except UpstreamUnavailableError as exc:
        return _ack(ACK_UPSTREAM_ERROR, exc.code)
    except RoutingError as exc:
        logger.info("webhook_ignored", extra={"channel": "whatsapp", "reason": exc.code})
        return _ack(ACK_IGNORED, exc.code)
    except Exception as exc:
        logger.exception(
            "webhook_forward_failed",
            extra={"channel": "whatsapp", "error_type": type(exc).__name__},
        )
        return _ack(ACK_UPSTREAM_ERROR, "internal_error")

    if 200 <= forwarded.status_code < 300:
        return relay_buffered(forwarded, content)

    logger.warning(
        "webhook_upstream_status",
        extra={"channel": "whatsapp", "status_code": forwarded.status_code},
    )
    return _ack(ACK_UPSTREAM_ERROR, "upstream_status", upstreamStatus=forwarded.status_code)
