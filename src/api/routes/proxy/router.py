"""Proxy genérico: ANY /proxy/{path}.

Identidade da requisição:
1. corpo é um webhook WhatsApp reconhecido -> identidade normalizada
2. senão header X-Phone-Number, query `phone` ou campo `phoneNumber`

Cada falha vira um status distinto (400/404/403/502).
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request, Response, status
from fastapi.responses import JSONResponse

from api.connectors.whatsapp.webhook import parse_json_body
from api.normalizers.whatsapp import is_recognized, parse_identity
from api.routes.dependencies import get_dispatcher
from api.routes.proxy.responses import (
    build_forward_request,
    relay_streaming,
    routing_error_response,
)
from utils.errors import MalformedPayloadError, MissingIdentityError, RoutingError

logger = logging.getLogger(__name__)

router = APIRouter()

PROXY_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"]


@router.api_route("/{path:path}", methods=PROXY_METHODS, include_in_schema=False)
async def proxy_request(request: Request, path: str) -> Response:
    """Resolve a rota pelo telefone e encaminha a requisição ao destino."""
    dispatcher = get_dispatcher(request)
    raw_body = await request.body()

    try:
        body = parse_json_body(raw_body)
    except MalformedPayloadError:
        # Corpo não-JSON é repassado intacto; só não serve de fonte de identidade.
        body = None

    forward_request = build_forward_request(request, raw_body)

    try:
        if is_recognized(body):
            identity = parse_identity(body)
            forwarded = await dispatcher.dispatch_identity(forward_request, identity)
        else:
            phone = dispatcher.extract_request_phone(request.headers, request.query_params, body)
            forwarded = await dispatcher.dispatch_proxy(forward_request, phone)
    except MissingIdentityError as exc:
        logger.info("proxy_missing_identity", extra={"method": request.method, "path": path})
        return routing_error_response(exc, hint=dispatcher.missing_identity_hint())
    except RoutingError as exc:
        return routing_error_response(exc)
    except Exception:
        logger.exception("proxy_internal_error", extra={"method": request.method})
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "internal_error"},
        )

    return relay_streaming(forwarded)
