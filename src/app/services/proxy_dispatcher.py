"""Despacho de requisições para a rota resolvida.

Orquestra identidade -> resolução -> verificação de ativo -> encaminhamento.
Não conhece HTTP de entrada: recebe ForwardRequest já montado pela borda
e traduz falhas em exceções de `utils.errors`, que a borda converte em
respostas (proxy genérico) ou em ack 200 (webhook).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from app.observability import record_route_resolution
from app.services.phone_matcher import mask_phone, normalize_phone
from config.settings import ProxySettings, get_proxy_settings, get_whatsapp_settings
from utils.errors import MissingIdentityError, RouteInactiveError, RouteNotFoundError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from app.protocols.forwarder import ForwarderProtocol, ForwardRequest, ForwardResponse
    from app.protocols.identity import NormalizedIdentity
    from app.services.route_resolver import RouteResolution, RouteResolver

logger = logging.getLogger(__name__)

CHANNEL_PROXY = "proxy"
CHANNEL_WEBHOOK = "webhook"


def _first_text(value: Any) -> str | None:
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if value is None:
        return None
    text = str(value).strip()
    return text or None


class ProxyDispatcher:
    """Resolve a rota de uma requisição e a encaminha ao destino."""

    def __init__(
        self,
        resolver: RouteResolver,
        forwarder: ForwarderProtocol,
        settings: ProxySettings | None = None,
        *,
        webhook_prefix: str | None = None,
    ) -> None:
        self._resolver = resolver
        self._forwarder = forwarder
        self._settings = settings or get_proxy_settings()
        self._webhook_prefix = (
            webhook_prefix if webhook_prefix is not None else get_whatsapp_settings().webhook_path
        )

    @property
    def settings(self) -> ProxySettings:
        return self._settings

    def missing_identity_hint(self) -> str:
        s = self._settings
        return (
            f"Envie o telefone no header {s.phone_header}, "
            f"no query param '{s.phone_query_param}' "
            f"ou no campo '{s.phone_body_field}' do corpo JSON"
        )

    def extract_request_phone(
        self,
        headers: Mapping[str, str],
        query: Mapping[str, Any],
        body: Any = None,
    ) -> str | None:
        """Telefone da requisição genérica: header, query, corpo (primeiro não vazio)."""
        header_value = None
        wanted = self._settings.phone_header.lower()
        for key, value in headers.items():
            if key.lower() == wanted:
                header_value = value
                break

        for candidate in (header_value, query.get(self._settings.phone_query_param)):
            phone = _first_text(candidate)
            if phone:
                return phone

        if isinstance(body, dict):
            return _first_text(body.get(self._settings.phone_body_field))
        return None

    async def dispatch_proxy(self, request: ForwardRequest, phone: str | None) -> ForwardResponse:
        """Encaminha uma requisição genérica identificada por telefone.

        Raises:
            MissingIdentityError: telefone ausente ou sem dígitos
            RouteNotFoundError: nenhuma regra casa
            RouteInactiveError: regra resolvida está desativada
            UpstreamUnavailableError: falha de transporte no encaminhamento
        """
        if not phone or not normalize_phone(phone):
            raise MissingIdentityError("telefone ou identidade ausente na requisição")

        resolution = await self._resolve(CHANNEL_PROXY, phone_number_id=None, phones=(phone,))
        return await self._forward(resolution, request, phone=phone, prefix=self._settings.route_prefix)

    async def dispatch_identity(
        self,
        request: ForwardRequest,
        identity: NormalizedIdentity,
        *,
        channel: str = CHANNEL_PROXY,
    ) -> ForwardResponse:
        """Encaminha usando a identidade extraída de um envelope de webhook.

        Usado pelo proxy genérico quando o corpo é um webhook reconhecido;
        os códigos de erro são os mesmos do proxy.
        """
        phones = tuple(phone for phone in identity.routing_phones if normalize_phone(phone))
        if not identity.phone_number_id and not phones:
            raise MissingIdentityError("telefone ou identidade ausente na requisição")

        resolution = await self._resolve(
            channel, phone_number_id=identity.phone_number_id, phones=phones
        )
        forwarded_phone = phones[0] if phones else None
        prefix = self._webhook_prefix if channel == CHANNEL_WEBHOOK else self._settings.route_prefix
        return await self._forward(resolution, request, phone=forwarded_phone, prefix=prefix)

    async def dispatch_webhook(
        self,
        request: ForwardRequest,
        identity: NormalizedIdentity,
    ) -> ForwardResponse:
        """Encaminha um evento de webhook reconhecido para a rota resolvida."""
        return await self.dispatch_identity(request, identity, channel=CHANNEL_WEBHOOK)

    async def _resolve(
        self,
        channel: str,
        *,
        phone_number_id: str | None,
        phones: tuple[str, ...],
    ) -> RouteResolution:
        resolution = await self._resolver.resolve(phone_number_id=phone_number_id, phones=phones)
        display_phone = phones[0] if phones else None

        if resolution is None:
            record_route_resolution(channel, None)
            logger.info(
                "route_not_found",
                extra={
                    "channel": channel,
                    "phone": mask_phone(display_phone),
                    "has_phone_number_id": bool(phone_number_id),
                },
            )
            raise RouteNotFoundError(
                "nenhuma rota configurada para esta identidade",
                phone=display_phone or phone_number_id,
            )

        route = resolution.route
        record_route_resolution(channel, resolution.strategy.value, route.id)
        if not route.active:
            logger.info(
                "route_inactive",
                extra={"channel": channel, "route_id": route.id, "phone": mask_phone(display_phone)},
            )
            raise RouteInactiveError(
                "a rota para esta identidade está desativada",
                phone=display_phone or phone_number_id,
                route_id=route.id,
            )
        return resolution

    async def _forward(
        self,
        resolution: RouteResolution,
        request: ForwardRequest,
        *,
        phone: str | None,
        prefix: str,
    ) -> ForwardResponse:
        extra_headers = {self._settings.forwarded_phone_header: phone} if phone else {}
        logger.info(
            "route_resolved",
            extra={
                "route_id": resolution.route.id,
                "strategy": resolution.strategy.value,
                "phone": mask_phone(phone),
                "method": request.method,
            },
        )
        return await self._forwarder.forward(
            request,
            target_url=resolution.route.target_url,
            strip_prefix=prefix,
            extra_headers=extra_headers,
        )
