"""Resolução de rota: business-ID -> telefone (sender) -> default.

Cadeia de precedência (primeiro sucesso vence):
1. phone_number_id conhecido: regra routeBy=business com igualdade exata
2. telefones conhecidos (na ordem recebida): regra routeBy=sender via match por sufixo
3. primeira regra routeBy=default ativa
4. nenhuma: None

O flag `active` só é considerado no passo 3; nos demais a regra inativa
é devolvida para que o dispatcher a rejeite explicitamente.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from app.domain.route_config import RouteStrategy
from app.services.phone_matcher import find_first_match, mask_phone

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from app.domain.route_config import RouteConfig
    from app.protocols.route_registry import RouteRegistryProtocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RouteResolution:
    """Rota escolhida, estratégia que a encontrou e valor que casou."""

    route: RouteConfig
    strategy: RouteStrategy
    matched_value: str | None = None


def _by_business_id(routes: Sequence[RouteConfig], phone_number_id: str) -> RouteConfig | None:
    for route in routes:
        if route.route_by == RouteStrategy.BUSINESS and route.phone_number_id == phone_number_id:
            return route
    return None


def _first_active_default(routes: Sequence[RouteConfig]) -> RouteConfig | None:
    for route in routes:
        if route.route_by == RouteStrategy.DEFAULT and route.active:
            return route
    return None


class RouteResolver:
    """Escolhe exatamente uma RouteConfig para a requisição, ou nenhuma."""

    def __init__(self, registry: RouteRegistryProtocol) -> None:
        self._registry = registry

    @property
    def registry(self) -> RouteRegistryProtocol:
        return self._registry

    async def resolve(
        self,
        *,
        phone_number_id: str | None = None,
        phones: Iterable[str | None] = (),
    ) -> RouteResolution | None:
        # Um único snapshot por resolução; a leitura do registry roda fora do event loop.
        routes = tuple(await asyncio.to_thread(self._registry.list_all))
        candidates = tuple(phones)

        if phone_number_id:
            route = _by_business_id(routes, phone_number_id)
            if route is not None:
                return RouteResolution(route, RouteStrategy.BUSINESS, phone_number_id)

        sender_routes = [route for route in routes if route.route_by == RouteStrategy.SENDER]
        for phone in candidates:
            if not phone:
                continue
            route = find_first_match(phone, sender_routes)
            if route is not None:
                return RouteResolution(route, RouteStrategy.SENDER, phone)

        route = _first_active_default(routes)
        if route is not None:
            return RouteResolution(route, RouteStrategy.DEFAULT)

        logger.debug(
            "route_unresolved",
            extra={
                "has_phone_number_id": bool(phone_number_id),
                "phones": [mask_phone(phone) for phone in candidates if phone],
            },
        )
        return None
