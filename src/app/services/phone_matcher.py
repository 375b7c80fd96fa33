"""Normalização e comparação de telefones.

O match por sufixo é bidirecional para tolerar diferenças de código de país
entre plataformas (ex.: "5511999990000" x "11999990000"). É ambíguo por
natureza: um número curto configurado casa com vários candidatos longos.
A primeira regra na ordem do registry vence; não há desempate por tamanho.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from app.domain.route_config import RouteConfig

_NON_DIGITS = re.compile(r"[^0-9]")


def normalize_phone(raw: str | None) -> str:
    """Mantém só os dígitos ASCII 0-9. Idempotente; vazio -> vazio."""
    if not raw:
        return ""
    return _NON_DIGITS.sub("", raw)


def phones_match(candidate: str | None, configured: str | None) -> bool:
    """Igualdade ou sufixo em qualquer direção, sobre a forma canônica.

    Vazio nunca casa: string vazia é sufixo de qualquer número.
    """
    left = normalize_phone(candidate)
    right = normalize_phone(configured)
    if not left or not right:
        return False
    return left == right or left.endswith(right) or right.endswith(left)


def find_first_match(candidate: str | None, routes: Iterable[RouteConfig]) -> RouteConfig | None:
    """Primeira rota (ordem de iteração) cujo phone_number casa com o candidato."""
    for route in routes:
        if phones_match(candidate, route.phone_number):
            return route
    return None


def mask_phone(phone: str | None) -> str:
    """Mascara telefone para logs: mantém apenas os 4 últimos dígitos."""
    digits = normalize_phone(phone)
    if len(digits) <= 4:
        return "*" * len(digits)
    return f"{'*' * (len(digits) - 4)}{digits[-4:]}"
