"""Settings do proxy genérico e do encaminhamento HTTP."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class ProxySettings:
    """Configurações de extração de identidade e encaminhamento.

    Attributes:
        route_prefix: Prefixo de roteamento removido do path encaminhado
        phone_header: Header com o telefone (1ª fonte)
        phone_query_param: Query param com o telefone (2ª fonte)
        phone_body_field: Campo do corpo JSON com o telefone (3ª fonte)
        forwarded_phone_header: Header injetado no destino com a identidade
        request_timeout_seconds: Timeout total do encaminhamento
        connect_timeout_seconds: Timeout de conexão com o destino
    """

    route_prefix: str = "/proxy"
    phone_header: str = "x-phone-number"
    phone_query_param: str = "phone"
    phone_body_field: str = "phoneNumber"
    forwarded_phone_header: str = "X-Forwarded-Phone"
    request_timeout_seconds: float = 30.0
    connect_timeout_seconds: float = 10.0

    def validate(self) -> list[str]:
        errors: list[str] = []

        if not self.route_prefix.startswith("/") or self.route_prefix == "/":
            errors.append("PROXY_ROUTE_PREFIX deve começar com '/' e não ser a raiz")

        if self.request_timeout_seconds <= 0:
            errors.append("PROXY_REQUEST_TIMEOUT_SECONDS deve ser > 0")

        if self.connect_timeout_seconds <= 0:
            errors.append("PROXY_CONNECT_TIMEOUT_SECONDS deve ser > 0")

        if not self.forwarded_phone_header:
            errors.append("PROXY_FORWARDED_PHONE_HEADER não pode ser vazio")

        return errors


def _load_from_env() -> ProxySettings:
    return ProxySettings(
        route_prefix=os.getenv("PROXY_ROUTE_PREFIX", "/proxy").rstrip("/") or "/",
        phone_header=os.getenv("PROXY_PHONE_HEADER", "x-phone-number").lower(),
        phone_query_param=os.getenv("PROXY_PHONE_QUERY_PARAM", "phone"),
        phone_body_field=os.getenv("PROXY_PHONE_BODY_FIELD", "phoneNumber"),
        forwarded_phone_header=os.getenv("PROXY_FORWARDED_PHONE_HEADER", "X-Forwarded-Phone"),
        request_timeout_seconds=float(os.getenv("PROXY_REQUEST_TIMEOUT_SECONDS", "30")),
        connect_timeout_seconds=float(os.getenv("PROXY_CONNECT_TIMEOUT_SECONDS", "10")),
    )


@lru_cache(maxsize=1)
def get_proxy_settings() -> ProxySettings:
    """Retorna instância cacheada de ProxySettings."""
    return _load_from_env()
