"""Exceções de roteamento e de infraestrutura.

Erros de roteamento carregam `code` e `status_code` para que a borda HTTP
converta cada falha em resposta sem conhecer os detalhes do core.
"""

from __future__ import annotations


class RoutingError(Exception):
    """Base para falhas de resolução/encaminhamento de uma requisição."""

    code: str = "routing_error"
    status_code: int = 500

    def __init__(self, message: str | None = None, *, phone: str | None = None) -> None:
        super().__init__(message or self.code)
        self.phone = phone


class MissingIdentityError(RoutingError):
    """Nenhum telefone/identidade utilizável na requisição."""

    code = "missing_identity"
    status_code = 400


class RouteNotFoundError(RoutingError):
    """Nenhuma regra resolve a identidade informada."""

    code = "route_not_found"
    status_code = 404


class RouteInactiveError(RoutingError):
    """Regra resolvida, porém desativada."""

    code = "route_inactive"
    status_code = 403

    def __init__(
        self,
        message: str | None = None,
        *,
        phone: str | None = None,
        route_id: str | None = None,
    ) -> None:
        super().__init__(message, phone=phone)
        self.route_id = route_id


class UpstreamUnavailableError(RoutingError):
    """Falha de conexão/transporte ao encaminhar para o destino."""

    code = "upstream_unavailable"
    status_code = 502


class MalformedPayloadError(RoutingError):
    """Corpo do webhook não corresponde ao envelope esperado."""

    code = "malformed_payload"
    status_code = 400


class InfrastructureError(RuntimeError):
    """Base para falhas de infraestrutura transitórias."""


class RedisConnectionError(InfrastructureError):
    """Falha de conexão/timeout ao acessar Redis."""


class RegistryPersistenceError(InfrastructureError):
    """Falha ao gravar o snapshot de rotas no armazenamento."""


class SyncSourceError(InfrastructureError):
    """Fonte remota de rotas indisponível ou com resposta inválida."""
