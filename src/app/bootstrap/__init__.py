"""Bootstrap da aplicação — inicialização e validação de settings.

Uso:
    from app.bootstrap import initialize_app, validate_runtime_settings

    initialize_app()
    validate_runtime_settings()

O wiring dos colaboradores fica em app.bootstrap.dependencies.
"""

from __future__ import annotations

import logging
import os

from app.observability import get_correlation_id
from config.logging import configure_logging
from config.settings import (
    get_base_settings,
    get_proxy_settings,
    get_registry_settings,
    get_sync_settings,
    get_whatsapp_settings,
)

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "json"
STRICT_VALIDATION_ENVS = {"staging", "production"}

logger = logging.getLogger(__name__)


def initialize_app() -> None:
    """Configura logging estruturado (LOG_LEVEL, LOG_FORMAT) com correlation_id.

    Deve ser chamada uma vez no início do serviço.
    """
    base = get_base_settings()
    configure_logging(
        level=os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
        service_name=base.service_name,
        correlation_id_getter=get_correlation_id,
        log_format=os.getenv("LOG_FORMAT", DEFAULT_LOG_FORMAT),
        environment=base.environment,
    )


def collect_settings_errors() -> list[str]:
    """Agrega erros de validação de todas as settings, prefixados pelo módulo."""
    base = get_base_settings()
    errors: list[str] = []
    errors.extend(f"base: {error}" for error in base.validate())
    errors.extend(f"proxy: {error}" for error in get_proxy_settings().validate())
    errors.extend(f"whatsapp: {error}" for error in get_whatsapp_settings().validate())
    errors.extend(f"registry: {error}" for error in get_registry_settings().validate(base))
    errors.extend(f"sync: {error}" for error in get_sync_settings().validate())
    return errors


def validate_runtime_settings() -> None:
    """Valida settings obrigatórias no startup.

    Em `staging`/`production` falha rápido para impedir boot inválido.
    Em `development` mantém alerta sem bloquear execução local.

    Raises:
        RuntimeError: configuração inválida em ambiente estrito.
    """
    environment = get_base_settings().environment
    strict_mode = environment in STRICT_VALIDATION_ENVS
    errors = collect_settings_errors()

    if not errors:
        logger.info(
            "settings_validated",
            extra={"component": "bootstrap", "result": "ok", "environment": environment},
        )
        return

    logger.warning(
        "settings_validation_failed",
        extra={
            "component": "bootstrap",
            "result": "failed",
            "environment": environment,
            "error_count": len(errors),
            "errors": errors,
        },
    )
    if strict_mode:
        details = "\n".join(f"- {error}" for error in errors)
        raise RuntimeError(f"Configuração inválida para {environment}:\n{details}")
