"""Agregador de rotas — registra todos os routers.

Uso:
    from api.routes import create_api_router

    app = FastAPI()
    app.include_router(create_api_router())
"""

from __future__ import annotations

from fastapi import APIRouter

from api.routes.admin.router import router as admin_router
from api.routes.health.router import router as health_router
from api.routes.proxy.router import router as proxy_router
from api.routes.whatsapp.webhook import router as webhook_router
from config.settings import get_proxy_settings, get_whatsapp_settings


def create_api_router() -> APIRouter:
    """Cria router principal com todos os sub-routers registrados.

    Prefixos do proxy e do webhook vêm das settings.
    """
    api_router = APIRouter()

    # Health checks na raiz (/health, /ready)
    api_router.include_router(health_router, tags=["health"])

    # Administração de rotas
    api_router.include_router(admin_router, prefix="/api/config", tags=["admin"])

    # WhatsApp (GET challenge, POST eventos)
    api_router.include_router(
        webhook_router,
        prefix=get_whatsapp_settings().webhook_path,
        tags=["whatsapp"],
    )

    # Proxy genérico
    api_router.include_router(
        proxy_router,
        prefix=get_proxy_settings().route_prefix,
        tags=["proxy"],
    )

    return api_router
