"""Rotas do proxy genérico."""

from api.routes.proxy.router import router

__all__ = ["router"]
