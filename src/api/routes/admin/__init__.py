"""Rotas administrativas (CRUD de regras e sincronização forçada)."""

from api.routes.admin.router import router

__all__ = ["router"]
