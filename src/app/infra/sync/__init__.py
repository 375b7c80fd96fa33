"""Fontes externas para sincronização de rotas."""

from app.infra.sync.remote_source import RemoteRouteSource, extract_candidates

__all__ = ["RemoteRouteSource", "extract_candidates"]
