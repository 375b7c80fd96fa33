"""Modelos de domínio do roteador."""
