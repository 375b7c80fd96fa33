"""Normalizers por canal — conversão de payloads externos para modelos internos.

Estrutura:
- whatsapp/: identidade de roteamento do webhook WhatsApp Business API
"""

from .whatsapp import NormalizedIdentity, is_recognized, parse_identity

__all__ = [
    "NormalizedIdentity",
    "is_recognized",
    "parse_identity",
]
