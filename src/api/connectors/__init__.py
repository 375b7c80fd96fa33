"""Connectors — adapters de borda para sistemas externos.

Estrutura:
- proxy/: encaminhamento HTTP para o destino resolvido
- whatsapp/: webhook da Meta Cloud API (verificação e recebimento)
"""

__all__: list[str] = []
