"""API — camada de borda HTTP.

Responsabilidades:
- Receber webhooks e requisições genéricas de proxy
- Normalizar payloads de webhook em identidade de roteamento
- Encaminhar para o destino resolvido (connectors/proxy)
- Expor administração de rotas e health

Subpastas:
- connectors/: IO de borda (encaminhamento HTTP, webhook WhatsApp)
- normalizers/: payloads externos -> NormalizedIdentity
- routes/: endpoints HTTP (proxy, webhook, admin, health)

NÃO PODE conter: regras de resolução de rota nem acesso direto ao registry.
"""
