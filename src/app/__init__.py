"""App — núcleo do roteador: resolução, despacho, sincronização e infraestrutura.

Subpastas:
- bootstrap/: composition root (factories, inicialização, wiring)
- domain/: modelos de rota
- services/: matcher, resolver, dispatcher e sincronização
- infra/: implementações concretas de IO (registries, fonte remota)
- protocols/: contratos/interfaces
- observability/: correlation_id e métricas em logs

Padrão: app executa; api adapta; config parametriza; utils apoia.
"""
