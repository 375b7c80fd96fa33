"""Serviços de aplicação.

Unidades de orquestração do roteamento. Implementações concretas de IO
ficam em app/infra/ e api/connectors/.

Importe os submódulos diretamente (app.domain depende de phone_matcher).
"""
