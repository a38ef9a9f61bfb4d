"""App: coração do gateway: orquestração, casos de uso e infraestrutura.

Subpastas:
- bootstrap/: composition root (carga da chave, wiring)
- coordinators/: fluxos end-to-end (decriptado → relay)
- use_cases/: pipeline de decriptação e codificação de resposta
- domain/: envelope, resultado e taxonomia de erros
- infra/: criptografia, HTTP e relay
- protocols/: contratos/interfaces
- observability/: correlation_id e métricas via logs

Padrão: app executa; api adapta; config configura.
"""
