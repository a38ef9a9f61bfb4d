"""API: camada de borda do gateway.

Subpastas:
- connectors/: parsing do envelope de transporte
- routes/: endpoints HTTP (flows, health)

NÃO PODE conter: criptografia, orquestração de use cases, IO de relay.
"""
