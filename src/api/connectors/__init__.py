"""Connectors: adapters de borda entre transporte HTTP e modelos internos.

Estrutura:
- flows/: envelope criptografado de WhatsApp Flows
"""

__all__: list[str] = []
