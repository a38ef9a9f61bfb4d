"""Taxonomia de erros do gateway.

Cada erro carrega `kind` (categoria estável, usada em logs e respostas)
e `http_status`. A mensagem é sempre uma categoria legível; detalhes
internos ficam em `__cause__` e nunca são devolvidos ao chamador.
"""

from __future__ import annotations


class GatewayError(Exception):
    """Base de todos os erros classificados do gateway."""

    kind: str = "gateway_error"
    http_status: int = 500
    default_message: str = "Gateway error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class ValidationError(GatewayError):
    """Envelope incompleto ou com campos inválidos (erro do cliente)."""

    kind = "validation_error"
    http_status = 400
    default_message = "Missing required fields"


class MalformedPlaintextError(GatewayError):
    """Plaintext decriptado não é JSON válido.

    Attributes:
        raw: Texto decriptado, mantido como contexto de diagnóstico.
    """

    kind = "malformed_plaintext"
    http_status = 500
    default_message = "Decrypted payload is not valid JSON"

    def __init__(self, raw: str, message: str | None = None) -> None:
        super().__init__(message)
        self.raw = raw


class RelayDeliveryError(GatewayError):
    """Falha ao entregar o JSON decriptado ao endpoint de relay."""

    kind = "relay_delivery_error"
    http_status = 502
    default_message = "Relay delivery failed"

    def __init__(self, message: str | None = None, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
