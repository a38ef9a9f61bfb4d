"""Erros de criptografia para WhatsApp Flows.

Ambos são falhas de servidor e nunca devem ser re-tentados:
criptografia com os mesmos bytes falha da mesma forma.
"""

from __future__ import annotations

from app.domain.errors import GatewayError


class FlowCryptoError(GatewayError):
    """Erro em operação criptográfica de Flow."""

    kind = "flow_crypto_error"
    http_status = 500
    default_message = "Flow decryption failed"


class KeyUnwrapError(FlowCryptoError):
    """Chave AES não recuperada (todas as configurações OAEP falharam)."""

    kind = "key_unwrap_error"
    default_message = "Key unwrap failed"


class PayloadDecryptError(FlowCryptoError):
    """Payload não decriptado em nenhum modo AES."""

    kind = "payload_decrypt_error"
    default_message = "Payload decryption failed"
