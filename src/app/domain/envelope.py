"""Modelos do envelope criptografado e do resultado da decriptação.

Todos os objetos vivem apenas durante uma requisição.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


@dataclass(frozen=True, slots=True)
class EncryptedEnvelope:
    """Envelope híbrido já decodificado de base64.

    Attributes:
        initial_vector: IV usado pelo AES (nonce no GCM)
        encrypted_payload: ciphertext (+ tag de 16 bytes no GCM)
        wrapped_key: chave AES criptografada com RSA-OAEP
    """

    initial_vector: bytes
    encrypted_payload: bytes = field(repr=False)
    wrapped_key: bytes = field(repr=False)

    def missing_fields(self) -> list[str]:
        """Nomes dos campos ausentes ou vazios."""
        return [
            name
            for name, value in (
                ("initial_vector", self.initial_vector),
                ("encrypted_payload", self.encrypted_payload),
                ("wrapped_key", self.wrapped_key),
            )
            if not value
        ]


class FailureKind(StrEnum):
    """Categorias de falha do pipeline."""

    VALIDATION = "validation_error"
    KEY_UNWRAP = "key_unwrap_error"
    PAYLOAD_DECRYPT = "payload_decrypt_error"


@dataclass(frozen=True, slots=True)
class DecryptionSuccess:
    """Plaintext recuperado.

    `mode_used` (ex: "aes-128-gcm") serve apenas para observabilidade.
    """

    plaintext: bytes = field(repr=False)
    mode_used: str = ""

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class DecryptionFailure:
    """Falha classificada, sem resultado parcial."""

    kind: FailureKind
    message: str

    @property
    def ok(self) -> bool:
        return False


DecryptionOutcome = DecryptionSuccess | DecryptionFailure
