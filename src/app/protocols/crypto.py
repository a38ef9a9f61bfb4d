"""Protocolos para as operações criptográficas usadas pelo pipeline de Flows.

O pipeline depende destas abstrações; as implementações concretas vivem
em app/infra/crypto e são conectadas no bootstrap.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from app.infra.crypto.payload import SymmetricDecryption


class KeyUnwrapperProtocol(Protocol):
    """Recupera a chave simétrica de um blob criptografado com RSA."""

    def unwrap(self, wrapped_key: bytes, private_key: Any) -> bytes: ...


class PayloadDecryptorProtocol(Protocol):
    """Recupera o plaintext a partir de chave, IV e payload."""

    def decrypt(self, key: bytes, iv: bytes, payload: bytes) -> SymmetricDecryption: ...
