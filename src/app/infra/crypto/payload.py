"""Decriptação AES do payload de Flow (GCM com fallback CBC).

Layout esperado do payload:
- GCM: ciphertext + tag de 16 bytes concatenados
- CBC: payload inteiro é ciphertext com padding no último bloco

A variante (128/192/256) é escolhida apenas pelo tamanho da chave.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import partial
from typing import TYPE_CHECKING

from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from app.infra.crypto.constants import AES_VARIANT_BITS, TAG_SIZE
from app.infra.crypto.errors import PayloadDecryptError
from app.infra.crypto.padding import strip_padding_permissive
from config.logging import log_fallback

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ModeAttempt:
    """Modo AES e a função que tenta decriptar nele.

    Qualquer exceção levantada por `decrypt` conta como falha da
    tentativa e passa para o próximo modo.
    """

    mode: str
    decrypt: Callable[[bytes, bytes, bytes], bytes]


@dataclass(frozen=True, slots=True)
class SymmetricDecryption:
    """Plaintext e o modo que funcionou (ex: aes-256-gcm)."""

    plaintext: bytes = field(repr=False)
    mode_used: str


def decrypt_gcm(key: bytes, iv: bytes, payload: bytes) -> bytes:
    """Decripta AES-GCM usando os 16 bytes finais como tag.

    Raises:
        InvalidTag: Se a tag não confere.
        ValueError: Se payload/IV/chave tiverem tamanho inválido.
    """
    if len(payload) < TAG_SIZE:
        raise ValueError("payload shorter than GCM tag")
    # AESGCM espera ciphertext || tag, exatamente o layout recebido
    return AESGCM(key).decrypt(iv, payload, None)


def decrypt_cbc(
    key: bytes,
    iv: bytes,
    payload: bytes,
    *,
    strip_padding: Callable[[bytes], bytes] = strip_padding_permissive,
) -> bytes:
    """Decripta o payload inteiro em AES-CBC e remove o padding.

    Raises:
        ValueError: Se o payload não for múltiplo do bloco, se o IV não
            tiver 16 bytes ou se o padding for rejeitado.
    """
    decryptor = Cipher(algorithms.AES(key), modes.CBC(iv), backend=default_backend()).decryptor()
    raw = decryptor.update(payload) + decryptor.finalize()
    return strip_padding(raw)


def default_mode_attempts(
    strip_padding: Callable[[bytes], bytes] = strip_padding_permissive,
) -> tuple[ModeAttempt, ...]:
    """Ordem padrão: GCM autenticado, depois CBC legado."""
    return (
        ModeAttempt(mode="gcm", decrypt=decrypt_gcm),
        ModeAttempt(mode="cbc", decrypt=partial(decrypt_cbc, strip_padding=strip_padding)),
    )


class SymmetricPayloadDecryptor:
    """Recupera o plaintext tentando os modos AES em ordem.

    Primeiro sucesso vence; erros de tentativas anteriores não chegam ao
    chamador. Um CBC "bem-sucedido" sobre dados corrompidos devolve lixo:
    validar o formato do plaintext é responsabilidade de quem consome.
    """

    def __init__(
        self,
        attempts: Sequence[ModeAttempt] | None = None,
        *,
        strip_padding: Callable[[bytes], bytes] = strip_padding_permissive,
    ) -> None:
        self._attempts = (
            tuple(attempts) if attempts is not None else default_mode_attempts(strip_padding)
        )
        if not self._attempts:
            raise ValueError("attempts não pode ser vazio")

    @property
    def attempts(self) -> tuple[ModeAttempt, ...]:
        return self._attempts

    def decrypt(self, key: bytes, iv: bytes, payload: bytes) -> SymmetricDecryption:
        """Decripta payload com a chave AES recuperada.

        Args:
            key: Chave AES (16, 24 ou 32 bytes)
            iv: Vetor de inicialização
            payload: Payload criptografado

        Returns:
            SymmetricDecryption com plaintext e modo usado

        Raises:
            PayloadDecryptError: Se todas as tentativas falharem
        """
        bits = AES_VARIANT_BITS.get(len(key))
        if bits is None:
            raise PayloadDecryptError(f"Unsupported AES key size: {len(key)}")

        for position, attempt in enumerate(self._attempts):
            mode_name = f"aes-{bits}-{attempt.mode}"
            try:
                plaintext = attempt.decrypt(key, iv, payload)
            except Exception as exc:
                logger.debug(
                    "flow_payload_attempt_failed",
                    extra={
                        "component": "payload_decryptor",
                        "mode": mode_name,
                        "error_type": type(exc).__name__,
                    },
                )
                continue

            if position > 0:
                log_fallback(logger, "payload_decryptor", reason=f"{mode_name}_used")
            return SymmetricDecryption(plaintext=plaintext, mode_used=mode_name)

        raise PayloadDecryptError()
