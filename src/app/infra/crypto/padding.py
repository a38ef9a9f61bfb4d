"""Remoção de padding do fallback AES-CBC.

Funções isoladas para permitir trocar a política sem tocar no decryptor.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from cryptography.hazmat.primitives import padding

from app.infra.crypto.constants import AES_BLOCK_SIZE

if TYPE_CHECKING:
    from collections.abc import Callable


def strip_padding_permissive(raw: bytes) -> bytes:
    """Remove `p` bytes finais, onde `p` é o último byte.

    Comportamento legado: não valida se os `p` bytes são iguais a `p`.
    Com `p` maior que o bloco o corte segue a semântica de slice
    (índice negativo conta a partir do fim).
    """
    if not raw:
        raise ValueError("empty plaintext")
    pad = raw[-1]
    return raw[: len(raw) - pad]


def strip_padding_strict(raw: bytes) -> bytes:
    """Remove padding PKCS#7 validando todos os bytes.

    Raises:
        ValueError: Se o padding for inválido.
    """
    unpadder = padding.PKCS7(AES_BLOCK_SIZE * 8).unpadder()
    return unpadder.update(raw) + unpadder.finalize()


def select_padding_stripper(*, strict: bool) -> Callable[[bytes], bytes]:
    """Retorna a função de remoção conforme a política configurada."""
    return strip_padding_strict if strict else strip_padding_permissive
