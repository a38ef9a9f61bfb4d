"""Testes da decriptação AES do payload (GCM com fallback CBC)."""

from __future__ import annotations

import os

import pytest
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from app.infra.crypto import (
    ModeAttempt,
    PayloadDecryptError,
    SymmetricPayloadDecryptor,
    decrypt_gcm,
    strip_padding_strict,
)
from tests.fakes.fake_flow_envelope import encrypt_cbc, encrypt_gcm

PLAINTEXT = b'{"action":"data_exchange","data":{"nome":"Ana"}}'


class TestGcm:
    """Caminho principal: ciphertext || tag de 16 bytes."""

    @pytest.mark.parametrize(
        ("key_size", "expected_mode"),
        [(16, "aes-128-gcm"), (24, "aes-192-gcm"), (32, "aes-256-gcm")],
    )
    def test_decrypts_each_key_size(self, key_size: int, expected_mode: str) -> None:
        key = os.urandom(key_size)
        iv = os.urandom(16)
        payload = encrypt_gcm(key, iv, PLAINTEXT)

        result = SymmetricPayloadDecryptor().decrypt(key, iv, payload)

        assert result.plaintext == PLAINTEXT
        assert result.mode_used == expected_mode

    def test_accepts_12_byte_nonce(self) -> None:
        key = os.urandom(16)
        iv = os.urandom(12)

        result = SymmetricPayloadDecryptor().decrypt(key, iv, encrypt_gcm(key, iv, PLAINTEXT))

        assert result.plaintext == PLAINTEXT

    def test_tag_only_payload_yields_empty_plaintext(self) -> None:
        key = os.urandom(16)
        iv = os.urandom(16)

        assert decrypt_gcm(key, iv, encrypt_gcm(key, iv, b"")) == b""

    def test_short_payload_rejected(self) -> None:
        with pytest.raises(ValueError):
            decrypt_gcm(os.urandom(16), os.urandom(16), b"short")


class TestCbcFallback:
    """Fallback legado quando a tag GCM não confere."""

    @pytest.mark.parametrize("key_size", [16, 24, 32])
    def test_falls_back_to_cbc(self, key_size: int) -> None:
        key = os.urandom(key_size)
        iv = os.urandom(16)
        payload = encrypt_cbc(key, iv, PLAINTEXT)

        result = SymmetricPayloadDecryptor().decrypt(key, iv, payload)

        assert result.plaintext == PLAINTEXT
        assert result.mode_used == f"aes-{key_size * 8}-cbc"

    def test_strict_padding_accepts_valid_cbc(self) -> None:
        key = os.urandom(32)
        iv = os.urandom(16)
        decryptor = SymmetricPayloadDecryptor(strip_padding=strip_padding_strict)

        result = decryptor.decrypt(key, iv, encrypt_cbc(key, iv, PLAINTEXT))

        assert result.plaintext == PLAINTEXT

    def test_cbc_requires_16_byte_iv(self) -> None:
        key = os.urandom(16)
        payload = encrypt_cbc(key, os.urandom(16), PLAINTEXT)

        with pytest.raises(PayloadDecryptError):
            SymmetricPayloadDecryptor().decrypt(key, os.urandom(12), payload)


class TestFailures:
    """Todas as tentativas falham: erro único, sem detalhe interno."""

    def test_truncated_payload_raises(self) -> None:
        key = os.urandom(32)
        iv = bytes(16)
        payload = encrypt_gcm(key, iv, b'{"ping":true}')

        with pytest.raises(PayloadDecryptError, match="Payload decryption failed"):
            SymmetricPayloadDecryptor().decrypt(key, iv, payload[:-1])

    def test_strict_padding_rejects_inconsistent_padding(self) -> None:
        key = os.urandom(16)
        iv = os.urandom(16)
        block = b"0123456789abc\x00\x00\x03"
        encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
        payload = encryptor.update(block) + encryptor.finalize()

        lenient = SymmetricPayloadDecryptor().decrypt(key, iv, payload)
        assert lenient.plaintext == b"0123456789abc"

        with pytest.raises(PayloadDecryptError):
            SymmetricPayloadDecryptor(strip_padding=strip_padding_strict).decrypt(
                key, iv, payload
            )

    def test_unsupported_key_size_raises(self) -> None:
        with pytest.raises(PayloadDecryptError, match="Unsupported AES key size: 20"):
            SymmetricPayloadDecryptor().decrypt(os.urandom(20), os.urandom(16), b"x" * 32)

    def test_empty_attempts_rejected(self) -> None:
        with pytest.raises(ValueError):
            SymmetricPayloadDecryptor(attempts=())


def test_custom_attempts_run_in_order() -> None:
    calls: list[str] = []

    def _failing(key: bytes, iv: bytes, payload: bytes) -> bytes:
        calls.append("first")
        raise ValueError("nope")

    def _succeeding(key: bytes, iv: bytes, payload: bytes) -> bytes:
        calls.append("second")
        return b"ok"

    decryptor = SymmetricPayloadDecryptor(
        attempts=(
            ModeAttempt(mode="first", decrypt=_failing),
            ModeAttempt(mode="second", decrypt=_succeeding),
        )
    )

    result = decryptor.decrypt(os.urandom(16), os.urandom(16), b"payload")

    assert calls == ["first", "second"]
    assert result.mode_used == "aes-128-second"


class TestTagTampering:
    """Tag GCM alterada: GCM falha e o CBC decide o resultado."""

    @pytest.mark.parametrize("position", range(16))
    def test_tampered_tag_raises_when_cbc_rejects(self, position: int) -> None:
        key = os.urandom(32)
        iv = os.urandom(16)
        payload = bytearray(encrypt_gcm(key, iv, b'{"ping":true}'))
        payload[-16 + position] ^= 0x01

        # 13 + 16 bytes: não é múltiplo do bloco, CBC também falha
        with pytest.raises(PayloadDecryptError):
            SymmetricPayloadDecryptor().decrypt(key, iv, bytes(payload))

    def test_tampered_tag_on_block_aligned_payload_falls_back_to_cbc(self) -> None:
        key = os.urandom(16)
        iv = os.urandom(16)
        plaintext = b'{"ping":"true!"}'
        payload = bytearray(encrypt_gcm(key, iv, plaintext))
        payload[-1] ^= 0x01

        # 16 + 16 bytes decriptam em CBC; resultado é lixo aceito como sucesso
        result = SymmetricPayloadDecryptor().decrypt(key, iv, bytes(payload))

        assert len(plaintext) == 16
        assert result.mode_used == "aes-128-cbc"
        assert result.plaintext != plaintext


class TestAttemptFailures:
    """Qualquer exceção de uma tentativa leva ao próximo modo."""

    @pytest.mark.parametrize("error", [RuntimeError("boom"), TypeError("bad"), KeyError("k")])
    def test_any_exception_falls_through_to_next_mode(self, error: Exception) -> None:
        def _raising(key: bytes, iv: bytes, payload: bytes) -> bytes:
            raise error

        decryptor = SymmetricPayloadDecryptor(
            attempts=(
                ModeAttempt(mode="broken", decrypt=_raising),
                ModeAttempt(mode="echo", decrypt=lambda key, iv, payload: payload),
            )
        )

        result = decryptor.decrypt(os.urandom(24), os.urandom(16), b"data")

        assert result.plaintext == b"data"
        assert result.mode_used == "aes-192-echo"

    def test_all_attempts_raising_becomes_payload_error(self) -> None:
        def _raising(key: bytes, iv: bytes, payload: bytes) -> bytes:
            raise RuntimeError("boom")

        decryptor = SymmetricPayloadDecryptor(
            attempts=(ModeAttempt(mode="broken", decrypt=_raising),)
        )

        with pytest.raises(PayloadDecryptError, match="Payload decryption failed"):
            decryptor.decrypt(os.urandom(16), os.urandom(16), b"data")
