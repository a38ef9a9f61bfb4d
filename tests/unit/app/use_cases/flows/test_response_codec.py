"""Testes da codificação das respostas (eco base64 e relay JSON)."""

from __future__ import annotations

import base64

import pytest

from app.domain.errors import MalformedPlaintextError
from app.use_cases.flows import decode_structured_relay, encode_verification_echo


class TestVerificationEcho:
    """Testes para encode_verification_echo."""

    def test_encodes_plaintext_bytes(self) -> None:
        assert encode_verification_echo(b'{"ping":true}') == "eyJwaW5nIjp0cnVlfQ=="

    def test_echo_is_exact_inverse_of_base64(self) -> None:
        raw = bytes(range(256))
        assert base64.b64decode(encode_verification_echo(raw)) == raw

    def test_empty_plaintext_gives_empty_string(self) -> None:
        assert encode_verification_echo(b"") == ""


class TestStructuredRelay:
    """Testes para decode_structured_relay."""

    def test_parses_json_object(self) -> None:
        assert decode_structured_relay(b'{"ping":true}') == {"ping": True}

    def test_parses_non_object_json(self) -> None:
        assert decode_structured_relay(b"[1, 2, 3]") == [1, 2, 3]

    def test_parses_utf8_text(self) -> None:
        data = decode_structured_relay('{"nome":"João"}'.encode())
        assert data == {"nome": "João"}

    def test_invalid_json_raises_with_raw_text(self) -> None:
        with pytest.raises(MalformedPlaintextError) as exc_info:
            decode_structured_relay(b"not json")

        assert exc_info.value.raw == "not json"
        assert exc_info.value.http_status == 500
        assert exc_info.value.message == "Decrypted payload is not valid JSON"

    def test_invalid_utf8_raises_with_replaced_text(self) -> None:
        with pytest.raises(MalformedPlaintextError) as exc_info:
            decode_structured_relay(b"\xff\xfe{}")

        assert "�" in exc_info.value.raw
