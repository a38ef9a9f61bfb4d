"""Parsing do corpo HTTP para EncryptedEnvelope.

Formato de transporte (JSON):
- `initial_vector`: IV (base64)
- `encrypted_flow_data`: payload criptografado (base64)
- `encrypted_aes_key`: chave AES criptografada com RSA-OAEP (base64)

Erros aqui são sempre ValidationError (erro do cliente), nunca de
criptografia.
"""

from __future__ import annotations

import base64
import binascii
import json
import re
from typing import Any

from app.domain.envelope import EncryptedEnvelope
from app.domain.errors import ValidationError

TRANSPORT_FIELDS = ("initial_vector", "encrypted_flow_data", "encrypted_aes_key")

_URLSAFE_B64 = re.compile(r"[A-Za-z0-9_\-]+={0,2}")


def decode_base64_field(name: str, raw_value: str) -> bytes:
    """Decodifica base64 padrão, com fallback para urlsafe.

    Espaços e quebras de linha são ignorados e padding `=` ausente é
    tolerado. O fallback urlsafe só é tentado quando o valor contém
    apenas caracteres urlsafe.

    Raises:
        ValidationError: Se o valor não for base64 válido.
    """
    value = "".join(raw_value.split())
    padded = value + ("=" * (-len(value) % 4))
    try:
        return base64.b64decode(padded, validate=True)
    except (ValueError, binascii.Error):
        if not _URLSAFE_B64.fullmatch(value):
            raise ValidationError(f"Invalid base64 in {name}") from None
        try:
            return base64.urlsafe_b64decode(padded)
        except (ValueError, binascii.Error) as exc:
            raise ValidationError(f"Invalid base64 in {name}") from exc


def parse_envelope_body(raw_body: bytes) -> EncryptedEnvelope:
    """Converte o corpo bruto da requisição em EncryptedEnvelope.

    Raises:
        ValidationError: Corpo não é objeto JSON, campo ausente/vazio
            ou base64 inválido.
    """
    try:
        payload = json.loads(raw_body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ValidationError("Malformed request body") from exc
    if not isinstance(payload, dict):
        raise ValidationError("Malformed request body")
    return envelope_from_transport(payload)


def envelope_from_transport(payload: dict[str, Any]) -> EncryptedEnvelope:
    """Valida presença dos campos e decodifica base64.

    Raises:
        ValidationError: Se algum campo estiver ausente, vazio ou inválido.
    """
    missing = [
        name
        for name in TRANSPORT_FIELDS
        if not isinstance(payload.get(name), str) or not payload[name].strip()
    ]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    return EncryptedEnvelope(
        initial_vector=decode_base64_field("initial_vector", payload["initial_vector"]),
        encrypted_payload=decode_base64_field(
            "encrypted_flow_data", payload["encrypted_flow_data"]
        ),
        wrapped_key=decode_base64_field("encrypted_aes_key", payload["encrypted_aes_key"]),
    )
