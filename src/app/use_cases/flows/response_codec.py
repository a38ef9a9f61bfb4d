"""Codificação do plaintext para os dois contratos de resposta.

- Eco de verificação: base64 dos bytes decriptados, sem envelope JSON.
- Relay estruturado: plaintext interpretado como JSON UTF-8.
"""

from __future__ import annotations

import base64
import json
from typing import Any

from app.domain.errors import MalformedPlaintextError


def encode_verification_echo(plaintext: bytes) -> str:
    """Re-codifica o plaintext bruto como uma única string base64."""
    return base64.b64encode(plaintext).decode("ascii")


def decode_structured_relay(plaintext: bytes) -> Any:
    """Interpreta o plaintext como JSON UTF-8.

    Returns:
        Estrutura JSON parseada (qualquer valor JSON).

    Raises:
        MalformedPlaintextError: Se não for UTF-8 ou JSON válido. O texto
            bruto (com bytes inválidos substituídos) vai em `raw`.
    """
    raw_text = plaintext.decode("utf-8", errors="replace")
    try:
        return json.loads(plaintext.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise MalformedPlaintextError(raw=raw_text) from exc
