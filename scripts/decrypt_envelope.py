#!/usr/bin/env python3
"""Decripta offline um envelope de Flow capturado (ex: health check da Meta).

Uso:
    python scripts/decrypt_envelope.py --key private_key.pem --envelope payload.json

O arquivo de envelope é o corpo JSON recebido pelo endpoint, com
`initial_vector`, `encrypted_flow_data` e `encrypted_aes_key`.
Imprime o plaintext e o eco base64 que o endpoint de verificação devolveria.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from api.connectors.flows import parse_envelope_body
from app.domain.envelope import DecryptionFailure
from app.domain.errors import GatewayError
from app.infra.crypto import load_private_key
from app.use_cases.flows import DecryptionPipeline, PipelineConfig, encode_verification_echo


def decrypt_file(
    key_path: Path,
    envelope_path: Path,
    *,
    passphrase: str | None = None,
    strict_padding: bool = False,
) -> tuple[str, str, str]:
    """Retorna (modo usado, plaintext UTF-8, eco base64).

    Raises:
        GatewayError: Se o envelope for inválido ou a decriptação falhar.
    """
    private_key = load_private_key(key_path.read_text(encoding="utf-8"), passphrase)
    envelope = parse_envelope_body(envelope_path.read_bytes())
    pipeline = DecryptionPipeline(
        PipelineConfig(private_key=private_key, strict_padding=strict_padding)
    )
    outcome = pipeline.process(envelope)
    if isinstance(outcome, DecryptionFailure):
        raise GatewayError(f"{outcome.kind.value}: {outcome.message}")
    return (
        outcome.mode_used,
        outcome.plaintext.decode("utf-8", errors="replace"),
        encode_verification_echo(outcome.plaintext),
    )


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--key", required=True, type=Path, help="Chave privada RSA (PEM)")
    parser.add_argument("--envelope", required=True, type=Path, help="Corpo JSON capturado")
    parser.add_argument("--passphrase", default=None, help="Senha da chave, se houver")
    parser.add_argument(
        "--strict-padding",
        action="store_true",
        help="Valida padding PKCS#7 no fallback AES-CBC",
    )
    args = parser.parse_args(argv)

    try:
        mode_used, plaintext, echo = decrypt_file(
            args.key,
            args.envelope,
            passphrase=args.passphrase,
            strict_padding=args.strict_padding,
        )
    except (GatewayError, OSError) as exc:
        print(f"Falha: {exc}", file=sys.stderr)
        return 1

    print(f"Modo: {mode_used}")
    print(f"Decrypted: {plaintext}")
    print(f"Base64 Response: {echo}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
