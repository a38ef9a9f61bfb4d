"""Testes do script de decriptação offline."""

from __future__ import annotations

import base64
import importlib.util
import json
from pathlib import Path

import pytest

from tests.fakes.fake_flow_envelope import build_envelope, generate_private_key, private_key_to_pem

_SCRIPT = Path(__file__).resolve().parents[2] / "scripts" / "decrypt_envelope.py"


def _load_script():
    spec = importlib.util.spec_from_file_location("decrypt_envelope", _SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def files(tmp_path: Path) -> tuple[Path, Path]:
    private_key = generate_private_key()
    key_path = tmp_path / "key.pem"
    key_path.write_text(private_key_to_pem(private_key), encoding="utf-8")
    envelope_path = tmp_path / "envelope.json"
    envelope_path.write_text(
        json.dumps(build_envelope(private_key, b'{"ping":true}').to_transport()),
        encoding="utf-8",
    )
    return key_path, envelope_path


def test_decrypt_file_returns_plaintext_and_echo(files: tuple[Path, Path]) -> None:
    key_path, envelope_path = files

    mode_used, plaintext, echo = _load_script().decrypt_file(key_path, envelope_path)

    assert mode_used == "aes-256-gcm"
    assert plaintext == '{"ping":true}'
    assert base64.b64decode(echo) == b'{"ping":true}'


def test_main_prints_result(files: tuple[Path, Path], capsys: pytest.CaptureFixture[str]) -> None:
    key_path, envelope_path = files

    exit_code = _load_script().main(["--key", str(key_path), "--envelope", str(envelope_path)])

    assert exit_code == 0
    assert 'Decrypted: {"ping":true}' in capsys.readouterr().out


def test_main_reports_failure(
    files: tuple[Path, Path], tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    key_path, _ = files
    bad_envelope = tmp_path / "bad.json"
    bad_envelope.write_text("{}", encoding="utf-8")

    exit_code = _load_script().main(["--key", str(key_path), "--envelope", str(bad_envelope)])

    assert exit_code == 1
    assert "Falha" in capsys.readouterr().err
