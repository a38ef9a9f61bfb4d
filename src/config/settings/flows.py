"""Settings do endpoint de Flows (decriptação e relay).

A chave privada e a URL de relay são lidas uma única vez no startup;
a camada de decriptação recebe apenas o objeto de configuração pronto.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

RELAY_DISPATCH_MODES = ("inline", "async")
RELAY_BACKOFF_BASE_SECONDS = 0.5
RELAY_BACKOFF_MAX_SECONDS = 5.0


@dataclass(frozen=True)
class FlowSettings:
    """Configurações do gateway de Flows.

    Attributes:
        private_key_pem: Chave privada RSA em PEM (FLOW_PRIVATE_KEY ou PRIVATE_KEY)
        private_key_path: Caminho alternativo para arquivo PEM
        private_key_passphrase: Senha da chave (opcional)
        strict_padding: Valida padding PKCS#7 no fallback AES-CBC
        relay_url: Endpoint que recebe o JSON decriptado (vazio = sem relay)
        relay_timeout_seconds: Timeout de cada entrega ao relay
        relay_max_retries: Tentativas extras em erro transitório do relay
        relay_dispatch_mode: inline (aguarda resultado) ou async (fire-and-forget)
    """

    private_key_pem: str = ""
    private_key_path: str = ""
    private_key_passphrase: str = ""
    strict_padding: bool = False

    relay_url: str = ""
    relay_timeout_seconds: float = 10.0
    relay_max_retries: int = 2
    relay_dispatch_mode: str = "inline"

    @property
    def relay_enabled(self) -> bool:
        """True quando há endpoint de relay configurado."""
        return bool(self.relay_url.strip())

    @property
    def relay_deadline_seconds(self) -> float:
        """Prazo total de uma entrega, cobrindo todas as tentativas e backoffs."""
        attempts = self.relay_max_retries + 1
        backoff = RELAY_BACKOFF_MAX_SECONDS * self.relay_max_retries
        return self.relay_timeout_seconds * attempts + backoff

    def resolve_private_key_pem(self) -> str:
        """Retorna o PEM configurado, lendo o arquivo quando necessário.

        Raises:
            OSError: Se FLOW_PRIVATE_KEY_PATH aponta para arquivo ilegível.
        """
        if self.private_key_pem:
            return self.private_key_pem
        if self.private_key_path:
            return Path(self.private_key_path).read_text(encoding="utf-8")
        return ""

    def validate(self) -> list[str]:
        """Valida configurações mínimas do gateway.

        Returns:
            Lista de erros de validação (vazia = tudo OK).
        """
        errors: list[str] = []

        if not self.private_key_pem and not self.private_key_path:
            errors.append("FLOW_PRIVATE_KEY (ou FLOW_PRIVATE_KEY_PATH) não configurado")

        if self.private_key_path and not Path(self.private_key_path).is_file():
            errors.append(f"FLOW_PRIVATE_KEY_PATH não encontrado: {self.private_key_path}")

        if self.relay_enabled and not self.relay_url.startswith(("http://", "https://")):
            errors.append("FLOW_RELAY_URL deve começar com http:// ou https://")

        if self.relay_timeout_seconds <= 0:
            errors.append("FLOW_RELAY_TIMEOUT_SECONDS deve ser > 0")

        if self.relay_max_retries < 0:
            errors.append("FLOW_RELAY_MAX_RETRIES deve ser >= 0")

        if self.relay_dispatch_mode not in RELAY_DISPATCH_MODES:
            errors.append("FLOW_RELAY_DISPATCH_MODE deve ser 'inline' ou 'async'")

        return errors


def _normalize_pem(raw_value: str) -> str:
    # Variáveis de ambiente costumam chegar com "\n" literal
    return raw_value.strip().replace("\\n", "\n")


def _load_from_env() -> FlowSettings:
    """Carrega FlowSettings a partir de variáveis de ambiente."""
    raw_key = os.getenv("FLOW_PRIVATE_KEY") or os.getenv("PRIVATE_KEY", "")
    return FlowSettings(
        private_key_pem=_normalize_pem(raw_key),
        private_key_path=os.getenv("FLOW_PRIVATE_KEY_PATH", ""),
        private_key_passphrase=os.getenv("FLOW_PRIVATE_KEY_PASSPHRASE", ""),
        strict_padding=os.getenv("FLOW_STRICT_PADDING", "").lower() in ("true", "1", "yes"),
        relay_url=os.getenv("FLOW_RELAY_URL", "").strip(),
        relay_timeout_seconds=float(os.getenv("FLOW_RELAY_TIMEOUT_SECONDS", "10")),
        relay_max_retries=int(os.getenv("FLOW_RELAY_MAX_RETRIES", "2")),
        relay_dispatch_mode=os.getenv("FLOW_RELAY_DISPATCH_MODE", "inline").lower(),
    )


@lru_cache(maxsize=1)
def get_flow_settings() -> FlowSettings:
    """Retorna instância cacheada de FlowSettings."""
    return _load_from_env()
