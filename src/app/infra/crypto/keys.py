"""Operações de chave RSA para Flows (unwrap da chave AES)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from app.infra.crypto.constants import AES_KEY_SIZES_ALLOWED
from app.infra.crypto.errors import KeyUnwrapError
from config.logging import log_fallback

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class OaepConfig:
    """Configuração OAEP tentada no unwrap."""

    name: str
    digest: Callable[[], hashes.HashAlgorithm]

    def build_padding(self) -> padding.OAEP:
        return padding.OAEP(
            mgf=padding.MGF1(algorithm=self.digest()),
            algorithm=self.digest(),
            label=None,
        )


# SHA-256 é o formato atual; SHA-1 é o default legado de alguns clientes
DEFAULT_OAEP_CONFIGS: tuple[OaepConfig, ...] = (
    OaepConfig(name="oaep-sha256", digest=hashes.SHA256),
    OaepConfig(name="oaep-sha1", digest=hashes.SHA1),
)


def load_private_key(
    private_key_pem: str,
    passphrase: str | None = None,
) -> rsa.RSAPrivateKey:
    """Carrega chave privada RSA em formato PEM.

    Args:
        private_key_pem: Chave privada em formato PEM
        passphrase: Senha da chave (opcional)

    Returns:
        Objeto de chave privada RSA

    Raises:
        KeyUnwrapError: Se chave inválida ou não RSA
    """
    passphrase_bytes = passphrase.encode() if passphrase and passphrase.strip() else None

    def _load(password: bytes | None) -> object:
        return serialization.load_pem_private_key(
            private_key_pem.encode("utf-8"),
            password=password,
            backend=default_backend(),
        )

    try:
        key = _load(passphrase_bytes)
    except (ValueError, TypeError) as exc:
        # Permite fallback quando a chave não está criptografada, mas uma
        # passphrase foi injetada por configuração.
        if not (passphrase_bytes and "not encrypted" in str(exc).lower()):
            raise KeyUnwrapError("Invalid private key") from exc
        try:
            key = _load(None)
        except (ValueError, TypeError) as retry_exc:
            raise KeyUnwrapError("Invalid private key") from retry_exc

    if not isinstance(key, rsa.RSAPrivateKey):
        raise KeyUnwrapError("Private key must be RSA")
    return key


class AsymmetricKeyUnwrapper:
    """Recupera a chave AES de um blob RSA-OAEP.

    As configurações OAEP são tentadas em ordem; a primeira que decripta
    vence. Nenhuma chave parcial é devolvida.
    """

    def __init__(self, configs: Sequence[OaepConfig] = DEFAULT_OAEP_CONFIGS) -> None:
        if not configs:
            raise ValueError("configs não pode ser vazio")
        self._configs = tuple(configs)

    @property
    def configs(self) -> tuple[OaepConfig, ...]:
        return self._configs

    def unwrap(
        self,
        wrapped_key: bytes,
        private_key: rsa.RSAPrivateKey | str,
    ) -> bytes:
        """Descriptografa chave AES criptografada com RSA-OAEP.

        Args:
            wrapped_key: Chave AES criptografada (bytes brutos)
            private_key: Chave privada RSA carregada ou PEM

        Returns:
            Chave AES bruta (128/192/256 bits)

        Raises:
            KeyUnwrapError: Se nenhuma configuração decriptar, se a chave
                privada for inválida ou se o tamanho da chave AES for inválido
        """
        key = load_private_key(private_key) if isinstance(private_key, str) else private_key
        if not isinstance(key, rsa.RSAPrivateKey):
            raise KeyUnwrapError("Private key must be RSA")

        for position, config in enumerate(self._configs):
            try:
                aes_key = key.decrypt(wrapped_key, config.build_padding())
            except ValueError:
                logger.debug(
                    "flow_key_unwrap_attempt_failed",
                    extra={"component": "key_unwrapper", "oaep_config": config.name},
                )
                continue

            if position > 0:
                log_fallback(logger, "key_unwrapper", reason=f"{config.name}_used")
            if len(aes_key) not in AES_KEY_SIZES_ALLOWED:
                raise KeyUnwrapError(f"Invalid AES key size: {len(aes_key)}")
            return aes_key

        raise KeyUnwrapError()
