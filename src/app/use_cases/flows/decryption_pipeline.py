"""Use case de decriptação do envelope híbrido de Flows.

Fluxo: validação do envelope → unwrap RSA da chave AES → decriptação
do payload. Falhas criptográficas não são transitórias: nada aqui é
re-tentado.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from app.domain.envelope import (
    DecryptionFailure,
    DecryptionOutcome,
    DecryptionSuccess,
    FailureKind,
)
from app.domain.errors import ValidationError
from app.infra.crypto import (
    AsymmetricKeyUnwrapper,
    KeyUnwrapError,
    PayloadDecryptError,
    SymmetricPayloadDecryptor,
    select_padding_stripper,
)
from app.observability import record_latency

if TYPE_CHECKING:
    from app.domain.envelope import EncryptedEnvelope
    from app.protocols.crypto import KeyUnwrapperProtocol, PayloadDecryptorProtocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PipelineConfig:
    """Configuração imutável montada uma vez no startup.

    Attributes:
        private_key: Chave privada RSA já carregada (somente leitura)
        strict_padding: Usa remoção PKCS#7 estrita no fallback CBC
    """

    private_key: Any = field(repr=False)
    strict_padding: bool = False


class DecryptionPipeline:
    """Orquestra unwrap da chave e decriptação do payload."""

    def __init__(
        self,
        config: PipelineConfig,
        unwrapper: KeyUnwrapperProtocol | None = None,
        decryptor: PayloadDecryptorProtocol | None = None,
    ) -> None:
        self._config = config
        self._unwrapper = unwrapper or AsymmetricKeyUnwrapper()
        self._decryptor = decryptor or SymmetricPayloadDecryptor(
            strip_padding=select_padding_stripper(strict=config.strict_padding),
        )

    @property
    def config(self) -> PipelineConfig:
        return self._config

    def process(self, envelope: EncryptedEnvelope) -> DecryptionOutcome:
        """Decripta o envelope e devolve resultado classificado.

        Returns:
            DecryptionSuccess com plaintext, ou DecryptionFailure com a
            categoria (validação, unwrap ou payload).
        """
        started_at = time.perf_counter()
        try:
            validate_envelope(envelope)
        except ValidationError as exc:
            return self._fail(FailureKind.VALIDATION, exc.message)

        try:
            aes_key = self._unwrapper.unwrap(envelope.wrapped_key, self._config.private_key)
        except KeyUnwrapError as exc:
            return self._fail(FailureKind.KEY_UNWRAP, exc.message)

        try:
            decrypted = self._decryptor.decrypt(
                aes_key, envelope.initial_vector, envelope.encrypted_payload
            )
        except PayloadDecryptError as exc:
            return self._fail(FailureKind.PAYLOAD_DECRYPT, exc.message)
        finally:
            # Chave pertence apenas a esta chamada
            del aes_key

        record_latency(
            "decryption_pipeline", "process", (time.perf_counter() - started_at) * 1000
        )
        logger.info(
            "flow_decrypted",
            extra={
                "component": "decryption_pipeline",
                "mode_used": decrypted.mode_used,
                "plaintext_bytes": len(decrypted.plaintext),
            },
        )
        return DecryptionSuccess(plaintext=decrypted.plaintext, mode_used=decrypted.mode_used)

    @staticmethod
    def _fail(kind: FailureKind, message: str) -> DecryptionFailure:
        log = logger.warning if kind is FailureKind.VALIDATION else logger.error
        log(
            "flow_decryption_failed",
            extra={"component": "decryption_pipeline", "failure_kind": kind.value},
        )
        return DecryptionFailure(kind=kind, message=message)


def validate_envelope(envelope: EncryptedEnvelope) -> None:
    """Garante os três campos presentes e não vazios.

    Raises:
        ValidationError: Se algum campo estiver ausente ou vazio.
    """
    missing = envelope.missing_fields()
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")
