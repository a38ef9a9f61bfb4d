"""Use cases de Flows: decriptação do envelope e codificação da resposta."""

from .decryption_pipeline import DecryptionPipeline, PipelineConfig, validate_envelope
from .response_codec import decode_structured_relay, encode_verification_echo

__all__ = [
    "DecryptionPipeline",
    "PipelineConfig",
    "decode_structured_relay",
    "encode_verification_echo",
    "validate_envelope",
]
