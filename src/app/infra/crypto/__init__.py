"""Módulo de criptografia para WhatsApp Flows.

Implementa o unwrap RSA-OAEP da chave AES e a decriptação do payload
(AES-GCM com fallback AES-CBC). Sem estado: cada chamada recebe todo o
material necessário e nada é guardado entre requisições.

Localizado em app/infra/ para manter boundaries corretas:
- app/ não importa de api/ (exceto via bootstrap)
- use_cases dependem daqui apenas via bootstrap ou protocolos
"""

from .constants import AES_KEY_SIZES_ALLOWED, TAG_SIZE
from .errors import FlowCryptoError, KeyUnwrapError, PayloadDecryptError
from .keys import DEFAULT_OAEP_CONFIGS, AsymmetricKeyUnwrapper, OaepConfig, load_private_key
from .padding import select_padding_stripper, strip_padding_permissive, strip_padding_strict
from .payload import (
    ModeAttempt,
    SymmetricDecryption,
    SymmetricPayloadDecryptor,
    decrypt_cbc,
    decrypt_gcm,
    default_mode_attempts,
)

__all__ = [
    "AES_KEY_SIZES_ALLOWED",
    "DEFAULT_OAEP_CONFIGS",
    "TAG_SIZE",
    "AsymmetricKeyUnwrapper",
    "FlowCryptoError",
    "KeyUnwrapError",
    "ModeAttempt",
    "OaepConfig",
    "PayloadDecryptError",
    "SymmetricDecryption",
    "SymmetricPayloadDecryptor",
    "decrypt_cbc",
    "decrypt_gcm",
    "default_mode_attempts",
    "load_private_key",
    "select_padding_stripper",
    "strip_padding_permissive",
    "strip_padding_strict",
]
