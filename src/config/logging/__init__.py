"""Configuração de logging estruturado do gateway de Flows.

Re-exporta funções e classes para configuração de logging JSON.

Uso:
    from config.logging import configure_logging, get_logger

    # Na inicialização (bootstrap)
    configure_logging(level="INFO", service_name="flow_gateway")

    # Em qualquer módulo
    logger = get_logger(__name__)
    logger.info("flow_decrypted", extra={"plaintext_bytes": 42})

Campos obrigatórios em todo log:
- correlation_id
- service
- level
- logger
- message
- asctime

Material criptográfico (chaves, plaintext) nunca entra nos logs:
o SensitiveFieldFilter remove esses campos antes da formatação.
"""

from config.logging.config import configure_logging, get_logger, log_fallback
from config.logging.filters import SENSITIVE_FIELDS, CorrelationIdFilter, SensitiveFieldFilter
from config.logging.formatters import (
    FIELD_RENAME_MAP,
    REQUIRED_LOG_FIELDS,
    create_json_formatter,
)

__all__ = [
    "FIELD_RENAME_MAP",
    "REQUIRED_LOG_FIELDS",
    "SENSITIVE_FIELDS",
    # Filters
    "CorrelationIdFilter",
    "SensitiveFieldFilter",
    # Configuração principal
    "configure_logging",
    # Formatters
    "create_json_formatter",
    "get_logger",
    "log_fallback",
]
