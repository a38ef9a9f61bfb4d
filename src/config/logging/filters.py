"""Filters de logging para contexto e proteção de dados sensíveis.

Campos injetados:
- correlation_id: ID de rastreamento da requisição
- service: Nome do serviço (ex: flow_gateway)

Campos removidos:
- qualquer extra listado em SENSITIVE_FIELDS (chaves, plaintext)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

# Nomes de extra que jamais podem chegar ao formatter
SENSITIVE_FIELDS = frozenset(
    {
        "aes_key",
        "symmetric_key",
        "private_key",
        "private_key_pem",
        "passphrase",
        "plaintext",
    }
)

_REDACTED = "[redacted]"


class CorrelationIdFilter(logging.Filter):
    """Injeta correlation_id e service em cada record de log.

    Args:
        service_name: Nome do serviço para identificação nos logs.
        correlation_id_getter: Função que retorna o correlation_id atual.
            Se não fornecida, usa string vazia como fallback.
    """

    def __init__(
        self,
        service_name: str,
        correlation_id_getter: Callable[[], str] | None = None,
    ) -> None:
        super().__init__()
        self._service_name = service_name
        self._get_correlation_id = correlation_id_getter or (lambda: "")

    def filter(self, record: logging.LogRecord) -> bool:
        """Adiciona correlation_id e service ao record.

        Se correlation_id já foi passado via `extra`, preserva o valor.
        """
        existing = getattr(record, "correlation_id", None)
        record.correlation_id = existing if existing else self._get_correlation_id()
        record.service = self._service_name
        return True


class SensitiveFieldFilter(logging.Filter):
    """Substitui extras sensíveis por marcador fixo.

    Não filtra records, apenas sanitiza atributos.
    """

    def __init__(self, fields: frozenset[str] = SENSITIVE_FIELDS) -> None:
        super().__init__()
        self._fields = fields

    def filter(self, record: logging.LogRecord) -> bool:
        for name in self._fields:
            if name in record.__dict__:
                setattr(record, name, _REDACTED)
        return True
