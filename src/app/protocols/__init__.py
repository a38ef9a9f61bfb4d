"""Protocolos e contratos do core da aplicação."""

from .crypto import KeyUnwrapperProtocol, PayloadDecryptorProtocol
from .relay import RelayForwarderProtocol

__all__ = [
    "KeyUnwrapperProtocol",
    "PayloadDecryptorProtocol",
    "RelayForwarderProtocol",
]
