"""Connector de Flows: parsing do envelope de transporte."""

from .envelope import (
    TRANSPORT_FIELDS,
    decode_base64_field,
    envelope_from_transport,
    parse_envelope_body,
)

__all__ = [
    "TRANSPORT_FIELDS",
    "decode_base64_field",
    "envelope_from_transport",
    "parse_envelope_body",
]
