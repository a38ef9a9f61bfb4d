"""Protocolo do relay que recebe o JSON decriptado."""

from __future__ import annotations

from typing import Any, Protocol


class RelayForwarderProtocol(Protocol):
    """Entrega JSON já parseado ao endpoint configurado.

    Implementações levantam RelayDeliveryError em qualquer falha.
    """

    async def forward(self, payload: Any) -> None: ...
