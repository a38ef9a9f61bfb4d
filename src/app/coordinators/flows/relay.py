"""Coordenação da entrega do JSON decriptado ao relay.

A entrega sempre roda em task própria com prazo independente da
decriptação. Em modo `inline` a rota aguarda a task para poder
reportar falha; em modo `async` a resposta sai antes da entrega.
"""

from __future__ import annotations

import asyncio
import logging
import time
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from app.domain.errors import RelayDeliveryError
from app.infra.relay import dispatch_relay_task
from app.observability import get_correlation_id, record_relay_delivery

if TYPE_CHECKING:
    from app.protocols.relay import RelayForwarderProtocol

logger = logging.getLogger(__name__)


class RelayResult(StrEnum):
    """Resultado observável da coordenação."""

    SKIPPED = "skipped"
    DELIVERED = "delivered"
    SCHEDULED = "scheduled"


class RelayCoordinator:
    """Despacha entregas ao relay conforme modo e prazo configurados."""

    def __init__(
        self,
        forwarder: RelayForwarderProtocol | None,
        *,
        mode: str = "inline",
        deadline_seconds: float = 30.0,
    ) -> None:
        if mode not in ("inline", "async"):
            raise ValueError(f"modo de relay inválido: {mode}")
        self._forwarder = forwarder
        self._mode = mode
        self._deadline_seconds = deadline_seconds

    @property
    def enabled(self) -> bool:
        return self._forwarder is not None

    @property
    def mode(self) -> str:
        return self._mode

    async def relay(self, payload: Any) -> RelayResult:
        """Entrega payload ao relay.

        Returns:
            SKIPPED sem relay configurado, SCHEDULED em modo async,
            DELIVERED quando a entrega inline terminou.

        Raises:
            RelayDeliveryError: Em modo inline, se a entrega falhar ou
                estourar o prazo.
        """
        if self._forwarder is None:
            logger.info("relay_skipped", extra={"component": "relay", "reason": "not_configured"})
            return RelayResult.SKIPPED

        correlation_id = get_correlation_id()
        if self._mode == "async":
            dispatch_relay_task(
                correlation_id=correlation_id,
                coroutine=self._forwarder.forward(payload),
                report_failures=True,
            )
            return RelayResult.SCHEDULED

        task = dispatch_relay_task(
            correlation_id=correlation_id,
            coroutine=self._forwarder.forward(payload),
            report_failures=False,
        )
        started_at = time.perf_counter()
        try:
            await asyncio.wait_for(task, timeout=self._deadline_seconds)
        except TimeoutError as exc:
            record_relay_delivery(
                "timeout",
                (time.perf_counter() - started_at) * 1000,
                correlation_id=correlation_id,
            )
            raise RelayDeliveryError("Relay delivery timed out") from exc
        return RelayResult.DELIVERED
