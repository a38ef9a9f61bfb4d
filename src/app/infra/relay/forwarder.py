"""Cliente HTTP do relay downstream.

Envia o JSON decriptado ao endpoint configurado (FLOW_RELAY_URL).
Cada tentativa vira um DeliveryAttempt classificado; só RETRY gera
nova tentativa. Logs nunca incluem o conteúdo entregue, apenas status
e latência.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any

import httpx

from app.domain.errors import RelayDeliveryError
from app.observability import record_relay_delivery
from config.settings.flows import RELAY_BACKOFF_BASE_SECONDS, RELAY_BACKOFF_MAX_SECONDS

if TYPE_CHECKING:
    from config.settings import FlowSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RelayClientConfig:
    """Timeout, retries e backoff da entrega.

    `transport` permite injetar httpx.MockTransport em testes.
    """

    timeout_seconds: float = 10.0
    max_retries: int = 2
    backoff_base_seconds: float = RELAY_BACKOFF_BASE_SECONDS
    backoff_max_seconds: float = RELAY_BACKOFF_MAX_SECONDS
    transport: httpx.AsyncBaseTransport | None = None


class AttemptResult(StrEnum):
    """Classificação de uma tentativa de entrega."""

    DELIVERED = "delivered"
    RETRY = "retry"
    REJECTED = "rejected"


@dataclass(frozen=True, slots=True)
class DeliveryAttempt:
    result: AttemptResult
    status_code: int | None = None
    error_type: str | None = None


def classify_status(status_code: int) -> AttemptResult:
    """2xx entregue; 429/5xx transitório; demais status rejeitados pelo relay."""
    if 200 <= status_code < 300:
        return AttemptResult.DELIVERED
    if status_code == 429 or status_code >= 500:
        return AttemptResult.RETRY
    return AttemptResult.REJECTED


class HttpRelayForwarder:
    """Entrega JSON ao relay via POST.

    Tratamento:
    - 2xx: entregue
    - 429/5xx/timeout/conexão: re-tentado com backoff, depois RelayDeliveryError
    - demais status: RelayDeliveryError imediato
    """

    def __init__(self, endpoint: str, config: RelayClientConfig | None = None) -> None:
        if not endpoint or not endpoint.strip():
            raise ValueError("endpoint do relay é obrigatório")
        self.endpoint = endpoint.strip()
        self._config = config or RelayClientConfig()

    @property
    def config(self) -> RelayClientConfig:
        return self._config

    async def forward(self, payload: Any) -> None:
        """Envia payload ao relay.

        Raises:
            RelayDeliveryError: Se a entrega for rejeitada ou as tentativas
                se esgotarem.
        """
        started_at = time.perf_counter()
        attempt = await self._deliver_with_retries(payload)
        elapsed_ms = (time.perf_counter() - started_at) * 1000

        if attempt.result is AttemptResult.DELIVERED:
            record_relay_delivery("delivered", elapsed_ms, status_code=attempt.status_code)
            return

        record_relay_delivery("failed", elapsed_ms, status_code=attempt.status_code)
        logger.warning(
            "relay_delivery_failed",
            extra={
                "component": "relay",
                "result": attempt.result.value,
                "status_code": attempt.status_code,
                "error_type": attempt.error_type,
            },
        )
        raise RelayDeliveryError(status_code=attempt.status_code)

    async def _deliver_with_retries(self, payload: Any) -> DeliveryAttempt:
        max_retries = max(self._config.max_retries, 0)
        async with httpx.AsyncClient(
            timeout=self._config.timeout_seconds,
            transport=self._config.transport,
        ) as client:
            for number in range(max_retries + 1):
                attempt = await self._attempt(client, payload)
                if attempt.result is not AttemptResult.RETRY or number >= max_retries:
                    return attempt
                await self._backoff(number, attempt)
        return attempt

    async def _attempt(self, client: httpx.AsyncClient, payload: Any) -> DeliveryAttempt:
        try:
            response = await client.post(self.endpoint, json=payload)
        except httpx.TransportError as exc:
            # Timeout e falha de conexão são transitórios
            return DeliveryAttempt(AttemptResult.RETRY, error_type=type(exc).__name__)
        except httpx.HTTPError as exc:
            return DeliveryAttempt(AttemptResult.REJECTED, error_type=type(exc).__name__)
        return DeliveryAttempt(classify_status(response.status_code), response.status_code)

    async def _backoff(self, number: int, attempt: DeliveryAttempt) -> None:
        delay = min(
            (2**number) * self._config.backoff_base_seconds,
            self._config.backoff_max_seconds,
        )
        logger.info(
            "relay_backoff",
            extra={
                "component": "relay",
                "attempt": number + 1,
                "backoff_seconds": delay,
                "status_code": attempt.status_code,
                "error_type": attempt.error_type,
            },
        )
        await asyncio.sleep(delay)


def create_relay_forwarder(settings: FlowSettings) -> HttpRelayForwarder | None:
    """Factory do relay; None quando FLOW_RELAY_URL não está configurado."""
    if not settings.relay_enabled:
        logger.info("relay_not_configured", extra={"component": "relay"})
        return None
    config = RelayClientConfig(
        timeout_seconds=settings.relay_timeout_seconds,
        max_retries=settings.relay_max_retries,
    )
    return HttpRelayForwarder(settings.relay_url, config=config)
