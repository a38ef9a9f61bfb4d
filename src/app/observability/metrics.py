"""Registro de métricas via structured logging.

As métricas são logs estruturados (`metric_type`) agregáveis
posteriormente pelo backend de logs.

Métricas suportadas:
- Latência: tempo de execução por componente/operação
- Relay: resultado de cada entrega ao endpoint downstream

Uso:
    from app.observability import record_latency, record_relay_delivery

    start = time.perf_counter()
    # ... operação ...
    record_latency("decryption_pipeline", "process", (time.perf_counter() - start) * 1000)
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def record_latency(
    component: str,
    operation: str,
    latency_ms: float,
    correlation_id: str | None = None,
) -> None:
    """Registra latência de operação.

    Args:
        component: Nome do componente (ex: "decryption_pipeline")
        operation: Nome da operação (ex: "process", "forward")
        latency_ms: Latência em milissegundos
        correlation_id: ID de correlação para rastreamento
    """
    logger.info(
        "metric_latency",
        extra={
            "metric_type": "latency",
            "component": component,
            "operation": operation,
            "latency_ms": round(latency_ms, 2),
            "correlation_id": correlation_id,
        },
    )


def record_relay_delivery(
    result: str,
    latency_ms: float,
    status_code: int | None = None,
    correlation_id: str | None = None,
) -> None:
    """Registra resultado de entrega ao relay.

    Args:
        result: "delivered", "failed" ou "timeout"
        latency_ms: Tempo total da entrega (inclui retries)
        status_code: Status HTTP final, quando houver
        correlation_id: ID de correlação para rastreamento
    """
    logger.info(
        "metric_relay_delivery",
        extra={
            "metric_type": "relay_delivery",
            "component": "relay",
            "result": result,
            "latency_ms": round(latency_ms, 2),
            "status_code": status_code,
            "correlation_id": correlation_id,
        },
    )
