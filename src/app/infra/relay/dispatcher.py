"""Controle de tasks assíncronas de entrega ao relay.

Cada entrega roda em task própria, limitada por semáforo, para que a
espera pelo downstream nunca bloqueie a aceitação de novas requisições.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from functools import partial
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Awaitable

logger = logging.getLogger(__name__)

MAX_CONCURRENT_DELIVERIES = 100

_DELIVERY_SEMAPHORE = asyncio.Semaphore(MAX_CONCURRENT_DELIVERIES)
_active_tasks: set[asyncio.Task[Any]] = set()


def dispatch_relay_task(
    *,
    correlation_id: str,
    coroutine: Awaitable[None],
    report_failures: bool = True,
) -> asyncio.Task[None]:
    """Agenda entrega ao relay com limite de concorrência.

    Args:
        correlation_id: ID da requisição de origem (apenas para logs)
        coroutine: Entrega a executar
        report_failures: Loga falhas no callback; desligado quando o
            chamador aguarda a task e trata o erro

    Returns:
        Task agendada; quem precisa do resultado pode aguardá-la.
    """
    task: asyncio.Task[None] = asyncio.create_task(_run_with_limit(coroutine))
    _active_tasks.add(task)
    task.add_done_callback(partial(_on_delivery_done, report_failures=report_failures))
    logger.debug(
        "relay_delivery_scheduled",
        extra={
            "component": "relay",
            "correlation_id": correlation_id,
            "active_tasks": len(_active_tasks),
        },
    )
    return task


def active_task_count() -> int:
    return len(_active_tasks)


async def _run_with_limit(coroutine: Awaitable[None]) -> None:
    async with _DELIVERY_SEMAPHORE:
        await coroutine


def _on_delivery_done(task: asyncio.Task[Any], *, report_failures: bool) -> None:
    _active_tasks.discard(task)
    if not report_failures:
        return
    with contextlib.suppress(asyncio.CancelledError):
        exc = task.exception()
        if exc is not None:
            logger.error(
                "relay_delivery_task_failed",
                extra={
                    "component": "relay",
                    "error_type": type(exc).__name__,
                    "active_tasks": len(_active_tasks),
                },
            )


async def drain_relay_tasks(timeout_seconds: float = 30.0) -> None:
    """Aguarda entregas pendentes durante shutdown do processo."""
    if not _active_tasks:
        return

    pending_now = list(_active_tasks)
    logger.info(
        "relay_shutdown_wait",
        extra={
            "component": "relay",
            "pending_tasks": len(pending_now),
            "timeout_seconds": timeout_seconds,
        },
    )
    _, pending = await asyncio.wait(pending_now, timeout=timeout_seconds)
    if not pending:
        return

    for task in pending:
        task.cancel()
    await asyncio.gather(*pending, return_exceptions=True)
    logger.warning(
        "relay_shutdown_cancelled",
        extra={"component": "relay", "cancelled_tasks": len(pending)},
    )
