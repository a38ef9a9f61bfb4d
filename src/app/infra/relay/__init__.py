"""Relay downstream: cliente HTTP e controle de tasks de entrega."""

from .dispatcher import active_task_count, dispatch_relay_task, drain_relay_tasks
from .forwarder import (
    AttemptResult,
    DeliveryAttempt,
    HttpRelayForwarder,
    RelayClientConfig,
    classify_status,
    create_relay_forwarder,
)

__all__ = [
    "AttemptResult",
    "DeliveryAttempt",
    "HttpRelayForwarder",
    "RelayClientConfig",
    "active_task_count",
    "classify_status",
    "create_relay_forwarder",
    "dispatch_relay_task",
    "drain_relay_tasks",
]
