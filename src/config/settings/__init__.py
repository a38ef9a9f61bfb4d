"""Agregador de settings do gateway de Flows.

Re-exporta todas as settings e funções de cada módulo.
"""

from __future__ import annotations

from config.settings.base import (
    BaseSettings,
    Environment,
    get_base_settings,
)
from config.settings.flows import (
    RELAY_DISPATCH_MODES,
    FlowSettings,
    get_flow_settings,
)

__all__ = [
    "RELAY_DISPATCH_MODES",
    "BaseSettings",
    "Environment",
    "FlowSettings",
    "get_base_settings",
    "get_flow_settings",
]
