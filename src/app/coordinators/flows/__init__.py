"""Coordinators de Flows."""

from .relay import RelayCoordinator, RelayResult

__all__ = ["RelayCoordinator", "RelayResult"]
