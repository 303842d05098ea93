"""Calculation result models."""

from lph.engine.models.hedge import HedgeAction, HedgeActionType
from lph.engine.models.snapshot import BASE_REFERENCE_EPSILON, MonitoringSnapshot

__all__ = [
    "BASE_REFERENCE_EPSILON",
    "HedgeAction",
    "HedgeActionType",
    "MonitoringSnapshot",
]
