"""
Enums Module
============

This module provides enumeration types for the SmartFarm application.
Enums ensure type safety and consistency across the codebase.
"""

from app.enums.common import DeviationDirection, Metric, NotificationSeverity
from app.enums.events import EventType, HistoryEvent, MonitoringEvent, VegetationEvent

__all__ = [
    "DeviationDirection",
    "EventType",
    "HistoryEvent",
    "Metric",
    "MonitoringEvent",
    "NotificationSeverity",
    "VegetationEvent",
]
