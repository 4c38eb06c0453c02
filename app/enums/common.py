"""
Common Enumerations
====================

This module contains common enums used across multiple services.
"""

from enum import Enum


class Metric(str, Enum):
    """
    Monitored sensor metrics.
    Used by: range evaluator, alert formatting, history
    """
    TEMPERATURE = "temperature"
    GROUND_HUMIDITY = "ground_humidity"
    AIR_HUMIDITY = "air_humidity"

    @property
    def label(self) -> str:
        return _METRIC_LABELS[self]

    @property
    def unit(self) -> str:
        return "°C" if self is Metric.TEMPERATURE else "%"

    def __str__(self) -> str:
        return self.value


_METRIC_LABELS = {
    Metric.TEMPERATURE: "Temperature",
    Metric.GROUND_HUMIDITY: "Ground humidity",
    Metric.AIR_HUMIDITY: "Air humidity",
}


class DeviationDirection(str, Enum):
    """Which side of the acceptable range a value fell on."""
    TOO_LOW = "too_low"
    TOO_HIGH = "too_high"

    @property
    def word(self) -> str:
        return "low" if self is DeviationDirection.TOO_LOW else "high"

    def __str__(self) -> str:
        return self.value


class NotificationSeverity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"

    def __str__(self) -> str:
        return self.value
