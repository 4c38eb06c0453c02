"""
Range Evaluator
===============
Compares a sensor reading with the active vegetation profile and describes
every metric that is out of its acceptable range.

The evaluator is pure: the same reading, profile and photoperiod always yield
the same report. Text rendering lives here too so alert bodies and API
payloads agree on wording and precision.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, Optional

from app.domain.photoperiod import DEFAULT_PHOTOPERIOD, Photoperiod
from app.domain.sensors.reading import SensorReading
from app.domain.vegetation_profile import VegetationProfile
from app.enums.common import DeviationDirection, Metric

ALERT_TITLE = "Farm Alert: Values Out of Range"


@dataclass(frozen=True)
class Deviation:
    """One metric outside its range."""

    metric: Metric
    direction: DeviationDirection
    magnitude: float

    def describe(self) -> str:
        return format_deviation(self)

    def to_dict(self) -> dict[str, Any]:
        return {
            "metric": self.metric.value,
            "direction": self.direction.value,
            "magnitude": round(self.magnitude, 1),
            "message": self.describe(),
        }


@dataclass(frozen=True)
class DeviationReport:
    """Ordered deviations (temperature, ground humidity, air humidity). Empty means in range."""

    deviations: tuple[Deviation, ...] = ()
    is_day: bool = True

    def __bool__(self) -> bool:
        return bool(self.deviations)

    def __len__(self) -> int:
        return len(self.deviations)

    def __iter__(self) -> Iterator[Deviation]:
        return iter(self.deviations)

    def __getitem__(self, index: int) -> Deviation:
        return self.deviations[index]

    @property
    def in_range(self) -> bool:
        return not self.deviations

    def to_dict(self) -> dict[str, Any]:
        return {
            "in_range": self.in_range,
            "is_day": self.is_day,
            "deviations": [d.to_dict() for d in self.deviations],
        }


EMPTY_REPORT = DeviationReport()


def _check(metric: Metric, value: float, low: float, high: float) -> Optional[Deviation]:
    if value < low:
        return Deviation(metric, DeviationDirection.TOO_LOW, low - value)
    if value > high:
        return Deviation(metric, DeviationDirection.TOO_HIGH, value - high)
    return None


def evaluate(
    reading: Optional[SensorReading],
    profile: Optional[VegetationProfile],
    photoperiod: Photoperiod = DEFAULT_PHOTOPERIOD,
) -> DeviationReport:
    """Evaluate ``reading`` against the day or night half of ``profile``.

    Returns an empty report when either input is missing.
    """
    if reading is None or profile is None:
        return EMPTY_REPORT

    is_day = photoperiod.is_day(reading.timestamp)
    thresholds = profile.thresholds_for(is_day)

    values = (
        (Metric.TEMPERATURE, reading.temperature),
        (Metric.GROUND_HUMIDITY, reading.ground_humidity),
        (Metric.AIR_HUMIDITY, reading.air_humidity),
    )
    found = []
    for metric, value in values:
        low, high = thresholds.range_for(metric)
        deviation = _check(metric, value, low, high)
        if deviation is not None:
            found.append(deviation)

    return DeviationReport(deviations=tuple(found), is_day=is_day)


def format_deviation(deviation: Deviation) -> str:
    """Render e.g. ``"Temperature is too high by 3.0°C. "``."""
    return (
        f"{deviation.metric.label} is too {deviation.direction.word} "
        f"by {deviation.magnitude:.1f}{deviation.metric.unit}. "
    )


def format_alert_body(report: DeviationReport) -> str:
    """One sentence per out-of-range metric, concatenated in report order."""
    return "".join(format_deviation(d) for d in report)


__all__ = [
    "ALERT_TITLE",
    "EMPTY_REPORT",
    "Deviation",
    "DeviationReport",
    "evaluate",
    "format_alert_body",
    "format_deviation",
]
