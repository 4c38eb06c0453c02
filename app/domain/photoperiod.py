"""Photoperiod domain model.

Classifies a reading timestamp as day or night so the matching half of a
vegetation profile can be selected.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

DAY_START_HOUR = 6
DAY_END_HOUR = 18

# Only "YYYY-MM-DDTHH:MM:SS" is read; offsets and fractions are ignored.
_TIMESTAMP_PREFIX_LEN = 19
_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S"


def _parse_hour(timestamp: Optional[str]) -> Optional[int]:
    """Return the wall-clock hour of an ISO-8601 timestamp, or None if unreadable."""
    if not isinstance(timestamp, str) or len(timestamp) < _TIMESTAMP_PREFIX_LEN:
        return None
    try:
        parsed = datetime.strptime(timestamp[:_TIMESTAMP_PREFIX_LEN], _TIMESTAMP_FORMAT)
    except ValueError:
        return None
    return parsed.hour


@dataclass(frozen=True)
class Photoperiod:
    """Fixed day window expressed in whole hours.

    - day_start_hour: first hour (inclusive) counted as day.
    - day_end_hour: first hour (exclusive) counted as night again.
    """

    day_start_hour: int = DAY_START_HOUR
    day_end_hour: int = DAY_END_HOUR

    def __post_init__(self) -> None:
        for value in (self.day_start_hour, self.day_end_hour):
            if not (0 <= value <= 23):
                raise ValueError("hour must be between 0 and 23")

    def is_day_hour(self, hour: int) -> bool:
        start, end = self.day_start_hour, self.day_end_hour
        if start <= end:
            return start <= hour < end
        # wraps midnight
        return hour >= start or hour < end

    def is_day(self, timestamp: Optional[str]) -> bool:
        """Classify a timestamp; unparseable input counts as day."""
        hour = _parse_hour(timestamp)
        if hour is None:
            return True
        return self.is_day_hour(hour)


DEFAULT_PHOTOPERIOD = Photoperiod()


def is_daytime(timestamp: Optional[str]) -> bool:
    """Return True when the local hour of ``timestamp`` is in [06:00, 18:00).

    ``None`` and malformed strings fall back to daytime.
    """
    return DEFAULT_PHOTOPERIOD.is_day(timestamp)


__all__ = ["DAY_END_HOUR", "DAY_START_HOUR", "DEFAULT_PHOTOPERIOD", "Photoperiod", "is_daytime"]
