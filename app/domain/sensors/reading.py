"""
Sensor Reading Value Object
============================
Immutable value object representing the latest snapshot of a farm unit.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from app.domain.exceptions import ValidationError


def measurement(row: dict[str, Any], key: str) -> float:
    """Numeric column ``key`` of a backend row; missing, null or non-numeric raises ``ValidationError``."""
    value = row.get(key)
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"Field '{key}' is missing", detail={"field": key})
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Field '{key}' must be numeric, got {value!r}", detail={"field": key}) from None


@dataclass(frozen=True)
class SensorReading:
    """
    Immutable sensor reading value object.
    Represents a single point-in-time reading of temperature, ground humidity
    and air humidity for one farm unit.
    """

    temperature: float
    ground_humidity: float
    air_humidity: float
    timestamp: str

    # Optional metadata carried from the backend row
    farm_id: int | None = None
    user_id: int | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> SensorReading:
        """Build a reading from a ``Farm`` table row."""
        if not isinstance(row, dict):
            raise ValidationError("Reading row must be a JSON object")
        timestamp = row.get("dateTime")
        return cls(
            temperature=measurement(row, "temp"),
            ground_humidity=measurement(row, "groundHumid"),
            air_humidity=measurement(row, "airHumid"),
            timestamp=str(timestamp) if timestamp is not None else "",
            farm_id=row.get("id"),
            user_id=row.get("UserID"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary"""
        return {
            "temperature": self.temperature,
            "ground_humidity": self.ground_humidity,
            "air_humidity": self.air_humidity,
            "timestamp": self.timestamp,
            "farm_id": self.farm_id,
            "user_id": self.user_id,
        }
