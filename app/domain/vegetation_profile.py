"""
Vegetation Profile Value Object
===============================
Immutable value object holding the acceptable day and night ranges of a crop.

Following Domain-Driven Design (DDD), this is a value object:
- Immutable (frozen dataclass)
- Validates its own invariants (every min must not exceed its max)
- Can be freely shared between the monitoring loop and the API
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from typing import Any

from app.domain.exceptions import ValidationError
from app.enums.common import Metric

# Python attribute -> backend (Vegetationtbl) column
WIRE_FIELDS: dict[str, str] = {
    "day_temp_min": "dayTempMin",
    "day_temp_max": "dayTempMax",
    "night_temp_min": "nightTempMin",
    "night_temp_max": "nightTempMax",
    "day_ground_humid_min": "dayGroundHumidMin",
    "day_ground_humid_max": "dayGroundHumidMax",
    "night_ground_humid_min": "nightGroundHumidMin",
    "night_ground_humid_max": "nightGroundHumidMax",
    "day_air_humid_min": "dayAirHumidMin",
    "day_air_humid_max": "dayAirHumidMax",
    "night_air_humid_min": "nightAirHumidMin",
    "night_air_humid_max": "nightAirHumidMax",
}

THRESHOLD_FIELDS: tuple[str, ...] = tuple(WIRE_FIELDS)


@dataclass(frozen=True)
class ThresholdSet:
    """The six bounds in force for one half of the day."""

    temp_min: float
    temp_max: float
    ground_humid_min: float
    ground_humid_max: float
    air_humid_min: float
    air_humid_max: float

    def range_for(self, metric: Metric) -> tuple[float, float]:
        if metric is Metric.TEMPERATURE:
            return self.temp_min, self.temp_max
        if metric is Metric.GROUND_HUMIDITY:
            return self.ground_humid_min, self.ground_humid_max
        return self.air_humid_min, self.air_humid_max


@dataclass(frozen=True)
class VegetationProfile:
    """
    Named set of twelve thresholds: {day, night} x {temp, ground, air} x {min, max}.

    Attributes:
        id: Backend identifier, None for a profile that was never persisted
        name: Display name (e.g. "Tomato")
        day_*/night_*: Bounds in °C for temperature and % for humidity
    """

    name: str
    day_temp_min: float
    day_temp_max: float
    night_temp_min: float
    night_temp_max: float
    day_ground_humid_min: float
    day_ground_humid_max: float
    night_ground_humid_min: float
    night_ground_humid_max: float
    day_air_humid_min: float
    day_air_humid_max: float
    night_air_humid_min: float
    night_air_humid_max: float
    id: int | None = None

    def __post_init__(self):
        """Normalize thresholds to float and validate every min/max pair."""
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValidationError("Vegetation profile name must not be empty")

        for key in THRESHOLD_FIELDS:
            value = getattr(self, key)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValidationError(f"{key} must be a number, got {value!r}", detail={"field": key})
            # frozen dataclass requires object.__setattr__
            object.__setattr__(self, key, float(value))

        for prefix in ("day_temp", "night_temp", "day_ground_humid", "night_ground_humid", "day_air_humid", "night_air_humid"):
            low = getattr(self, f"{prefix}_min")
            high = getattr(self, f"{prefix}_max")
            if low > high:
                raise ValidationError(
                    f"{prefix}_min ({low}) must not exceed {prefix}_max ({high})",
                    detail={"field": f"{prefix}_min"},
                )

    def thresholds_for(self, is_day: bool) -> ThresholdSet:
        """Return the day or night half of the profile."""
        side = "day" if is_day else "night"
        return ThresholdSet(
            temp_min=getattr(self, f"{side}_temp_min"),
            temp_max=getattr(self, f"{side}_temp_max"),
            ground_humid_min=getattr(self, f"{side}_ground_humid_min"),
            ground_humid_max=getattr(self, f"{side}_ground_humid_max"),
            air_humid_min=getattr(self, f"{side}_air_humid_min"),
            air_humid_max=getattr(self, f"{side}_air_humid_max"),
        )

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to dictionary format.

        Returns:
            Dictionary with snake_case field names as keys
        """
        return asdict(self)

    def to_row(self) -> dict[str, Any]:
        """
        Convert to the backend column format.

        The id is omitted for new profiles so the backend assigns one.
        """
        row: dict[str, Any] = {"name": self.name}
        for key, column in WIRE_FIELDS.items():
            row[column] = getattr(self, key)
        if self.id is not None:
            row["id"] = self.id
        return row

    @staticmethod
    def from_dict(data: dict[str, Any]) -> VegetationProfile:
        """
        Create from dictionary.

        Handles both snake_case (API) and camelCase (backend) keys.

        Args:
            data: Dictionary with profile values

        Returns:
            VegetationProfile instance

        Raises:
            ValidationError: When a threshold is missing or invalid

        Examples:
            >>> VegetationProfile.from_dict({"name": "Basil", "dayTempMin": 18, ...})
        """
        if not isinstance(data, dict):
            raise ValidationError("Vegetation profile must be a JSON object")

        values: dict[str, Any] = {}
        for key, column in WIRE_FIELDS.items():
            value = data.get(key, data.get(column))
            if value is None:
                raise ValidationError(f"Missing threshold '{key}'", detail={"field": key})
            try:
                values[key] = float(value)
            except (TypeError, ValueError):
                raise ValidationError(f"{key} must be a number, got {value!r}", detail={"field": key}) from None

        raw_id = data.get("id")
        return VegetationProfile(
            name=data.get("name") or "",
            id=int(raw_id) if raw_id is not None else None,
            **values,
        )

    def with_id(self, profile_id: int | None) -> VegetationProfile:
        """Create new instance bound to a backend id."""
        return replace(self, id=profile_id)

    def merge(self, other: dict[str, Any]) -> VegetationProfile:
        """
        Create new instance by merging with partial updates.

        Args:
            other: Dictionary with snake_case updates (None values are ignored)

        Returns:
            New VegetationProfile instance with merged values
        """
        known = {f.name for f in fields(self)}
        current = self.to_dict()
        current.update({k: v for k, v in other.items() if k in known and v is not None})
        return VegetationProfile.from_dict(current)
