"""
History and gallery records
===========================
Thin data models for the FarmHistory and FarmGallery backend tables.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from app.domain.exceptions import ValidationError
from app.domain.sensors.reading import measurement

_VIDEO_EXTENSIONS = (".mp4", ".mov", ".avi", ".webm")


@dataclass(frozen=True)
class HistoryEntry:
    """A reading the user chose to keep, with optional notes and picture."""

    farm_id: int | None
    temperature: float
    ground_humidity: float
    air_humidity: float
    picture_url: str = ""
    notes: str = ""
    recorded_at: str | None = None
    id: int | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> HistoryEntry:
        """Decode a ``FarmHistory`` row; measurements must be present and numeric."""
        if not isinstance(row, dict):
            raise ValidationError("History row must be a JSON object")
        return cls(
            id=row.get("id"),
            farm_id=row.get("farmId"),
            temperature=measurement(row, "temperature"),
            ground_humidity=measurement(row, "groundHumidity"),
            air_humidity=measurement(row, "airHumidity"),
            picture_url=row.get("pictureUrl") or "",
            notes=row.get("notes") or "",
            recorded_at=row.get("recordedAt"),
        )

    def to_row(self) -> dict[str, Any]:
        row: dict[str, Any] = {
            "farmId": self.farm_id,
            "temperature": self.temperature,
            "groundHumidity": self.ground_humidity,
            "airHumidity": self.air_humidity,
            "pictureUrl": self.picture_url,
            "notes": self.notes,
        }
        if self.recorded_at is not None:
            row["recordedAt"] = self.recorded_at
        return row

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "farm_id": self.farm_id,
            "temperature": self.temperature,
            "ground_humidity": self.ground_humidity,
            "air_humidity": self.air_humidity,
            "picture_url": self.picture_url,
            "notes": self.notes,
            "recorded_at": self.recorded_at,
        }


@dataclass(frozen=True)
class GalleryItem:
    """A picture or video uploaded for a user's farm."""

    uri: str
    user_id: int | None = None
    date: str | None = None
    id: int | None = None

    @property
    def is_video(self) -> bool:
        lower = (self.uri or "").lower()
        return any(ext in lower for ext in _VIDEO_EXTENSIONS)

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> GalleryItem:
        return cls(uri=row.get("URI") or "", user_id=row.get("UserID"), date=row.get("date"), id=row.get("id"))

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "user_id": self.user_id, "uri": self.uri, "date": self.date, "is_video": self.is_video}
