"""
Event Payloads
==============

Typed payloads published on the EventBus. Subscribers receive ``model_dump()``.
"""

from pydantic import BaseModel, Field

from app.enums.common import NotificationSeverity


class DataRefreshedPayload(BaseModel):
    """Published after every successful fetch, alert or not."""

    schema_version: int = Field(default=1)
    refreshed_at: str
    refresh_count: int = Field(default=0, ge=0)


class AlertRaisedPayload(BaseModel):
    """Published when a reading leaves the active profile's range."""

    schema_version: int = Field(default=1)
    title: str
    body: str
    profile_name: str
    severity: NotificationSeverity = NotificationSeverity.WARNING
    raised_at: str


class FetchFailedPayload(BaseModel):
    """Published once per streak of failed fetches."""

    schema_version: int = Field(default=1)
    message: str
    failed_at: str


class VegetationProfilePayload(BaseModel):
    """Published when a profile is created, updated or activated."""

    schema_version: int = Field(default=1)
    profile_id: int | None = None
    name: str


class HistoryEntryPayload(BaseModel):
    """Published when a reading is saved to the history log."""

    schema_version: int = Field(default=1)
    farm_id: int | None = None
    temperature: float
    ground_humidity: float
    air_humidity: float
    recorded_at: str
