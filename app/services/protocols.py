"""
Service protocols (structural typing interfaces).

Protocols let consumer services declare the *minimal* surface they depend on
without importing the concrete class, breaking circular imports and making
tests trivially mockable.

Usage
-----
In a consumer service::

    from __future__ import annotations
    from typing import TYPE_CHECKING
    if TYPE_CHECKING:
        from app.services.protocols import ProfileStore

    class FarmMonitoringService:
        def __init__(self, profile_store: "ProfileStore", ...): ...

At runtime the concrete ``VegetationService`` already satisfies the protocol
via structural subtyping - no explicit inheritance needed.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from app.domain.sensors.reading import SensorReading
from app.domain.vegetation_profile import VegetationProfile
from app.utils.result import Result


@runtime_checkable
class ReadingSource(Protocol):
    """Supplies the most recent sensor reading of the monitored farm."""

    def fetch_latest_reading(self) -> Result[Optional[SensorReading]]:
        """Return the newest reading (``None`` when there is none yet) or the fetch error."""
        ...


@runtime_checkable
class ProfileStore(Protocol):
    """Read-only view over the active vegetation profile."""

    def get_active_profile(self) -> Optional[VegetationProfile]:
        """Return the profile to evaluate against, or ``None`` when none is active."""
        ...


@runtime_checkable
class AlertSink(Protocol):
    """Presents alerts to the user."""

    def emit_alert(self, title: str, body: str, profile_name: str) -> None:
        ...

    def report_fetch_failure(self, message: str) -> None:
        """Surface a transient, non-alert failure message."""
        ...


@runtime_checkable
class RefreshSink(Protocol):
    """Told after every successful fetch so views can reload."""

    def signal_data_refreshed(self) -> None:
        ...
