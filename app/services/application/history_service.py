"""
History Service
===============
Saves the reading currently shown by the monitor to the FarmHistory log and
lists saved entries.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.domain.exceptions import ConflictError
from app.domain.history import HistoryEntry
from app.enums.events import HistoryEvent
from app.schemas.events import HistoryEntryPayload
from app.utils.time import iso_now

if TYPE_CHECKING:
    from app.services.application.monitoring_service import FarmMonitoringService
    from app.utils.event_bus import EventBus
    from infrastructure.database.repositories.history import HistoryRepository

logger = logging.getLogger(__name__)


class HistoryService:
    def __init__(
        self,
        history_repo: "HistoryRepository",
        monitoring_service: "FarmMonitoringService",
        event_bus: "EventBus" | None = None,
    ):
        self._repo = history_repo
        self._monitoring = monitoring_service
        self._event_bus = event_bus

    def save_current_reading(self, notes: str = "", picture_url: str = "") -> HistoryEntry:
        """
        Persist the latest fetched reading with optional notes and picture.

        Raises:
            ConflictError: No reading has been fetched yet
        """
        reading, _ = self._monitoring.latest_snapshot()
        if reading is None:
            raise ConflictError("No reading has been fetched yet")

        entry = HistoryEntry(
            farm_id=reading.farm_id,
            temperature=reading.temperature,
            ground_humidity=reading.ground_humidity,
            air_humidity=reading.air_humidity,
            picture_url=picture_url,
            notes=notes,
            recorded_at=iso_now(),
        )
        self._repo.create_entry(entry)
        logger.info("Saved history entry for farm %s", entry.farm_id)

        if self._event_bus is not None:
            self._event_bus.publish(
                HistoryEvent.ENTRY_SAVED,
                HistoryEntryPayload(
                    farm_id=entry.farm_id,
                    temperature=entry.temperature,
                    ground_humidity=entry.ground_humidity,
                    air_humidity=entry.air_humidity,
                    recorded_at=entry.recorded_at,
                ),
            )
        return entry

    def list_entries(self, farm_id: int | None = None) -> list[HistoryEntry]:
        return self._repo.list_entries(farm_id)
