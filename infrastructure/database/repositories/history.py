"""Repository for saved history entries and the media gallery."""

from __future__ import annotations

import logging

from app.domain.exceptions import ValidationError
from app.domain.history import GalleryItem, HistoryEntry
from infrastructure.database.postgrest_handler import PostgRESTHandler

logger = logging.getLogger(__name__)

HISTORY_TABLE = "FarmHistory"
GALLERY_TABLE = "FarmGallery"


class HistoryRepository:
    """Repository providing typed access to ``FarmHistory`` rows."""

    def __init__(self, backend: PostgRESTHandler) -> None:
        self._backend = backend

    def list_entries(self, farm_id: int | None = None) -> list[HistoryEntry]:
        """Entries newest first, optionally limited to one farm.

        Rows with missing or non-numeric measurements are logged and skipped.
        """
        params = {"select": "*", "order": "recordedAt.desc"}
        if farm_id is not None:
            params["farmId"] = f"eq.{farm_id}"
        entries = []
        for row in self._backend.select(HISTORY_TABLE, params):
            try:
                entries.append(HistoryEntry.from_row(row))
            except ValidationError as exc:
                logger.warning("Skipping history row %s: %s", row.get("id") if isinstance(row, dict) else None, exc)
        return entries

    def create_entry(self, entry: HistoryEntry) -> None:
        self._backend.insert(HISTORY_TABLE, entry.to_row())


class GalleryRepository:
    """Repository providing read access to ``FarmGallery`` rows."""

    def __init__(self, backend: PostgRESTHandler) -> None:
        self._backend = backend

    def list_items(self, user_id: int) -> list[GalleryItem]:
        params = {"select": "*", "UserID": f"eq.{user_id}", "order": "date.desc"}
        return [GalleryItem.from_row(row) for row in self._backend.select(GALLERY_TABLE, params)]
