"""Repository for the ``Farm`` readings table."""

from __future__ import annotations

from app.domain.exceptions import MalformedRowError, ValidationError
from app.domain.sensors.reading import SensorReading
from infrastructure.database.postgrest_handler import PostgRESTHandler

FARM_TABLE = "Farm"


class ReadingRepository:
    """Repository providing typed access to farm sensor readings."""

    def __init__(self, backend: PostgRESTHandler, user_id: int | None = None) -> None:
        self._backend = backend
        self._user_id = user_id

    def get_latest(self) -> SensorReading | None:
        """Newest reading by ``dateTime``, or None when the table is empty.

        Raises:
            FetchError: Transport failure
            MalformedRowError: The newest row cannot be decoded
        """
        params = {"select": "*", "order": "dateTime.desc", "limit": "1"}
        if self._user_id is not None:
            params["UserID"] = f"eq.{self._user_id}"
        rows = self._backend.select(FARM_TABLE, params)
        if not rows:
            return None
        try:
            return SensorReading.from_row(rows[0])
        except ValidationError as exc:
            raise MalformedRowError(f"Malformed reading row: {exc}", detail=exc.detail) from exc
