"""
Reading Source
==============
Adapts the Farm table repository to the monitoring loop's reading-source port.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from app.domain.exceptions import SmartFarmError
from app.domain.sensors.reading import SensorReading
from app.utils.result import Result

if TYPE_CHECKING:
    from infrastructure.database.repositories.readings import ReadingRepository

logger = logging.getLogger(__name__)


class BackendReadingSource:
    """Fetches the newest reading and reports failures as a ``Result``."""

    def __init__(self, reading_repo: "ReadingRepository"):
        self._repo = reading_repo

    def fetch_latest_reading(self) -> Result[Optional[SensorReading]]:
        try:
            return Result.ok(self._repo.get_latest())
        except SmartFarmError as exc:
            return Result.fail(exc)
