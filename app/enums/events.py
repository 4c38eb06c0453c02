from enum import Enum
from typing import TypeAlias


class MonitoringEvent(str, Enum):
    """Events published by the farm monitoring loop."""

    DATA_REFRESHED = "data_refreshed"
    ALERT_RAISED = "alert_raised"
    FETCH_FAILED = "fetch_failed"


class VegetationEvent(str, Enum):
    PROFILE_CREATED = "vegetation_profile_created"
    PROFILE_UPDATED = "vegetation_profile_updated"
    ACTIVE_PROFILE_CHANGED = "active_vegetation_changed"


class HistoryEvent(str, Enum):
    ENTRY_SAVED = "history_entry_saved"


EventType: TypeAlias = MonitoringEvent | VegetationEvent | HistoryEvent
