"""
Alert State
===========
Deduplication state of the monitoring loop: at most one alert per distinct
reading timestamp.

The dedup key is the raw timestamp string. Two readings sharing a timestamp
are treated as the same reading.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class AlertState:
    last_seen_timestamp: str = ""
    notified: bool = False

    def observe(self, timestamp: str) -> bool:
        """Record the timestamp of a fetched reading.

        Returns True when it differs from the previous one, which re-opens
        the alert window.
        """
        if timestamp == self.last_seen_timestamp:
            return False
        self.last_seen_timestamp = timestamp
        self.notified = False
        return True

    def should_alert(self, has_deviations: bool) -> bool:
        return has_deviations and not self.notified

    def mark_notified(self) -> None:
        self.notified = True

    def to_dict(self) -> dict[str, Any]:
        return {"last_seen_timestamp": self.last_seen_timestamp, "notified": self.notified}
