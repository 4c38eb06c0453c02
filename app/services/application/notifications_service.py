"""
Notification Service
====================

In-app delivery of farm alerts.

Features:
- Bounded in-memory inbox, newest first
- Out-of-range alerts and transient backend-failure messages
- EventBus fan-out so other listeners (push gateways, dashboards) can react
- Data-refresh signal published after every successful fetch
"""
from __future__ import annotations

import itertools
import logging
import threading
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Optional

from app.enums import MonitoringEvent, NotificationSeverity
from app.schemas.events import AlertRaisedPayload, DataRefreshedPayload, FetchFailedPayload
from app.utils.event_bus import EventBus
from app.utils.time import iso_now

logger = logging.getLogger(__name__)

DEFAULT_INBOX_SIZE = 100


@dataclass(frozen=True)
class InboxMessage:
    id: int
    kind: str
    title: str
    message: str
    severity: NotificationSeverity
    profile_name: str | None = None
    created_at: str = field(default_factory=iso_now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "kind": self.kind,
            "title": self.title,
            "message": self.message,
            "severity": self.severity.value,
            "profile_name": self.profile_name,
            "created_at": self.created_at,
        }


class NotificationsService:
    """
    Alert sink of the monitoring loop.

    Keeps the most recent messages in memory and republishes them on the
    EventBus.
    """

    def __init__(self, event_bus: Optional[EventBus] = None, inbox_size: int = DEFAULT_INBOX_SIZE):
        """
        Initialize NotificationsService.

        Args:
            event_bus: Bus to publish alerts on (defaults to the shared singleton).
            inbox_size: How many messages to keep before the oldest are dropped.
        """
        self._event_bus = event_bus or EventBus()
        self._inbox: deque[InboxMessage] = deque(maxlen=max(1, int(inbox_size)))
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    # --- Alert sink ---

    def emit_alert(self, title: str, body: str, profile_name: str) -> None:
        """Store and publish an out-of-range alert."""
        message = self._store("alert", title, body, NotificationSeverity.WARNING, profile_name)
        logger.warning("%s [%s] %s", title, profile_name, body.strip())
        self._event_bus.publish(
            MonitoringEvent.ALERT_RAISED,
            AlertRaisedPayload(
                title=title,
                body=body,
                profile_name=profile_name,
                severity=message.severity,
                raised_at=message.created_at,
            ),
        )

    def report_fetch_failure(self, message: str) -> None:
        """Store and publish a transient backend-failure message."""
        stored = self._store("fetch_failure", "Farm data unavailable", message, NotificationSeverity.INFO)
        self._event_bus.publish(
            MonitoringEvent.FETCH_FAILED,
            FetchFailedPayload(message=message, failed_at=stored.created_at),
        )

    # --- Inbox ---

    def list_messages(self, limit: int | None = None, kind: str | None = None) -> list[dict[str, Any]]:
        """Messages newest first, optionally filtered by kind."""
        with self._lock:
            messages = list(reversed(self._inbox))
        if kind:
            messages = [m for m in messages if m.kind == kind]
        if limit is not None:
            messages = messages[: max(0, limit)]
        return [m.to_dict() for m in messages]

    def clear(self) -> int:
        with self._lock:
            count = len(self._inbox)
            self._inbox.clear()
        return count

    def _store(
        self,
        kind: str,
        title: str,
        text: str,
        severity: NotificationSeverity,
        profile_name: str | None = None,
    ) -> InboxMessage:
        with self._lock:
            message = InboxMessage(
                id=next(self._ids),
                kind=kind,
                title=title,
                message=text,
                severity=severity,
                profile_name=profile_name,
            )
            self._inbox.append(message)
        return message


class EventBusRefreshSink:
    """Refresh sink that publishes ``MonitoringEvent.DATA_REFRESHED``."""

    def __init__(self, event_bus: Optional[EventBus] = None):
        self._event_bus = event_bus or EventBus()
        self._count = 0

    @property
    def refresh_count(self) -> int:
        return self._count

    def signal_data_refreshed(self) -> None:
        self._count += 1
        self._event_bus.publish(
            MonitoringEvent.DATA_REFRESHED,
            DataRefreshedPayload(refreshed_at=iso_now(), refresh_count=self._count),
        )


__all__ = ["NotificationsService", "EventBusRefreshSink", "InboxMessage"]
