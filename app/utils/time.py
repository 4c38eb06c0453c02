"""UTC clock helpers.

Timestamps written by the monitor (history entries, inbox messages, event
payloads, active-profile selections) are aware UTC datetimes rendered as
ISO-8601 with a ``+00:00`` offset. Reading timestamps coming from the farm
are left untouched; see ``app.domain.photoperiod`` for how they are read.
"""

from __future__ import annotations

from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def iso_now(*, timespec: str | None = None) -> str:
    """``utc_now()`` as ISO-8601, e.g. ``2024-06-01T14:00:00.123456+00:00``."""
    return utc_now().isoformat(timespec=timespec) if timespec else utc_now().isoformat()


def iso_or_none(moment: datetime | None) -> str | None:
    return moment.isoformat() if moment is not None else None
