"""
Vegetation Service
==================
Manages vegetation profiles and the user's active selection.

Returns immutable VegetationProfile domain objects. This service is the
profile store of the monitoring loop:
- Profile CRUD against the Vegetationtbl table
- Active profile selection recorded in UserVegetation
- Cached active profile, lazily loaded on first use
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any

from app.domain.exceptions import MalformedRowError, NotFoundError, SmartFarmError
from app.domain.vegetation_profile import VegetationProfile
from app.enums.events import VegetationEvent
from app.schemas.events import VegetationProfilePayload
from app.utils.time import iso_now

if TYPE_CHECKING:
    from app.utils.event_bus import EventBus
    from infrastructure.database.repositories.vegetation import VegetationRepository

logger = logging.getLogger(__name__)


class VegetationService:
    """
    Profile CRUD plus the active-profile cache.

    A backend failure while loading the active profile is logged and treated
    as "no active profile"; the next call tries again. A selected profile whose
    row is invalid is cached as "no active profile" and reported through
    ``active_profile_error`` until another profile is selected or the cache is
    reloaded.
    """

    def __init__(
        self,
        vegetation_repo: "VegetationRepository",
        user_id: int,
        event_bus: "EventBus" | None = None,
    ):
        self._repo = vegetation_repo
        self.user_id = user_id
        self._event_bus = event_bus

        self._lock = threading.Lock()
        self._active: VegetationProfile | None = None
        self._active_loaded = False
        self._active_error: str | None = None

    # --- Profiles ---

    def list_profiles(self) -> list[VegetationProfile]:
        return self._repo.list_profiles()

    def get_profile(self, profile_id: int) -> VegetationProfile:
        profile = self._repo.get_profile(profile_id)
        if profile is None:
            raise NotFoundError(f"Vegetation profile {profile_id} not found", detail={"profile_id": profile_id})
        return profile

    def create_profile(self, data: dict[str, Any]) -> VegetationProfile:
        """
        Validate and persist a new profile.

        The backend does not echo the created row, so the returned profile
        carries no id.

        Raises:
            ValidationError: A threshold is missing or a min exceeds its max
        """
        profile = VegetationProfile.from_dict(data).with_id(None)
        self._repo.create_profile(profile)
        logger.info("Created vegetation profile %s", profile.name)
        self._publish(VegetationEvent.PROFILE_CREATED, profile)
        return profile

    def update_profile(self, profile_id: int, updates: dict[str, Any]) -> VegetationProfile:
        """Apply a partial update; None values keep the stored value."""
        current = self.get_profile(profile_id)
        updated = current.merge(updates).with_id(profile_id)
        self._repo.update_profile(profile_id, updated)
        logger.info("Updated vegetation profile %s (%s)", profile_id, updated.name)

        with self._lock:
            if self._active is not None and self._active.id == profile_id:
                self._active = updated
        self._publish(VegetationEvent.PROFILE_UPDATED, updated)
        return updated

    # --- Active profile ---

    @property
    def active_profile_error(self) -> str | None:
        """Why the selected profile could not be used, or None."""
        with self._lock:
            return self._active_error

    def get_active_profile(self) -> VegetationProfile | None:
        with self._lock:
            if self._active_loaded:
                return self._active

        return self._load_active_profile()

    def set_active_profile(self, profile_id: int) -> VegetationProfile:
        """Select the profile the monitor evaluates against."""
        profile = self.get_profile(profile_id)
        self._repo.record_active_profile(self.user_id, profile_id, iso_now())
        with self._lock:
            self._active = profile
            self._active_loaded = True
            self._active_error = None
        logger.info("Active vegetation profile is now %s (%s)", profile.name, profile_id)
        self._publish(VegetationEvent.ACTIVE_PROFILE_CHANGED, profile)
        return profile

    def reload_active_profile(self) -> VegetationProfile | None:
        """Drop the cached profile and read the selection from the backend again."""
        with self._lock:
            self._active = None
            self._active_loaded = False
            self._active_error = None
        return self.get_active_profile()

    def _load_active_profile(self) -> VegetationProfile | None:
        error = None
        try:
            profile_id = self._repo.get_active_profile_id(self.user_id)
            profile = self._repo.get_profile(profile_id) if profile_id is not None else None
        except MalformedRowError as exc:
            logger.error("Active vegetation profile is invalid, alerts are off until it is fixed: %s", exc)
            profile, error = None, str(exc)
        except SmartFarmError as exc:
            logger.warning("Could not load active vegetation profile: %s", exc)
            return None

        if profile is None and error is None:
            logger.info("No active vegetation profile for user %s", self.user_id)
        with self._lock:
            self._active = profile
            self._active_loaded = True
            self._active_error = error
        return profile

    def _publish(self, event: VegetationEvent, profile: VegetationProfile) -> None:
        if self._event_bus is None:
            return
        self._event_bus.publish(event, VegetationProfilePayload(profile_id=profile.id, name=profile.name))


__all__ = ["VegetationService"]
