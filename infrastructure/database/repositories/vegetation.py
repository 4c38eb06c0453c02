"""Repository for vegetation profiles and the user's active selection."""

from __future__ import annotations

import logging
from typing import Any

from app.domain.exceptions import MalformedRowError, ValidationError
from app.domain.vegetation_profile import VegetationProfile
from infrastructure.database.postgrest_handler import PostgRESTHandler

logger = logging.getLogger(__name__)

VEGETATION_TABLE = "Vegetationtbl"
USER_VEGETATION_TABLE = "UserVegetation"


class VegetationRepository:
    """Repository providing typed access to vegetation profiles."""

    def __init__(self, backend: PostgRESTHandler) -> None:
        self._backend = backend

    # --- Profiles ---

    def list_profiles(self) -> list[VegetationProfile]:
        """Every decodable profile; invalid rows (nulls, min > max) are logged and skipped."""
        profiles = []
        for row in self._backend.select(VEGETATION_TABLE, {"select": "*"}):
            try:
                profiles.append(self._decode(row))
            except MalformedRowError as exc:
                logger.warning("Skipping vegetation row %s: %s", row.get("id"), exc)
        return profiles

    def get_profile(self, profile_id: int) -> VegetationProfile | None:
        """
        Raises:
            MalformedRowError: The stored row is not a valid profile
        """
        rows = self._backend.select(VEGETATION_TABLE, {"select": "*", "id": f"eq.{profile_id}"})
        return self._decode(rows[0]) if rows else None

    def create_profile(self, profile: VegetationProfile) -> None:
        self._backend.insert(VEGETATION_TABLE, profile.with_id(None).to_row())

    def update_profile(self, profile_id: int, profile: VegetationProfile) -> None:
        row = profile.to_row()
        row.pop("id", None)
        self._backend.update(VEGETATION_TABLE, {"id": f"eq.{profile_id}"}, row)

    # --- Active selection ---

    def get_active_profile_id(self, user_id: int) -> int | None:
        """VegetationID of the user's most recent selection."""
        rows = self._backend.select(
            USER_VEGETATION_TABLE,
            {"select": "*", "UserID": f"eq.{user_id}", "order": "date.desc", "limit": "1"},
        )
        if not rows:
            return None
        vegetation_id = rows[0].get("VegetationID")
        return int(vegetation_id) if vegetation_id is not None else None

    def record_active_profile(self, user_id: int, profile_id: int, date: str) -> None:
        self._backend.insert(
            USER_VEGETATION_TABLE,
            {"UserID": user_id, "VegetationID": profile_id, "date": date},
        )

    @staticmethod
    def _decode(row: dict[str, Any]) -> VegetationProfile:
        try:
            return VegetationProfile.from_dict(row)
        except ValidationError as exc:
            raise MalformedRowError(
                f"Malformed vegetation row: {exc}", detail={"profile_id": row.get("id"), **exc.detail}
            ) from exc
