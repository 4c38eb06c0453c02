"""
Gallery Service
===============
Read-only listing of the pictures and videos uploaded for the user's farm.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from app.domain.history import GalleryItem

if TYPE_CHECKING:
    from infrastructure.database.repositories.history import GalleryRepository


class GalleryService:
    def __init__(self, gallery_repo: "GalleryRepository", user_id: int):
        self._repo = gallery_repo
        self.user_id = user_id

    def list_items(self, media: str | None = None) -> list[GalleryItem]:
        """Newest first; ``media`` may be ``"video"`` or ``"image"`` to filter."""
        items = self._repo.list_items(self.user_id)
        if media == "video":
            return [item for item in items if item.is_video]
        if media == "image":
            return [item for item in items if not item.is_video]
        return items
