"""Repository facades exposing typed accessors over the PostgREST backend."""

from infrastructure.database.repositories.history import GalleryRepository, HistoryRepository
from infrastructure.database.repositories.readings import ReadingRepository
from infrastructure.database.repositories.vegetation import VegetationRepository

__all__ = [
    "GalleryRepository",
    "HistoryRepository",
    "ReadingRepository",
    "VegetationRepository",
]
