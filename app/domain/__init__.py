"""
Domain Value Objects Package
=============================
Contains immutable value objects and pure domain logic.

Value objects are immutable objects that represent descriptive aspects of the domain
with no conceptual identity. They are defined only by their attributes.
"""

from .alert_state import AlertState
from .history import GalleryItem, HistoryEntry
from .photoperiod import Photoperiod, is_daytime
from .range_evaluator import Deviation, DeviationReport, evaluate, format_alert_body
from .sensors.reading import SensorReading
from .vegetation_profile import ThresholdSet, VegetationProfile

__all__ = [
    # Alerting
    "AlertState",
    "Deviation",
    "DeviationReport",
    "evaluate",
    "format_alert_body",
    # Day / night
    "Photoperiod",
    "is_daytime",
    # Records
    "GalleryItem",
    "HistoryEntry",
    "SensorReading",
    # Profiles
    "ThresholdSet",
    "VegetationProfile",
]
