"""
Schemas Module
==============

This module provides Pydantic models for request validation and event payloads.
"""

from app.schemas.events import (
    AlertRaisedPayload,
    DataRefreshedPayload,
    FetchFailedPayload,
    HistoryEntryPayload,
    VegetationProfilePayload,
)
from app.schemas.history import CreateHistoryEntryRequest
from app.schemas.vegetation import (
    CreateVegetationProfileRequest,
    SetActiveProfileRequest,
    UpdateVegetationProfileRequest,
)

__all__ = [
    # Events
    "AlertRaisedPayload",
    "DataRefreshedPayload",
    "FetchFailedPayload",
    "HistoryEntryPayload",
    "VegetationProfilePayload",
    # Requests
    "CreateHistoryEntryRequest",
    "CreateVegetationProfileRequest",
    "SetActiveProfileRequest",
    "UpdateVegetationProfileRequest",
]
