"""
History Schemas
===============

Pydantic models for history request validation.
"""

from pydantic import BaseModel, ConfigDict, Field


class CreateHistoryEntryRequest(BaseModel):
    """Schema for saving the current reading to the history log."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"notes": "Leaves curling after the heat wave", "picture_url": ""},
        }
    )

    notes: str = Field(default="", max_length=2000, description="Free-form notes")
    picture_url: str = Field(default="", max_length=2048, description="URL of an already uploaded picture")
