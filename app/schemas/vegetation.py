"""
Vegetation Schemas
==================

Pydantic models for vegetation profile request validation.

Threshold fields accept both snake_case and the backend's camelCase names.
"""

from pydantic import BaseModel, ConfigDict, Field

_THRESHOLD = dict(ge=-100.0, le=200.0)


class CreateVegetationProfileRequest(BaseModel):
    """Schema for creating a vegetation profile."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str = Field(..., min_length=1, max_length=100, description="Crop name, e.g. Tomato")
    day_temp_min: float = Field(..., alias="dayTempMin", **_THRESHOLD)
    day_temp_max: float = Field(..., alias="dayTempMax", **_THRESHOLD)
    night_temp_min: float = Field(..., alias="nightTempMin", **_THRESHOLD)
    night_temp_max: float = Field(..., alias="nightTempMax", **_THRESHOLD)
    day_ground_humid_min: float = Field(..., alias="dayGroundHumidMin", **_THRESHOLD)
    day_ground_humid_max: float = Field(..., alias="dayGroundHumidMax", **_THRESHOLD)
    night_ground_humid_min: float = Field(..., alias="nightGroundHumidMin", **_THRESHOLD)
    night_ground_humid_max: float = Field(..., alias="nightGroundHumidMax", **_THRESHOLD)
    day_air_humid_min: float = Field(..., alias="dayAirHumidMin", **_THRESHOLD)
    day_air_humid_max: float = Field(..., alias="dayAirHumidMax", **_THRESHOLD)
    night_air_humid_min: float = Field(..., alias="nightAirHumidMin", **_THRESHOLD)
    night_air_humid_max: float = Field(..., alias="nightAirHumidMax", **_THRESHOLD)


class UpdateVegetationProfileRequest(BaseModel):
    """Schema for a partial profile update; omitted fields keep their value."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str | None = Field(default=None, min_length=1, max_length=100)
    day_temp_min: float | None = Field(default=None, alias="dayTempMin", **_THRESHOLD)
    day_temp_max: float | None = Field(default=None, alias="dayTempMax", **_THRESHOLD)
    night_temp_min: float | None = Field(default=None, alias="nightTempMin", **_THRESHOLD)
    night_temp_max: float | None = Field(default=None, alias="nightTempMax", **_THRESHOLD)
    day_ground_humid_min: float | None = Field(default=None, alias="dayGroundHumidMin", **_THRESHOLD)
    day_ground_humid_max: float | None = Field(default=None, alias="dayGroundHumidMax", **_THRESHOLD)
    night_ground_humid_min: float | None = Field(default=None, alias="nightGroundHumidMin", **_THRESHOLD)
    night_ground_humid_max: float | None = Field(default=None, alias="nightGroundHumidMax", **_THRESHOLD)
    day_air_humid_min: float | None = Field(default=None, alias="dayAirHumidMin", **_THRESHOLD)
    day_air_humid_max: float | None = Field(default=None, alias="dayAirHumidMax", **_THRESHOLD)
    night_air_humid_min: float | None = Field(default=None, alias="nightAirHumidMin", **_THRESHOLD)
    night_air_humid_max: float | None = Field(default=None, alias="nightAirHumidMax", **_THRESHOLD)


class SetActiveProfileRequest(BaseModel):
    """Schema for selecting the profile the monitor evaluates against."""

    model_config = ConfigDict(populate_by_name=True)

    profile_id: int = Field(..., gt=0, alias="vegetationId", description="Vegetation profile ID")
