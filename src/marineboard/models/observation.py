"""Buoy observation model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ObservationRecord(BaseModel):
    """Latest readings from one buoy, in display units.

    Each field is filled independently, so air temperature and wind speed may
    come from different report rows.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    air_temp: float | None = Field(default=None, alias="airF")
    water_temp: float | None = Field(default=None, alias="waterF")
    wind_speed: float | None = Field(default=None, alias="windKts")
    gust_speed: float | None = Field(default=None, alias="gustKts")
    wind_direction: str | None = Field(default=None, alias="windDirCardinal")


DEFAULT_OBSERVATION = ObservationRecord()
