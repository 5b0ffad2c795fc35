"""Sunrise/sunset model."""

from __future__ import annotations

from datetime import time

from pydantic import BaseModel, ConfigDict, field_serializer


class SunTimes(BaseModel):
    """Local sunrise and sunset for one day, to the minute."""

    model_config = ConfigDict(frozen=True)

    sunrise: time | None = None
    sunset: time | None = None

    @field_serializer("sunrise", "sunset")
    def _clock(self, value: time | None) -> str | None:
        return value.strftime("%H:%M") if value is not None else None


DEFAULT_SUN = SunTimes()
