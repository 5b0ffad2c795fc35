"""Wave forecast models."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


class ForecastSample(BaseModel):
    """One timestamped wave-height estimate (metres)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    timestamp: datetime = Field(alias="time")
    wave_height: float | None = Field(default=None, alias="waveHeight")


class ForecastCacheEntry(BaseModel):
    """A forecast series together with the instant it was fetched.

    Persisted as ``{"fetchedAt": <epoch ms>, "samples": [...]}``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    fetched_at: datetime = Field(alias="fetchedAt")
    samples: tuple[ForecastSample, ...] = ()

    @field_validator("fetched_at", mode="before")
    @classmethod
    def _from_epoch_millis(cls, value: object) -> object:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return datetime.fromtimestamp(value / 1000, tz=UTC)
        return value

    @field_serializer("fetched_at")
    def _to_epoch_millis(self, value: datetime) -> int:
        return int(value.timestamp() * 1000)

    def to_json_bytes(self) -> bytes:
        return self.model_dump_json(by_alias=True).encode("utf-8")

    @classmethod
    def from_json_bytes(cls, data: bytes) -> ForecastCacheEntry:
        return cls.model_validate_json(data)


class WaveReading(BaseModel):
    """The forecast sample selected for display, in feet and metres."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    time: datetime | None = None
    wave_height: float | None = Field(default=None, alias="waveHeight")
    wave_height_m: float | None = Field(default=None, alias="waveM")


DEFAULT_WAVES = WaveReading()
