"""Unified response model for the display board."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field

from marineboard.models.forecast import DEFAULT_WAVES, WaveReading
from marineboard.models.observation import DEFAULT_OBSERVATION, ObservationRecord
from marineboard.models.sun import DEFAULT_SUN, SunTimes
from marineboard.models.tide import DEFAULT_TIDES, TideSummary


class AggregateResponse(BaseModel):
    """Everything the board shows, assembled once per request."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    buoys: dict[str, ObservationRecord] = Field(default_factory=dict)
    waves: WaveReading = DEFAULT_WAVES
    tides: TideSummary = DEFAULT_TIDES
    sun: SunTimes = DEFAULT_SUN
    generated_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC), alias="generatedAt",
    )
    degraded: list[str] = Field(default_factory=list)
    error: str | None = None

    @classmethod
    def empty(cls, buoy_names: Iterable[str] = (), error: str | None = None) -> AggregateResponse:
        """Return the all-null shape, optionally carrying an error message."""
        return cls(
            buoys={name: DEFAULT_OBSERVATION for name in buoy_names},
            error=error,
        )

    def to_payload(self) -> dict:
        """Return the JSON-ready dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)
