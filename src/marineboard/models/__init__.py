"""marineboard data models."""

from marineboard.models.aggregate import AggregateResponse
from marineboard.models.forecast import (
    DEFAULT_WAVES,
    ForecastCacheEntry,
    ForecastSample,
    WaveReading,
)
from marineboard.models.observation import DEFAULT_OBSERVATION, ObservationRecord
from marineboard.models.sun import DEFAULT_SUN, SunTimes
from marineboard.models.tide import DEFAULT_TIDES, TideKind, TidePrediction, TideSummary

__all__ = [
    "AggregateResponse",
    "DEFAULT_OBSERVATION",
    "DEFAULT_SUN",
    "DEFAULT_TIDES",
    "DEFAULT_WAVES",
    "ForecastCacheEntry",
    "ForecastSample",
    "ObservationRecord",
    "SunTimes",
    "TideKind",
    "TidePrediction",
    "TideSummary",
    "WaveReading",
]
