"""Tide prediction models."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict


class TideKind(str, Enum):
    """High or low water, using the upstream's one-letter codes."""

    HIGH = "H"
    LOW = "L"


class TidePrediction(BaseModel):
    """A predicted high or low water in the station's local time."""

    model_config = ConfigDict(frozen=True)

    time: datetime
    height: float
    kind: TideKind


class TideSummary(BaseModel):
    """First high and first low water of the day."""

    model_config = ConfigDict(frozen=True)

    high: TidePrediction | None = None
    low: TidePrediction | None = None


DEFAULT_TIDES = TideSummary()
