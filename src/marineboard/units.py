"""Unit conversions for display values."""

from __future__ import annotations

import math

KNOTS_PER_MPS = 1.94384
FEET_PER_METRE = 3.28084

_COMPASS_16 = (
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
)


def celsius_to_fahrenheit(value: float) -> float:
    return value * 9 / 5 + 32


def mps_to_knots(value: float) -> float:
    return value * KNOTS_PER_MPS


def metres_to_feet(value: float) -> float:
    return value * FEET_PER_METRE


def round_one(value: float | None) -> float | None:
    """Round to one decimal place, passing None through."""
    if value is None:
        return None
    return round(value, 1)


def degrees_to_compass(degrees: float | None, points: int = 8) -> str | None:
    """Map a bearing in degrees to the nearest compass point.

    A bearing that falls exactly on the boundary between two sectors belongs
    to the counter-clockwise point, so 22.5 is "N" on an 8-point compass.
    """
    if degrees is None or not math.isfinite(degrees):
        return None
    if points not in (4, 8, 16):
        raise ValueError(f"Unsupported compass resolution: {points}")
    width = 360 / points
    index = math.ceil((degrees % 360) / width - 0.5) % points
    return _COMPASS_16[index * (16 // points)]
