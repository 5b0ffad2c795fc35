"""Query parameter builder for upstream requests."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any


@dataclass(frozen=True)
class Coordinate:
    """A fixed geographic point.

    Usage:
        Coordinate(26.071389, -97.128722).to_params()
        # produces: lat=26.071389&lng=-97.128722
    """

    lat: float
    lon: float

    def to_params(self, lat_key: str = "lat", lon_key: str = "lng") -> list[tuple[str, str]]:
        """Convert this coordinate to (key, value) pairs."""
        return [(lat_key, str(self.lat)), (lon_key, str(self.lon))]


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.strftime("%Y%m%d")
    return str(value)


def build_query_params(**kwargs: Any) -> list[tuple[str, str]]:
    """Build a list of query parameter tuples from keyword arguments.

    None values are dropped. Dates render as ``YYYYMMDD``, datetimes as
    ISO-8601, and Coordinate instances expand into ``lat``/``lng`` pairs.

    Args:
        **kwargs: Parameter names mapped to plain values or Coordinate instances.

    Returns:
        List of (key, value) tuples suitable for httpx params.
    """
    params: list[tuple[str, str]] = []
    for key, value in kwargs.items():
        if value is None:
            continue
        if isinstance(value, Coordinate):
            params.extend(value.to_params())
        else:
            params.append((key, _format_value(value)))
    return params
