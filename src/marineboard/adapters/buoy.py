"""NDBC buoy report adapter."""

from __future__ import annotations

from collections.abc import Callable

from marineboard._http import AsyncTransport
from marineboard._logging import log_source_call
from marineboard.adapters.base import SourceAdapter
from marineboard.exceptions import EmptyResult
from marineboard.models.observation import ObservationRecord
from marineboard.report import TabularReport, parse_report
from marineboard.units import (
    celsius_to_fahrenheit,
    degrees_to_compass,
    mps_to_knots,
    round_one,
)

DEFAULT_NDBC_URL = "https://www.ndbc.noaa.gov"

# Columns scanned independently for their newest usable value
_QUANTITIES = ("WDIR", "WSPD", "GST", "ATMP", "WTMP")


def _newest(report: TabularReport) -> dict[str, float | None]:
    """Pick, per column, the first row in report order with a valid value."""
    found: dict[str, float | None] = dict.fromkeys(_QUANTITIES)
    saw_row = False
    for row in report.rows():
        saw_row = True
        for name in _QUANTITIES:
            if found[name] is None:
                found[name] = report.number(row, name)
        if all(value is not None for value in found.values()):
            break
    if not saw_row:
        raise EmptyResult("Buoy report has no data rows")
    if all(value is None for value in found.values()):
        raise EmptyResult("Buoy report has no usable readings")
    return found


def observation_from_report(text: str, compass_points: int = 8) -> ObservationRecord:
    """Normalize a realtime2 text report into an ObservationRecord."""
    report = parse_report(text, require="WDIR")
    values = _newest(report)

    def convert(name: str, fn: Callable[[float], float]) -> float | None:
        value = values[name]
        return round_one(fn(value)) if value is not None else None

    return ObservationRecord(
        air_temp=convert("ATMP", celsius_to_fahrenheit),
        water_temp=convert("WTMP", celsius_to_fahrenheit),
        wind_speed=convert("WSPD", mps_to_knots),
        gust_speed=convert("GST", mps_to_knots),
        wind_direction=degrees_to_compass(values["WDIR"], points=compass_points),
    )


class BuoyAdapter(SourceAdapter):
    """Fetches the realtime2 standard meteorological report for a station.

    Usage:
        async with BuoyAdapter() as buoys:
            gulf = await buoys.fetch("BZST2")
    """

    name = "buoy"

    def __init__(
        self,
        base_url: str = DEFAULT_NDBC_URL,
        timeout: float = 10.0,
        compass_points: int = 8,
        transport: AsyncTransport | None = None,
    ) -> None:
        super().__init__(transport or AsyncTransport(base_url=base_url, timeout=timeout))
        self._compass_points = compass_points

    @log_source_call
    async def fetch(self, station_id: str) -> ObservationRecord:
        text = await self._transport.get_text(f"/data/realtime2/{station_id}.txt")
        return observation_from_report(text, compass_points=self._compass_points)
