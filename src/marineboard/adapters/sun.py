"""Sunrise/sunset adapters: a local almanac computation and a web API."""

from __future__ import annotations

import math
from datetime import UTC, date, datetime, time, timedelta
from typing import Any
from zoneinfo import ZoneInfo

from marineboard._http import AsyncTransport
from marineboard._logging import log_source_call
from marineboard._params import Coordinate, build_query_params
from marineboard.adapters.base import SourceAdapter
from marineboard.exceptions import MalformedResponse
from marineboard.models.sun import SunTimes

DEFAULT_SUNRISE_SUNSET_URL = "https://api.sunrise-sunset.org"
DEFAULT_ZONE = "America/Chicago"

# Official zenith: 90 degrees plus refraction and the solar disc radius
OFFICIAL_ZENITH = 90.833


def _sin(deg: float) -> float:
    return math.sin(math.radians(deg))


def _cos(deg: float) -> float:
    return math.cos(math.radians(deg))


def solar_event_utc(day: date, lat: float, lon: float, rising: bool) -> float | None:
    """Return the UTC hour of sunrise or sunset, or None if the sun never crosses.

    Uses the NOAA almanac sunrise equation (accurate to about a minute for
    latitudes between the polar circles).
    """
    n = day.timetuple().tm_yday
    lng_hour = lon / 15
    t = n + ((6 if rising else 18) - lng_hour) / 24

    mean_anomaly = 0.9856 * t - 3.289
    true_long = (
        mean_anomaly
        + 1.916 * _sin(mean_anomaly)
        + 0.020 * _sin(2 * mean_anomaly)
        + 282.634
    ) % 360

    right_asc = math.degrees(math.atan(0.91764 * math.tan(math.radians(true_long)))) % 360
    right_asc += math.floor(true_long / 90) * 90 - math.floor(right_asc / 90) * 90
    right_asc /= 15

    sin_dec = 0.39782 * _sin(true_long)
    cos_dec = math.cos(math.asin(sin_dec))
    cos_h = (_cos(OFFICIAL_ZENITH) - sin_dec * _sin(lat)) / (cos_dec * _cos(lat))
    if cos_h > 1 or cos_h < -1:
        return None

    hour_angle = math.degrees(math.acos(cos_h))
    if rising:
        hour_angle = 360 - hour_angle
    local_mean = hour_angle / 15 + right_asc - 0.06571 * t - 6.622
    return (local_mean - lng_hour) % 24


def _to_local_clock(day: date, utc_hours: float | None, zone: ZoneInfo) -> time | None:
    if utc_hours is None:
        return None
    instant = datetime.combine(day, time(0), tzinfo=UTC) + timedelta(hours=utc_hours)
    return instant.astimezone(zone).time().replace(second=0, microsecond=0)


def compute_sun_times(coordinate: Coordinate, day: date, zone: ZoneInfo) -> SunTimes:
    """Sunrise and sunset at *coordinate* on *day*, as local clock times."""
    return SunTimes(
        sunrise=_to_local_clock(day, solar_event_utc(day, coordinate.lat, coordinate.lon, True), zone),
        sunset=_to_local_clock(day, solar_event_utc(day, coordinate.lat, coordinate.lon, False), zone),
    )


class SunAdapter(SourceAdapter):
    """Computes sunrise/sunset locally; makes no network calls."""

    name = "sun"

    def __init__(self, zone: str = DEFAULT_ZONE) -> None:
        super().__init__(transport=None)
        self._zone = ZoneInfo(zone)

    @log_source_call
    async def fetch(self, coordinate: Coordinate, day: date | None = None) -> SunTimes:
        day = day or datetime.now(self._zone).date()
        return compute_sun_times(coordinate, day, self._zone)


def _parse_instant(value: Any, zone: ZoneInfo) -> time:
    try:
        instant = datetime.fromisoformat(value)
    except (TypeError, ValueError) as exc:
        raise MalformedResponse(f"Bad sun time {value!r}") from exc
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=UTC)
    return instant.astimezone(zone).time().replace(second=0, microsecond=0)


class SunriseSunsetAdapter(SourceAdapter):
    """Fetches sunrise/sunset from the sunrise-sunset.org API."""

    name = "sun"

    def __init__(
        self,
        base_url: str = DEFAULT_SUNRISE_SUNSET_URL,
        zone: str = DEFAULT_ZONE,
        timeout: float = 10.0,
        transport: AsyncTransport | None = None,
    ) -> None:
        super().__init__(
            transport or AsyncTransport(
                base_url=base_url, timeout=timeout, headers={"Accept": "application/json"},
            ),
        )
        self._zone = ZoneInfo(zone)

    @log_source_call
    async def fetch(self, coordinate: Coordinate, day: date | None = None) -> SunTimes:
        day = day or datetime.now(self._zone).date()
        params = build_query_params(point=coordinate, date=day.isoformat(), formatted=0)
        payload = await self._transport.get_json("/json", params)
        if not isinstance(payload, dict) or payload.get("status") != "OK":
            raise MalformedResponse(f"Sun service returned {payload!r:.200}")
        results = payload.get("results")
        if not isinstance(results, dict):
            raise MalformedResponse("Sun payload has no 'results' object")
        return SunTimes(
            sunrise=_parse_instant(results.get("sunrise"), self._zone),
            sunset=_parse_instant(results.get("sunset"), self._zone),
        )
