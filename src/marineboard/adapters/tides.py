"""NOAA CO-OPS tide prediction adapter."""

from __future__ import annotations

import math
from datetime import UTC, date, datetime, timedelta
from typing import Any
from zoneinfo import ZoneInfo

from marineboard._http import AsyncTransport
from marineboard._logging import log_source_call
from marineboard._params import build_query_params
from marineboard.adapters.base import SourceAdapter
from marineboard.exceptions import EmptyResult, MalformedResponse
from marineboard.models.tide import TideKind, TidePrediction, TideSummary

DEFAULT_COOPS_URL = "https://api.tidesandcurrents.noaa.gov"
DEFAULT_STATION_ZONE = "America/Chicago"

_TIME_FORMAT = "%Y-%m-%d %H:%M"


def _parse_prediction(raw: dict[str, Any], upstream_zone: str, station_zone: ZoneInfo) -> TidePrediction:
    try:
        naive = datetime.strptime(raw["t"], _TIME_FORMAT)
        value = float(raw["v"])
        kind = TideKind(raw["type"])
    except (KeyError, TypeError, ValueError) as exc:
        raise MalformedResponse(f"Bad tide prediction {raw!r}: {exc}") from exc
    if not math.isfinite(value):
        raise MalformedResponse(f"Non-finite tide height in {raw!r}")
    height = round(value, 1)
    if upstream_zone == "gmt":
        local = naive.replace(tzinfo=UTC).astimezone(station_zone)
    else:
        local = naive.replace(tzinfo=station_zone)
    return TidePrediction(time=local, height=height, kind=kind)


def summary_from_payload(
    payload: Any,
    upstream_zone: str = "gmt",
    station_zone: ZoneInfo | None = None,
    day: date | None = None,
) -> TideSummary:
    """Return the first high and first low water from a predictions payload.

    When *day* is given, predictions falling on other local dates are skipped.
    """
    zone = station_zone or ZoneInfo(DEFAULT_STATION_ZONE)
    if not isinstance(payload, dict):
        raise MalformedResponse("Tide payload is not an object")
    if "error" in payload:
        message = payload["error"].get("message") if isinstance(payload["error"], dict) else payload["error"]
        raise MalformedResponse(f"Tide service error: {message}")
    predictions = payload.get("predictions")
    if not isinstance(predictions, list):
        raise MalformedResponse("Tide payload has no 'predictions' list")
    if not predictions:
        raise EmptyResult("No tide predictions for the requested day")

    high: TidePrediction | None = None
    low: TidePrediction | None = None
    for raw in predictions:
        prediction = _parse_prediction(raw, upstream_zone, zone)
        if day is not None and prediction.time.date() != day:
            continue
        if prediction.kind is TideKind.HIGH and high is None:
            high = prediction
        elif prediction.kind is TideKind.LOW and low is None:
            low = prediction
        if high is not None and low is not None:
            break
    if high is None and low is None:
        raise EmptyResult(f"No tide predictions fall on {day}")
    return TideSummary(high=high, low=low)


class TideAdapter(SourceAdapter):
    """Fetches today's high/low predictions for a tide station.

    ``upstream_zone`` is the CO-OPS ``time_zone`` parameter: ``gmt`` times are
    converted to the station zone, ``lst_ldt`` times are already local.
    """

    name = "tides"

    def __init__(
        self,
        base_url: str = DEFAULT_COOPS_URL,
        station_zone: str = DEFAULT_STATION_ZONE,
        upstream_zone: str = "gmt",
        timeout: float = 10.0,
        transport: AsyncTransport | None = None,
    ) -> None:
        if upstream_zone not in ("gmt", "lst_ldt"):
            raise ValueError(f"Unsupported tide time zone: {upstream_zone}")
        super().__init__(
            transport or AsyncTransport(
                base_url=base_url, timeout=timeout, headers={"Accept": "application/json"},
            ),
        )
        self._zone = ZoneInfo(station_zone)
        self._upstream_zone = upstream_zone

    def today(self) -> date:
        return datetime.now(self._zone).date()

    @log_source_call
    async def fetch(self, station_id: str, day: date | None = None) -> TideSummary:
        day = day or self.today()
        params = build_query_params(
            product="predictions",
            station=station_id,
            begin_date=day,
            # GMT days straddle the local day, so request the following one too
            end_date=day + timedelta(days=1) if self._upstream_zone == "gmt" else day,
            interval="hilo",
            units="english",
            datum="MLLW",
            time_zone=self._upstream_zone,
            format="json",
        )
        payload = await self._transport.get_json("/api/prod/datagetter", params)
        return summary_from_payload(payload, self._upstream_zone, self._zone, day=day)
