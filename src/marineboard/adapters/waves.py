"""Stormglass wave forecast adapter."""

from __future__ import annotations

import math
from datetime import datetime
from typing import Any

from marineboard._http import AsyncTransport
from marineboard._logging import log_source_call
from marineboard._params import Coordinate, build_query_params
from marineboard.adapters.base import SourceAdapter
from marineboard.exceptions import EmptyResult, MalformedResponse
from marineboard.models.forecast import ForecastSample

DEFAULT_STORMGLASS_URL = "https://api.stormglass.io"
DEFAULT_DATA_SOURCE = "sg"


def _magnitude(entry: dict[str, Any], source: str) -> float | None:
    raw = entry.get("waveHeight")
    if not isinstance(raw, dict):
        return None
    value = raw.get(source)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value) if math.isfinite(value) else None


def samples_from_payload(payload: Any, source: str = DEFAULT_DATA_SOURCE) -> list[ForecastSample]:
    """Convert a point-forecast payload into ascending ForecastSamples.

    Entries without a magnitude are kept with ``wave_height=None`` so the
    time axis stays intact.
    """
    if not isinstance(payload, dict) or not isinstance(payload.get("hours"), list):
        raise MalformedResponse("Forecast payload has no 'hours' list")
    hours = payload["hours"]
    if not hours:
        raise EmptyResult("Forecast payload has no hourly entries")

    samples: list[ForecastSample] = []
    for entry in hours:
        if not isinstance(entry, dict) or "time" not in entry:
            raise MalformedResponse(f"Forecast entry without a timestamp: {entry!r}")
        try:
            timestamp = datetime.fromisoformat(entry["time"])
        except (TypeError, ValueError) as exc:
            raise MalformedResponse(f"Bad forecast timestamp {entry['time']!r}") from exc
        if timestamp.tzinfo is None:
            raise MalformedResponse(f"Forecast timestamp without offset: {entry['time']!r}")
        samples.append(ForecastSample(timestamp=timestamp, wave_height=_magnitude(entry, source)))
    samples.sort(key=lambda s: s.timestamp)
    return samples


class WaveForecastAdapter(SourceAdapter):
    """Fetches the hourly wave-height forecast for a fixed point.

    Usage:
        async with WaveForecastAdapter(api_key="...") as waves:
            samples = await waves.fetch(Coordinate(26.071389, -97.128722))
    """

    name = "waves"

    def __init__(
        self,
        base_url: str = DEFAULT_STORMGLASS_URL,
        api_key: str | None = None,
        data_source: str = DEFAULT_DATA_SOURCE,
        timeout: float = 10.0,
        transport: AsyncTransport | None = None,
    ) -> None:
        headers = {"Accept": "application/json"}
        if api_key:
            headers["Authorization"] = api_key
        super().__init__(
            transport or AsyncTransport(base_url=base_url, timeout=timeout, headers=headers),
        )
        self._data_source = data_source

    @log_source_call
    async def fetch(self, coordinate: Coordinate) -> list[ForecastSample]:
        params = build_query_params(
            point=coordinate,
            params="waveHeight",
            source=self._data_source,
        )
        payload = await self._transport.get_json("/v2/weather/point", params)
        return samples_from_payload(payload, self._data_source)
