"""Shared test fixtures and sample upstream responses."""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta

import pytest

from marineboard.exceptions import SourceUnavailable
from marineboard.models.forecast import ForecastSample

NDBC_URL = "https://www.ndbc.noaa.gov"
STORMGLASS_URL = "https://api.stormglass.io"
TIDES_URL = "https://api.tidesandcurrents.noaa.gov"


SAMPLE_BUOY_REPORT = """\
#YY  MM DD hh mm WDIR WSPD GST  WVHT   DPD   APD MWD   PRES  ATMP  WTMP  DEWP  VIS PTDY  TIDE
#yr  mo dy hr mn degT m/s  m/s     m   sec   sec degT   hPa  degC  degC  degC  nmi  hPa    ft
2024 01 15 12 00 180  5.1  6.2    MM    MM    MM  MM 1016.2  22.3  24.1    MM   MM   MM    MM
"""

# Newest row has no wind and no water temperature; those come from older rows
SAMPLE_SPARSE_BUOY_REPORT = """\
#YY  MM DD hh mm WDIR WSPD GST  WVHT   DPD   APD MWD   PRES  ATMP  WTMP  DEWP  VIS PTDY  TIDE
#yr  mo dy hr mn degT m/s  m/s     m   sec   sec degT   hPa  degC  degC  degC  nmi  hPa    ft
2024 01 15 12 12  MM   MM   MM    MM    MM    MM  MM 1016.0  21.0    MM    MM   MM   MM    MM
2024 01 15 12 06 170  4.0   MM    MM    MM    MM  MM 1016.1    MM    MM    MM   MM   MM    MM
2024 01 15 12 00  90  3.0  5.0    MM    MM    MM  MM 1016.2  20.0  23.0    MM   MM   MM    MM
"""

SAMPLE_HEADER_ONLY_REPORT = """\
#YY  MM DD hh mm WDIR WSPD GST  WVHT   DPD   APD MWD   PRES  ATMP  WTMP  DEWP  VIS PTDY  TIDE
#yr  mo dy hr mn degT m/s  m/s     m   sec   sec degT   hPa  degC  degC  degC  nmi  hPa    ft
"""

SAMPLE_FORECAST = {
    "hours": [
        {"time": "2024-01-15T00:00:00+00:00", "waveHeight": {"sg": 1.0, "noaa": 0.9}},
        {"time": "2024-01-15T01:00:00+00:00", "waveHeight": {"sg": 1.2, "noaa": 1.1}},
        {"time": "2024-01-15T02:00:00+00:00", "waveHeight": {"noaa": 1.3}},
        {"time": "2024-01-15T03:00:00+00:00", "waveHeight": {"sg": 1.5}},
    ],
    "meta": {"cost": 1, "dailyQuota": 10, "requestCount": 3},
}

SAMPLE_TIDES = {
    "predictions": [
        {"t": "2024-01-15 02:00", "v": "0.512", "type": "L"},
        {"t": "2024-01-15 10:12", "v": "1.234", "type": "H"},
        {"t": "2024-01-15 18:30", "v": "-0.21", "type": "L"},
        {"t": "2024-01-16 03:00", "v": "1.1", "type": "H"},
    ],
}


def make_samples(
    start: datetime, heights: list[float | None], step: timedelta = timedelta(hours=1),
) -> list[ForecastSample]:
    return [
        ForecastSample(timestamp=start + i * step, wave_height=height)
        for i, height in enumerate(heights)
    ]


class FakeWaveAdapter:
    """Stands in for WaveForecastAdapter; counts fetches."""

    def __init__(
        self,
        samples: list[ForecastSample] | None = None,
        error: Exception | None = None,
        delay: float = 0.0,
    ) -> None:
        self.samples = samples if samples is not None else make_samples(
            datetime(2024, 1, 15, tzinfo=UTC), [1.0, 1.2, 1.5],
        )
        self.error = error
        self.delay = delay
        self.calls = 0
        self.closed = False

    async def fetch(self, coordinate: object) -> list[ForecastSample]:
        import asyncio

        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return list(self.samples)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def wave_adapter() -> FakeWaveAdapter:
    return FakeWaveAdapter()


@pytest.fixture
def failing_wave_adapter() -> FakeWaveAdapter:
    return FakeWaveAdapter(error=SourceUnavailable("connection refused"))


@pytest.fixture(autouse=True)
def _source_log_dir(tmp_path):
    """Redirect the source call log into tmp_path."""
    import marineboard._logging as mod

    old_logger = mod._logger
    old_dir = mod._LOG_DIR
    old_file = mod._LOG_FILE

    named_logger = logging.getLogger("marineboard.sources")
    named_logger.handlers.clear()

    mod._logger = None
    mod._LOG_DIR = str(tmp_path / "logs")
    mod._LOG_FILE = str(tmp_path / "logs" / "source_calls.log")

    yield tmp_path / "logs"

    for h in named_logger.handlers[:]:
        h.close()
        named_logger.removeHandler(h)
    mod._logger = old_logger
    mod._LOG_DIR = old_dir
    mod._LOG_FILE = old_file
