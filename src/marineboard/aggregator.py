"""Concurrent fan-out over every source with per-source fallbacks."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import UTC, date, datetime, timedelta
from typing import Any, TypeVar
from zoneinfo import ZoneInfo

from marineboard._params import Coordinate
from marineboard.adapters.base import SourceAdapter
from marineboard.adapters.buoy import BuoyAdapter
from marineboard.adapters.sun import SunAdapter, SunriseSunsetAdapter
from marineboard.adapters.tides import TideAdapter
from marineboard.adapters.waves import WaveForecastAdapter
from marineboard.cache import (
    BoundaryCrossingPolicy,
    ElapsedTimePolicy,
    ForecastCache,
    StalenessPolicy,
)
from marineboard.config import Settings
from marineboard.exceptions import MarineBoardError
from marineboard.models.aggregate import AggregateResponse
from marineboard.models.forecast import DEFAULT_WAVES, WaveReading
from marineboard.models.observation import DEFAULT_OBSERVATION, ObservationRecord
from marineboard.models.sun import DEFAULT_SUN
from marineboard.models.tide import DEFAULT_TIDES
from marineboard.selection import SelectionStrategy, select_sample
from marineboard.storage import BlobStore, FileBlobStore, GitHubBlobStore, MemoryBlobStore
from marineboard.units import metres_to_feet, round_one

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Aggregator:
    """Builds one AggregateResponse from every source, concurrently.

    A failing or late source is replaced by its default record and listed in
    ``degraded``; it never fails the whole response.
    """

    def __init__(
        self,
        buoy_adapter: BuoyAdapter,
        buoy_stations: dict[str, str],
        forecast_cache: ForecastCache,
        tide_adapter: TideAdapter,
        tide_station: str,
        sun_adapter: SunAdapter | SunriseSunsetAdapter,
        sun_coordinate: Coordinate,
        zone: ZoneInfo | str = "America/Chicago",
        strategy: SelectionStrategy = SelectionStrategy.NEAREST,
        deadline: float | None = 15.0,
        store: BlobStore | None = None,
    ) -> None:
        self.buoy_adapter = buoy_adapter
        self.buoy_stations = dict(buoy_stations)
        self.forecast_cache = forecast_cache
        self.tide_adapter = tide_adapter
        self.tide_station = tide_station
        self.sun_adapter = sun_adapter
        self.sun_coordinate = sun_coordinate
        self.zone = ZoneInfo(zone) if isinstance(zone, str) else zone
        self.strategy = SelectionStrategy(strategy)
        self.deadline = deadline
        self._store = store

    async def __aenter__(self) -> Aggregator:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close every adapter's HTTP connection and the cache store."""
        adapters: list[SourceAdapter] = [
            self.buoy_adapter, self.tide_adapter, self.sun_adapter,
        ]
        for adapter in adapters:
            await adapter.close()
        await self.forecast_cache.close()
        if self._store is not None:
            await self._store.close()

    async def _settle(
        self,
        name: str,
        call: Callable[[], Awaitable[T]],
        default: T,
        degraded: list[str],
        deadline_at: float | None,
    ) -> T:
        try:
            async with asyncio.timeout_at(deadline_at):
                return await call()
        except TimeoutError:
            logger.warning("Source %s missed the deadline; using default", name)
        except MarineBoardError as exc:
            logger.warning("Source %s failed (%s: %s); using default", name, type(exc).__name__, exc)
        except Exception:
            logger.exception("Source %s raised unexpectedly; using default", name)
        degraded.append(name)
        return default

    async def _waves(self, now: datetime) -> WaveReading:
        entry = await self.forecast_cache.get_entry(now)
        sample = select_sample(entry.samples, now, self.strategy)
        if sample is None:
            return DEFAULT_WAVES
        metres = sample.wave_height
        return WaveReading(
            time=sample.timestamp,
            wave_height=round_one(metres_to_feet(metres)) if metres is not None else None,
            wave_height_m=metres,
        )

    async def aggregate(
        self,
        now: datetime | None = None,
        deadline: float | None = None,
    ) -> AggregateResponse:
        """Fetch every source concurrently and assemble the response.

        Args:
            now: The instant to select the forecast for (defaults to the current time).
            deadline: Seconds allowed for the whole pass; overrides the configured one.
        """
        now = now or datetime.now(UTC)
        today: date = now.astimezone(self.zone).date()
        budget = deadline if deadline is not None else self.deadline
        loop = asyncio.get_running_loop()
        deadline_at = loop.time() + budget if budget is not None else None
        degraded: list[str] = []

        buoy_names = list(self.buoy_stations)
        calls: list[Awaitable[Any]] = [
            self._settle(
                f"buoy:{name}",
                lambda station=station: self.buoy_adapter.fetch(station),
                DEFAULT_OBSERVATION,
                degraded,
                deadline_at,
            )
            for name, station in self.buoy_stations.items()
        ]
        calls.append(self._settle("waves", lambda: self._waves(now), DEFAULT_WAVES, degraded, deadline_at))
        calls.append(self._settle(
            "tides",
            lambda: self.tide_adapter.fetch(self.tide_station, today),
            DEFAULT_TIDES,
            degraded,
            deadline_at,
        ))
        calls.append(self._settle(
            "sun",
            lambda: self.sun_adapter.fetch(self.sun_coordinate, today),
            DEFAULT_SUN,
            degraded,
            deadline_at,
        ))

        results = await asyncio.gather(*calls)
        observations: list[ObservationRecord] = results[: len(buoy_names)]
        waves, tides, sun = results[len(buoy_names):]

        return AggregateResponse(
            buoys=dict(zip(buoy_names, observations)),
            waves=waves,
            tides=tides,
            sun=sun,
            generated_at=now,
            degraded=sorted(degraded),
        )


def build_store(settings: Settings) -> BlobStore:
    """Return the blob store named by ``settings.cache_backend``."""
    if settings.cache_backend == "file":
        return FileBlobStore(settings.cache_dir)
    if settings.cache_backend == "github":
        if not settings.github_repo:
            raise ValueError("MARINEBOARD_GITHUB_REPO is required for the github cache backend")
        return GitHubBlobStore(
            repo=settings.github_repo,
            token=settings.github_token,
            branch=settings.github_branch,
            base_url=settings.github_api_url,
            timeout=settings.request_timeout,
        )
    return MemoryBlobStore()


def build_policy(settings: Settings) -> StalenessPolicy:
    """Return the staleness policy named by ``settings.cache_policy``."""
    if settings.cache_policy == "boundary":
        return BoundaryCrossingPolicy(settings.local_time_zone)
    return ElapsedTimePolicy(timedelta(hours=settings.cache_max_age_hours))


def build_forecast_cache(settings: Settings, store: BlobStore) -> ForecastCache:
    adapter = WaveForecastAdapter(
        base_url=settings.stormglass_base_url,
        api_key=settings.stormglass_api_key,
        data_source=settings.stormglass_source,
        timeout=settings.request_timeout,
    )
    return ForecastCache(
        store=store,
        adapter=adapter,
        coordinate=Coordinate(settings.wave_lat, settings.wave_lon),
        policy=build_policy(settings),
        key=settings.cache_key,
        serve_stale_on_error=settings.serve_stale_on_error,
    )


def build_aggregator(settings: Settings) -> Aggregator:
    """Wire every adapter, the cache and its store from configuration."""
    store = build_store(settings)
    if settings.sun_source == "api":
        sun_adapter: SunAdapter | SunriseSunsetAdapter = SunriseSunsetAdapter(
            base_url=settings.sunrise_sunset_base_url,
            zone=settings.local_time_zone,
            timeout=settings.request_timeout,
        )
    else:
        sun_adapter = SunAdapter(zone=settings.local_time_zone)
    return Aggregator(
        buoy_adapter=BuoyAdapter(
            base_url=settings.ndbc_base_url,
            timeout=settings.request_timeout,
            compass_points=settings.compass_points,
        ),
        buoy_stations=settings.buoy_stations,
        forecast_cache=build_forecast_cache(settings, store),
        tide_adapter=TideAdapter(
            base_url=settings.tides_base_url,
            station_zone=settings.local_time_zone,
            upstream_zone=settings.tide_upstream_time_zone,
            timeout=settings.request_timeout,
        ),
        tide_station=settings.tide_station,
        sun_adapter=sun_adapter,
        sun_coordinate=Coordinate(settings.sun_lat, settings.sun_lon),
        zone=settings.local_time_zone,
        strategy=settings.selection_strategy,
        deadline=settings.aggregate_deadline,
        store=store,
    )
