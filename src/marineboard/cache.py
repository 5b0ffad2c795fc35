"""Staleness-aware cache for the rate-limited wave forecast."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from datetime import UTC, datetime, time, timedelta
from zoneinfo import ZoneInfo

from pydantic import ValidationError

from marineboard._params import Coordinate
from marineboard.adapters.waves import WaveForecastAdapter
from marineboard.exceptions import CacheWriteConflict, MarineBoardError, SourceUnavailable
from marineboard.models.forecast import ForecastCacheEntry
from marineboard.storage import BlobStore, StoredBlob

logger = logging.getLogger(__name__)

DEFAULT_CACHE_KEY = "stormglass.json"


def _utcnow() -> datetime:
    return datetime.now(UTC)


# ── Staleness policies ─────────────────────────────────────────────


class StalenessPolicy(ABC):
    """Decides whether an entry fetched at one instant is stale at another."""

    @abstractmethod
    def is_stale(self, fetched_at: datetime, now: datetime) -> bool: ...


class ElapsedTimePolicy(StalenessPolicy):
    """Stale once ``max_age`` has elapsed since the fetch."""

    def __init__(self, max_age: timedelta) -> None:
        if max_age <= timedelta(0):
            raise ValueError("max_age must be positive")
        self.max_age = max_age

    def is_stale(self, fetched_at: datetime, now: datetime) -> bool:
        return now - fetched_at >= self.max_age

    def __repr__(self) -> str:
        return f"ElapsedTimePolicy(max_age={self.max_age})"


class BoundaryCrossingPolicy(StalenessPolicy):
    """Stale once a local wall-clock boundary has passed since the fetch.

    With the default boundaries (midnight and noon) an entry fetched at 11:00
    is stale at 12:30 but still fresh at 11:30.
    """

    def __init__(
        self,
        zone: ZoneInfo | str,
        boundaries: Iterable[time] = (time(0, 0), time(12, 0)),
    ) -> None:
        self.zone = ZoneInfo(zone) if isinstance(zone, str) else zone
        self.boundaries = tuple(sorted(boundaries))
        if not self.boundaries:
            raise ValueError("At least one boundary is required")

    def last_boundary(self, now: datetime) -> datetime:
        """Return the most recent boundary instant at or before *now*."""
        local = now.astimezone(self.zone)
        for day_offset in (0, 1):
            day = local.date() - timedelta(days=day_offset)
            for boundary in reversed(self.boundaries):
                candidate = datetime.combine(day, boundary, tzinfo=self.zone)
                if candidate <= local:
                    return candidate
        raise AssertionError("unreachable: yesterday's last boundary precedes now")

    def is_stale(self, fetched_at: datetime, now: datetime) -> bool:
        return fetched_at < self.last_boundary(now)

    def __repr__(self) -> str:
        return f"BoundaryCrossingPolicy(zone={self.zone.key!r}, boundaries={self.boundaries})"


# ── Cache ──────────────────────────────────────────────────────────


class ForecastCache:
    """Wraps the wave adapter with a persisted, versioned forecast entry.

    The store is the only shared state. Reads are unconditional; writes are
    conditional on the revision read, so concurrent refreshes in different
    processes cannot silently clobber each other. Within one process an
    ``asyncio.Lock`` keeps simultaneous callers from fetching twice.

    Usage:
        cache = ForecastCache(MemoryBlobStore(), adapter, coordinate,
                              ElapsedTimePolicy(timedelta(hours=4)))
        entry = await cache.get_entry()
    """

    def __init__(
        self,
        store: BlobStore,
        adapter: WaveForecastAdapter,
        coordinate: Coordinate,
        policy: StalenessPolicy,
        key: str = DEFAULT_CACHE_KEY,
        serve_stale_on_error: bool = True,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._adapter = adapter
        self._coordinate = coordinate
        self.policy = policy
        self.key = key
        self.serve_stale_on_error = serve_stale_on_error
        self._clock = clock
        self._lock = asyncio.Lock()

    async def _read(self) -> tuple[StoredBlob | None, ForecastCacheEntry | None]:
        try:
            blob = await self._store.get(self.key)
        except MarineBoardError as exc:
            logger.warning("Could not read forecast cache %s: %s", self.key, exc)
            return None, None
        if blob is None:
            return None, None
        try:
            return blob, ForecastCacheEntry.from_json_bytes(blob.data)
        except ValidationError as exc:
            logger.warning("Discarding undecodable forecast cache %s: %s", self.key, exc)
            return blob, None

    def _is_fresh(self, entry: ForecastCacheEntry | None, now: datetime) -> bool:
        return entry is not None and not self.policy.is_stale(entry.fetched_at, now)

    async def get_entry(self, now: datetime | None = None) -> ForecastCacheEntry:
        """Return a fresh entry, refetching only when the stored one is stale.

        Raises:
            SourceUnavailable: The refetch failed and no usable entry exists
                (or serving stale data is disabled).
        """
        now = now or self._clock()
        _, entry = await self._read()
        if self._is_fresh(entry, now):
            return entry  # type: ignore[return-value]

        async with self._lock:
            # Another caller may have refreshed while we waited
            blob, entry = await self._read()
            if self._is_fresh(entry, now):
                return entry  # type: ignore[return-value]
            return await self._refetch(blob, entry, now)

    async def refresh(self, now: datetime | None = None) -> ForecastCacheEntry:
        """Fetch and persist a new entry regardless of staleness.

        A failed fetch always raises here; stale entries are never served.
        """
        now = now or self._clock()
        async with self._lock:
            blob, entry = await self._read()
            return await self._refetch(blob, entry, now, allow_stale=False)

    async def _refetch(
        self,
        blob: StoredBlob | None,
        previous: ForecastCacheEntry | None,
        now: datetime,
        allow_stale: bool = True,
    ) -> ForecastCacheEntry:
        try:
            samples = await self._adapter.fetch(self._coordinate)
        except MarineBoardError as exc:
            if previous is not None and allow_stale and self.serve_stale_on_error:
                logger.warning(
                    "Forecast refetch failed (%s); serving entry fetched at %s",
                    exc, previous.fetched_at.isoformat(),
                )
                return previous
            if isinstance(exc, SourceUnavailable):
                raise
            raise SourceUnavailable(f"Forecast unavailable: {exc}") from exc

        fresh = ForecastCacheEntry(fetched_at=now, samples=tuple(samples))
        return await self._persist(fresh, blob.revision if blob else None, now)

    async def _persist(
        self,
        fresh: ForecastCacheEntry,
        revision: str | None,
        now: datetime,
    ) -> ForecastCacheEntry:
        data = fresh.to_json_bytes()
        for attempt in (1, 2):
            try:
                await self._store.put(self.key, data, revision)
                logger.info(
                    "Stored forecast %s with %d samples", self.key, len(fresh.samples),
                )
                return fresh
            except CacheWriteConflict as exc:
                logger.info("Forecast cache write conflict (attempt %d): %s", attempt, exc)
                blob, current = await self._read()
                if self._is_fresh(current, now):
                    return current  # type: ignore[return-value]
                revision = blob.revision if blob else None
            except MarineBoardError as exc:
                logger.warning("Could not persist forecast %s: %s", self.key, exc)
                return fresh
        # Lost twice: use whatever is current, falling back to our own fetch
        _, current = await self._read()
        return current or fresh

    async def close(self) -> None:
        """Close the wave adapter's HTTP connection."""
        await self._adapter.close()
