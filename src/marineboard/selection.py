"""Selection of the forecast sample to display for a given instant."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from enum import Enum

from marineboard.models.forecast import ForecastSample


class SelectionStrategy(str, Enum):
    """How to pick a sample relative to the target instant."""

    NEAREST = "nearest"
    LATEST_NOT_AFTER = "latest_not_after"


def _all_null(samples: Sequence[ForecastSample]) -> bool:
    return all(sample.wave_height is None for sample in samples)


def select_nearest(samples: Sequence[ForecastSample], target: datetime) -> ForecastSample | None:
    """Return the sample closest in time to *target*; ties go to the earlier one."""
    if not samples or _all_null(samples):
        return None
    return min(samples, key=lambda s: (abs(s.timestamp - target), s.timestamp))


def select_latest_not_after(
    samples: Sequence[ForecastSample], target: datetime,
) -> ForecastSample | None:
    """Return the most recent sample whose timestamp is at or before *target*."""
    if not samples or _all_null(samples):
        return None
    past = [sample for sample in samples if sample.timestamp <= target]
    if not past:
        return None
    return max(past, key=lambda s: s.timestamp)


_STRATEGIES = {
    SelectionStrategy.NEAREST: select_nearest,
    SelectionStrategy.LATEST_NOT_AFTER: select_latest_not_after,
}


def select_sample(
    samples: Sequence[ForecastSample],
    target: datetime,
    strategy: SelectionStrategy | str = SelectionStrategy.NEAREST,
) -> ForecastSample | None:
    """Pick a sample from *samples* for *target* using the named strategy."""
    return _STRATEGIES[SelectionStrategy(strategy)](samples, target)
