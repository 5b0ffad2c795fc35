"""marineboard — Marine weather aggregation for a public display board."""

from marineboard._params import Coordinate
from marineboard.aggregator import Aggregator, build_aggregator
from marineboard.cache import BoundaryCrossingPolicy, ElapsedTimePolicy, ForecastCache
from marineboard.exceptions import (
    CacheWriteConflict,
    EmptyResult,
    MalformedReport,
    MalformedResponse,
    MarineBoardError,
    SourceTimeout,
    SourceUnavailable,
    UpstreamHTTPError,
)
from marineboard.selection import SelectionStrategy, select_sample

__all__ = [
    "Aggregator",
    "BoundaryCrossingPolicy",
    "CacheWriteConflict",
    "Coordinate",
    "ElapsedTimePolicy",
    "EmptyResult",
    "ForecastCache",
    "MalformedReport",
    "MalformedResponse",
    "MarineBoardError",
    "SelectionStrategy",
    "SourceTimeout",
    "SourceUnavailable",
    "UpstreamHTTPError",
    "build_aggregator",
    "select_sample",
]

__version__ = "0.1.0"
