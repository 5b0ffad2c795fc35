"""Source adapters, one per upstream."""

from marineboard.adapters.base import SourceAdapter
from marineboard.adapters.buoy import BuoyAdapter, observation_from_report
from marineboard.adapters.sun import SunAdapter, SunriseSunsetAdapter, compute_sun_times
from marineboard.adapters.tides import TideAdapter, summary_from_payload
from marineboard.adapters.waves import WaveForecastAdapter, samples_from_payload

__all__ = [
    "BuoyAdapter",
    "SourceAdapter",
    "SunAdapter",
    "SunriseSunsetAdapter",
    "TideAdapter",
    "WaveForecastAdapter",
    "compute_sun_times",
    "observation_from_report",
    "samples_from_payload",
    "summary_from_payload",
]
