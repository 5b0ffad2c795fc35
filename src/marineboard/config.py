"""
Configuration management for marineboard.
Loads environment variables (prefix ``MARINEBOARD_``) and provides typed settings.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from marineboard.selection import SelectionStrategy


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ========================================================================
    # Monitored locations
    # ========================================================================
    buoy_stations: dict[str, str] = {"gulf": "BZST2", "bay": "PCGT2"}
    tide_station: str = "8779750"
    wave_lat: float = 26.071389
    wave_lon: float = -97.128722
    sun_lat: float = 26.07139
    sun_lon: float = -97.12872
    local_time_zone: str = "America/Chicago"
    compass_points: int = 8

    # ========================================================================
    # Upstreams
    # ========================================================================
    ndbc_base_url: str = "https://www.ndbc.noaa.gov"
    stormglass_base_url: str = "https://api.stormglass.io"
    stormglass_api_key: str | None = None
    stormglass_source: str = "sg"
    tides_base_url: str = "https://api.tidesandcurrents.noaa.gov"
    tide_upstream_time_zone: Literal["gmt", "lst_ldt"] = "gmt"
    sun_source: Literal["computed", "api"] = "computed"
    sunrise_sunset_base_url: str = "https://api.sunrise-sunset.org"
    request_timeout: float = 10.0
    aggregate_deadline: float = 15.0

    # ========================================================================
    # Forecast cache
    # ========================================================================
    cache_policy: Literal["elapsed", "boundary"] = "elapsed"
    cache_max_age_hours: float = 4.0
    serve_stale_on_error: bool = True
    selection_strategy: SelectionStrategy = SelectionStrategy.NEAREST
    cache_backend: Literal["memory", "file", "github"] = "memory"
    cache_key: str = "stormglass.json"
    cache_dir: str = ".cache"
    github_repo: str | None = None
    github_branch: str = "main"
    github_token: str | None = None
    github_api_url: str = "https://api.github.com"

    # ========================================================================
    # Service
    # ========================================================================
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    cors_origin: str = "*"
    log_level: str = "info"

    model_config = SettingsConfigDict(
        env_prefix="MARINEBOARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Application settings
    """
    return Settings()
