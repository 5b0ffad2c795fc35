"""Basic usage examples for marineboard."""

import asyncio
from datetime import date

from marineboard import Coordinate, build_aggregator
from marineboard.adapters import BuoyAdapter, SunAdapter, TideAdapter
from marineboard.config import Settings


async def main() -> None:
    # Single sources
    async with BuoyAdapter() as buoys:
        print("=== Buoy BZST2 ===")
        obs = await buoys.fetch("BZST2")
        print(f"  Air: {obs.air_temp}°F, Water: {obs.water_temp}°F")
        print(f"  Wind: {obs.wind_speed} kts {obs.wind_direction}, gusting {obs.gust_speed} kts")

    async with TideAdapter() as tides:
        print("\n=== Tides at 8779750 ===")
        summary = await tides.fetch("8779750")
        for label, prediction in (("High", summary.high), ("Low", summary.low)):
            if prediction is not None:
                print(f"  {label}: {prediction.time:%H:%M} ({prediction.height:.2f} ft)")

    sun = await SunAdapter().fetch(Coordinate(26.07139, -97.12872), date.today())
    print(f"\n=== Sun ===\n  Rise {sun.sunrise}, set {sun.sunset}")

    # Everything at once; the wave forecast needs MARINEBOARD_STORMGLASS_API_KEY
    print("\n=== Board snapshot ===")
    async with build_aggregator(Settings()) as aggregator:
        response = await aggregator.aggregate()
    print(f"  Waves: {response.waves.wave_height} ft")
    if response.degraded:
        print(f"  Degraded: {', '.join(response.degraded)}")


if __name__ == "__main__":
    asyncio.run(main())
