#!/usr/bin/env python3
"""
marineboard CLI.

Usage:
    marineboard serve [--host HOST] [--port PORT]
    marineboard snapshot
    marineboard refresh-forecast

``refresh-forecast`` is the scheduled job (midnight and noon local) that
forces a new wave forecast into the cache store.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys

from marineboard._logging import configure_logging
from marineboard.aggregator import build_aggregator, build_forecast_cache, build_store
from marineboard.config import Settings, get_settings
from marineboard.exceptions import MarineBoardError


async def _snapshot(settings: Settings) -> dict:
    async with build_aggregator(settings) as aggregator:
        response = await aggregator.aggregate()
    return response.to_payload()


async def _refresh(settings: Settings) -> dict:
    store = build_store(settings)
    cache = build_forecast_cache(settings, store)
    try:
        entry = await cache.refresh()
    finally:
        await cache.close()
        await store.close()
    return {
        "ok": True,
        "fetchedAt": entry.fetched_at.isoformat(),
        "samples": len(entry.samples),
    }


def serve(settings: Settings, host: str | None, port: int | None) -> None:
    """Run the HTTP service with uvicorn."""
    import uvicorn

    from marineboard.app import create_app

    uvicorn.run(
        create_app(settings),
        host=host or settings.api_host,
        port=port or settings.api_port,
        log_level=settings.log_level,
    )


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="marineboard",
        description="Marine conditions aggregator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP service")
    serve_parser.add_argument("--host", default=None)
    serve_parser.add_argument("--port", type=int, default=None)

    subparsers.add_parser("snapshot", help="Print one aggregate response as JSON")
    subparsers.add_parser("refresh-forecast", help="Force a wave forecast refresh")

    args = parser.parse_args(argv)
    settings = get_settings()
    configure_logging(settings.log_level)

    if args.command == "serve":
        serve(settings, args.host, args.port)
        return 0
    if args.command == "snapshot":
        print(json.dumps(asyncio.run(_snapshot(settings)), indent=2))
        return 0

    try:
        result = asyncio.run(_refresh(settings))
    except MarineBoardError as exc:
        print(json.dumps({"ok": False, "error": str(exc)}), file=sys.stderr)
        return 1
    print(json.dumps(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())
