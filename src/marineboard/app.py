"""HTTP service boundary: one read endpoint for the display board."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from marineboard.aggregator import Aggregator, build_aggregator
from marineboard.config import Settings, get_settings
from marineboard.models.aggregate import AggregateResponse

logger = logging.getLogger(__name__)


def cors_headers(origin: str = "*") -> dict[str, str]:
    return {
        "Access-Control-Allow-Origin": origin,
        "Access-Control-Allow-Methods": "GET, OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type",
    }


def create_app(
    settings: Settings | None = None,
    aggregator: Aggregator | None = None,
) -> FastAPI:
    """
    Application factory for the marineboard service.

    When *aggregator* is omitted one is built from *settings* at startup and
    closed at shutdown.
    """
    settings = settings or get_settings()
    headers = cors_headers(settings.cors_origin)

    @asynccontextmanager
    async def lifespan(application: FastAPI) -> AsyncIterator[None]:
        if aggregator is not None:
            yield
            return
        application.state.aggregator = build_aggregator(settings)
        try:
            yield
        finally:
            await application.state.aggregator.aclose()

    application = FastAPI(
        title="marineboard",
        description="Marine conditions for the display board",
        version="0.1.0",
        lifespan=lifespan,
    )
    if aggregator is not None:
        application.state.aggregator = aggregator

    @application.options("/weather")
    async def weather_preflight() -> Response:
        return Response(status_code=204, headers=headers)

    @application.get("/weather")
    async def weather(request: Request) -> JSONResponse:
        agg: Aggregator = request.app.state.aggregator
        try:
            response = await agg.aggregate()
            payload = response.to_payload()
        except Exception as exc:
            logger.exception("Failed to build weather response")
            fallback = AggregateResponse.empty(agg.buoy_stations, error=str(exc))
            return JSONResponse(fallback.to_payload(), status_code=500, headers=headers)
        return JSONResponse(payload, headers=headers)

    @application.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return application
