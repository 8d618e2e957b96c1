"""FastAPI application serving the cached news digest."""

from __future__ import annotations

import logging
import time
from typing import Optional

from fastapi import Depends, FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .cache import NewsCache
from .schemas import (
    CacheInfoSchema,
    ErrorResponse,
    NewsResponse,
    RefreshResponse,
    RunStatsSchema,
    StatusResponse,
)

LOGGER = logging.getLogger(__name__)

CACHE_CONTROL = "s-maxage=86400, stale-while-revalidate"


def create_app(cache: NewsCache, started_at: Optional[float] = None) -> FastAPI:
    app = FastAPI(title="News Digest", version="1.0.0")
    started = time.monotonic() if started_at is None else started_at

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    def get_cache() -> NewsCache:
        return cache

    @app.get(
        "/news",
        response_model=NewsResponse,
        responses={500: {"model": ErrorResponse}},
    )
    def get_news(response: Response, service: NewsCache = Depends(get_cache)):
        try:
            payload = service.get()
        except Exception:
            LOGGER.exception("Failed to serve news")
            return JSONResponse(status_code=500, content={"error": "Failed to fetch news"})
        response.headers["Cache-Control"] = CACHE_CONTROL
        return NewsResponse.from_payload(payload)

    @app.post(
        "/news/refresh",
        response_model=RefreshResponse,
        responses={500: {"model": ErrorResponse}},
    )
    def refresh_news(service: NewsCache = Depends(get_cache)):
        try:
            payload = service.refresh()
        except Exception:
            LOGGER.exception("Forced refresh failed")
            return JSONResponse(status_code=500, content={"error": "Failed to refresh news"})
        return RefreshResponse(
            message="News cache refreshed",
            lastUpdated=payload.last_updated,
            stats=RunStatsSchema.from_stats(payload.stats),
        )

    @app.get("/status", response_model=StatusResponse, response_model_exclude_none=True)
    def status(service: NewsCache = Depends(get_cache)) -> StatusResponse:
        return StatusResponse(
            status="ok",
            uptime=round(time.monotonic() - started, 3),
            cache=CacheInfoSchema.from_info(service.get_info()),
        )

    return app


__all__ = ["CACHE_CONTROL", "create_app"]
