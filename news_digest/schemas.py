"""Pydantic schemas for HTTP response payloads."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from .models import CacheInfo, CachePayload, RunStats


class ArticleSchema(BaseModel):
    title: Optional[str]
    link: str
    pubDate: Optional[str] = Field(None, description="ISO-8601 publish date")
    source: str
    description: str = ""


class FeedErrorSchema(BaseModel):
    category: str
    url: str
    error: str


class RunStatsSchema(BaseModel):
    elapsedMs: int = Field(..., description="Wall-clock time of the fetch fan-out")
    feedsTotal: int
    feedsSucceeded: int
    feedsFailed: int
    errors: List[FeedErrorSchema] = Field(default_factory=list)

    @classmethod
    def from_stats(cls, stats: RunStats) -> "RunStatsSchema":
        return cls(**stats.to_dict())


class NewsResponse(BaseModel):
    lastUpdated: str
    stats: RunStatsSchema
    categories: Dict[str, List[ArticleSchema]]

    @classmethod
    def from_payload(cls, payload: CachePayload) -> "NewsResponse":
        data = payload.to_dict()
        return cls(lastUpdated=data["lastUpdated"], stats=data["stats"], categories=data["categories"])


class RefreshResponse(BaseModel):
    message: str
    lastUpdated: str
    stats: RunStatsSchema


class CacheInfoSchema(BaseModel):
    exists: bool
    lastUpdated: Optional[str] = None
    ageMs: Optional[int] = None
    ageHours: Optional[float] = None
    isStale: Optional[bool] = None
    stats: Optional[RunStatsSchema] = None

    @classmethod
    def from_info(cls, info: CacheInfo) -> "CacheInfoSchema":
        return cls(
            exists=info.exists,
            lastUpdated=info.last_updated,
            ageMs=info.age_ms,
            ageHours=info.age_hours,
            isStale=info.is_stale,
            stats=RunStatsSchema.from_stats(info.stats) if info.stats else None,
        )


class StatusResponse(BaseModel):
    status: str = "ok"
    uptime: float = Field(..., description="Seconds since the API started")
    cache: CacheInfoSchema


class ErrorResponse(BaseModel):
    error: str


__all__ = [
    "ArticleSchema",
    "CacheInfoSchema",
    "ErrorResponse",
    "FeedErrorSchema",
    "NewsResponse",
    "RefreshResponse",
    "RunStatsSchema",
    "StatusResponse",
]
