"""Core data models for the news digest."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from dateutil import parser as dtparse


def parse_datetime(value: Any) -> Optional[datetime]:
    """Parse a date string into an aware UTC datetime, or ``None``."""

    if not value:
        return None
    try:
        dt = dtparse.parse(str(value))
    except (ValueError, OverflowError):
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


@dataclass
class Article:
    """A single feed item as retained in the digest."""

    title: Optional[str]
    link: str
    published_at: Optional[datetime]
    source: str
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "link": self.link,
            "pubDate": self.published_at.isoformat() if self.published_at else None,
            "source": self.source,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Article":
        if not isinstance(data, dict):
            raise TypeError(f"article must be an object, got {type(data).__name__}")
        return cls(
            title=data.get("title"),
            link=data["link"],
            published_at=parse_datetime(data.get("pubDate")),
            source=data.get("source") or "",
            description=data.get("description") or "",
        )


@dataclass(frozen=True)
class FeedJob:
    """One unit of fetch work."""

    category: str
    url: str


@dataclass
class FeedSuccess:
    job: FeedJob
    articles: List[Article]
    ok: bool = field(default=True, init=False)


@dataclass
class FeedFailure:
    category: str
    url: str
    error: str
    ok: bool = field(default=False, init=False)

    def to_dict(self) -> Dict[str, str]:
        return {"category": self.category, "url": self.url, "error": self.error}


FeedOutcome = Union[FeedSuccess, FeedFailure]
CategoryBucket = Dict[str, List[Article]]


@dataclass
class RunStats:
    """Counters collected over one aggregation run."""

    elapsed_ms: int
    feeds_total: int
    feeds_succeeded: int
    feeds_failed: int
    errors: List[Dict[str, str]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "elapsedMs": self.elapsed_ms,
            "feedsTotal": self.feeds_total,
            "feedsSucceeded": self.feeds_succeeded,
            "feedsFailed": self.feeds_failed,
            "errors": [dict(error) for error in self.errors],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RunStats":
        return cls(
            elapsed_ms=int(data["elapsedMs"]),
            feeds_total=int(data["feedsTotal"]),
            feeds_succeeded=int(data["feedsSucceeded"]),
            feeds_failed=int(data["feedsFailed"]),
            errors=[dict(error) for error in data.get("errors") or []],
        )


@dataclass
class CachePayload:
    """Result of a completed aggregation run, as served and persisted."""

    timestamp: int
    last_updated: str
    stats: RunStats
    categories: CategoryBucket

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "lastUpdated": self.last_updated,
            "stats": self.stats.to_dict(),
            "categories": {
                name: [article.to_dict() for article in articles]
                for name, articles in self.categories.items()
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CachePayload":
        categories = data["categories"]
        if not isinstance(categories, dict):
            raise TypeError("categories must be an object")
        if not all(isinstance(items, list) for items in categories.values()):
            raise TypeError("each category must be a list of articles")
        return cls(
            timestamp=int(data["timestamp"]),
            last_updated=str(data["lastUpdated"]),
            stats=RunStats.from_dict(data["stats"]),
            categories={
                str(name): [Article.from_dict(item) for item in items]
                for name, items in categories.items()
            },
        )


@dataclass
class CacheInfo:
    """Read-only view of the durable cache state."""

    exists: bool
    last_updated: Optional[str] = None
    age_ms: Optional[int] = None
    age_hours: Optional[float] = None
    is_stale: Optional[bool] = None
    stats: Optional[RunStats] = None


__all__ = [
    "Article",
    "CacheInfo",
    "CachePayload",
    "CategoryBucket",
    "FeedFailure",
    "FeedJob",
    "FeedOutcome",
    "FeedSuccess",
    "RunStats",
    "parse_datetime",
]
