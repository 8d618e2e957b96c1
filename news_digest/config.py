"""Configuration helpers for the news digest service."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Optional
import os
import re


_DURATION_RE = re.compile(r"(\d+)\s*([smhdw])")
_UNIT_KEYWORDS = {"s": "seconds", "m": "minutes", "h": "hours", "d": "days", "w": "weeks"}


@dataclass
class TimeWindowConfig:
    """Duration expressed as a compact string such as ``"24h"`` or ``"30d"``."""

    since: str = "30d"

    def as_timedelta(self) -> timedelta:
        match = _DURATION_RE.fullmatch(self.since.strip().lower())
        if match is None:
            raise ValueError(
                f"invalid duration {self.since!r}; expected a count and one of s, m, h, d, w"
            )
        amount, unit = match.groups()
        return timedelta(**{_UNIT_KEYWORDS[unit]: int(amount)})


@dataclass
class FetcherConfig:
    """Configuration for the feed fetcher."""

    timeout: float = 10.0
    retries: int = 2
    retry_delay: float = 1.5
    user_agent: str = "Mozilla/5.0 (compatible; NewsScraper/1.0)"
    max_per_feed: int = 5


@dataclass
class ProcessorConfig:
    """Per-category cleaning limits."""

    max_age: TimeWindowConfig = field(default_factory=lambda: TimeWindowConfig(since="30d"))
    max_per_category: int = 8


@dataclass
class CacheConfig:
    """Where the snapshot lives and how long it stays fresh."""

    ttl: TimeWindowConfig = field(default_factory=lambda: TimeWindowConfig(since="24h"))
    path: Path = Path(".cache/news.json")


@dataclass
class DigestConfig:
    """Top-level configuration for the service."""

    fetcher: FetcherConfig = field(default_factory=FetcherConfig)
    processor: ProcessorConfig = field(default_factory=ProcessorConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    sources_path: Optional[Path] = None
    api_host: str = "0.0.0.0"
    api_port: int = 8080
    refresh_interval_seconds: int = 86400


def _positive_int(name: str, default: str) -> int:
    value = int(os.getenv(name, default))
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def load_config() -> DigestConfig:
    """Load configuration from environment variables with sensible defaults."""

    timeout = float(os.getenv("FEED_TIMEOUT_SECONDS", "10"))
    retries = int(os.getenv("FEED_RETRIES", "2"))
    if retries < 0:
        raise ValueError(f"FEED_RETRIES must not be negative, got {retries}")
    retry_delay = float(os.getenv("FEED_RETRY_DELAY_SECONDS", "1.5"))
    user_agent = os.getenv("FEED_USER_AGENT", FetcherConfig.user_agent)
    max_per_feed = _positive_int("MAX_ARTICLES_PER_FEED", "5")
    max_per_category = _positive_int("MAX_ARTICLES_PER_CATEGORY", "8")
    max_age = TimeWindowConfig(since=os.getenv("MAX_ARTICLE_AGE", "30d"))
    ttl = TimeWindowConfig(since=os.getenv("CACHE_TTL", "24h"))
    cache_path = Path(os.getenv("CACHE_PATH", ".cache/news.json"))
    sources_env = os.getenv("SOURCES_PATH")
    sources_path = Path(sources_env).expanduser() if sources_env else None
    api_host = os.getenv("API_HOST", "0.0.0.0")
    api_port = int(os.getenv("PORT", "8080"))
    refresh_interval = int(os.getenv("REFRESH_INTERVAL_SECONDS", "86400"))

    # Fail early on malformed durations.
    max_age.as_timedelta()
    ttl.as_timedelta()

    return DigestConfig(
        fetcher=FetcherConfig(
            timeout=timeout,
            retries=retries,
            retry_delay=retry_delay,
            user_agent=user_agent,
            max_per_feed=max_per_feed,
        ),
        processor=ProcessorConfig(max_age=max_age, max_per_category=max_per_category),
        cache=CacheConfig(ttl=ttl, path=cache_path),
        sources_path=sources_path,
        api_host=api_host,
        api_port=api_port,
        refresh_interval_seconds=refresh_interval,
    )


__all__ = [
    "CacheConfig",
    "DigestConfig",
    "FetcherConfig",
    "ProcessorConfig",
    "TimeWindowConfig",
    "load_config",
]
