"""Feed fetching for the news digest pipeline."""

from __future__ import annotations

import logging
import re
import time
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

import feedparser
import httpx

from .config import FetcherConfig
from .models import Article, FeedFailure, FeedJob, FeedOutcome, FeedSuccess, parse_datetime

LOGGER = logging.getLogger(__name__)

DEFAULT_SOURCE_LABEL = "Google News"
ACCEPT_HEADER = "application/rss+xml, application/xml, text/xml"

_TAG_RE = re.compile(r"<[^>]+>")
_WS_RE = re.compile(r"\s+")
_TITLE_SOURCE_RE = re.compile(r" - ([^-]+)$")


class FeedError(Exception):
    """Raised when a feed response cannot be turned into entries."""


def clean_text(text: Optional[str]) -> str:
    if not text:
        return ""
    text = _TAG_RE.sub(" ", text)
    return _WS_RE.sub(" ", text).strip()


def extract_source(title: Optional[str]) -> str:
    """Pull the publisher from a ``"Headline - Publisher"`` title."""

    if not title:
        return DEFAULT_SOURCE_LABEL
    match = _TITLE_SOURCE_RE.search(title)
    return match.group(1).strip() if match else DEFAULT_SOURCE_LABEL


class FeedFetcher:
    """Retrieve a single feed with a per-attempt timeout and bounded retries."""

    def __init__(
        self,
        config: FetcherConfig,
        client: Optional[httpx.Client] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config
        self._client = client or httpx.Client(
            timeout=config.timeout,
            follow_redirects=True,
            headers={"User-Agent": config.user_agent, "Accept": ACCEPT_HEADER},
        )
        self._sleep = sleep

    def close(self) -> None:
        self._client.close()

    def retry_delay(self, attempt: int) -> float:
        """Seconds to wait after the failed attempt with 0-based index ``attempt``."""

        return self.config.retry_delay * (2 ** attempt)

    def fetch(self, job: FeedJob) -> FeedOutcome:
        """Fetch ``job.url``; failures are returned, never raised."""

        retries = self.config.retries
        last_error = "unknown error"
        for attempt in range(retries + 1):
            try:
                entries = self._fetch_entries(job.url)
            except Exception as exc:
                last_error = str(exc) or exc.__class__.__name__
                if attempt < retries:
                    delay = self.retry_delay(attempt)
                    LOGGER.warning(
                        "Retry %d/%d for %s in %.1fs: %s",
                        attempt + 1,
                        retries,
                        job.url,
                        delay,
                        last_error,
                    )
                    self._sleep(delay)
                continue
            capped = entries[: self.config.max_per_feed]
            articles = [article for article in map(self._map_entry, capped) if article is not None]
            return FeedSuccess(job=job, articles=articles)
        return FeedFailure(category=job.category, url=job.url, error=last_error)

    def _fetch_entries(self, url: str) -> List[Any]:
        response = self._client.get(url, timeout=self.config.timeout)
        response.raise_for_status()
        parsed = feedparser.parse(response.content)
        entries = list(getattr(parsed, "entries", []) or [])
        if parsed.get("bozo") and not entries and not parsed.get("version"):
            raise FeedError(f"unreadable feed: {parsed.get('bozo_exception')!r}")
        return entries

    @staticmethod
    def _best_entry_datetime(entry: Dict[str, Any]) -> Optional[datetime]:
        for key in ("published", "pubDate", "updated", "dc_date"):
            dt = parse_datetime(entry.get(key))
            if dt is not None:
                return dt
        for key in ("published_parsed", "updated_parsed"):
            value = entry.get(key)
            if not value:
                continue
            try:
                return datetime(*value[:6], tzinfo=timezone.utc)
            except (TypeError, ValueError):
                continue
        return None

    def _map_entry(self, entry: Dict[str, Any]) -> Optional[Article]:
        link = entry.get("link")
        if not link:
            return None
        title = entry.get("title")
        source = entry.get("source") or {}
        source_title = source.get("title") if isinstance(source, dict) else None

        description = entry.get("summary") or ""
        if not description and entry.get("content"):
            description = entry["content"][0].get("value", "")

        return Article(
            title=title,
            link=str(link),
            published_at=self._best_entry_datetime(entry),
            source=source_title or extract_source(title),
            description=clean_text(description),
        )


__all__ = ["FeedError", "FeedFetcher", "clean_text", "extract_source"]
