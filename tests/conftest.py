"""Shared fixtures for the news digest tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from email.utils import format_datetime
from typing import Iterable, Optional, Tuple

import pytest

from news_digest.models import Article

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime = NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def make_article():
    def _make(
        link: str,
        published_at: Optional[datetime] = NOW,
        source: str = "Example Wire",
        title: Optional[str] = None,
    ) -> Article:
        return Article(
            title=title or f"Story {link}",
            link=link,
            published_at=published_at,
            source=source,
            description="",
        )

    return _make


@pytest.fixture()
def rss_feed():
    """Render ``(title, link, published)`` tuples as an RSS 2.0 document."""

    def _render(items: Iterable[Tuple[str, str, Optional[datetime]]]) -> bytes:
        parts = []
        for title, link, published in items:
            pub = f"<pubDate>{format_datetime(published)}</pubDate>" if published else ""
            parts.append(f"<item><title>{title}</title><link>{link}</link>{pub}</item>")
        body = "".join(parts)
        return (
            '<?xml version="1.0" encoding="UTF-8"?>'
            f'<rss version="2.0"><channel><title>Test feed</title>{body}</channel></rss>'
        ).encode("utf-8")

    return _render
