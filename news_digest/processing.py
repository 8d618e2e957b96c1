"""Per-category cleaning of aggregated articles."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

from .config import ProcessorConfig
from .models import Article


class ArticleProcessor:
    """Deduplicate, filter by age, sort newest first and cap a category."""

    def __init__(self, config: ProcessorConfig) -> None:
        self.config = config
        self.max_age = config.max_age.as_timedelta()

    @staticmethod
    def deduplicate(articles: Sequence[Article]) -> List[Article]:
        """Collapse articles sharing a link.

        The last article seen for a link wins, but it keeps the position
        where that link first appeared.
        """

        by_link: Dict[str, Article] = {}
        for article in articles:
            by_link[article.link] = article
        return list(by_link.values())

    def process(self, articles: Sequence[Article], now: Optional[datetime] = None) -> List[Article]:
        if now is None:
            now = datetime.now(timezone.utc)
        cutoff = now - self.max_age

        recent = [
            article
            for article in self.deduplicate(articles)
            if article.published_at is not None and article.published_at >= cutoff
        ]
        recent.sort(key=lambda article: article.published_at, reverse=True)
        return recent[: self.config.max_per_category]


__all__ = ["ArticleProcessor"]
