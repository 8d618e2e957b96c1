"""Wiring of the fetch, aggregate and cache components."""

from __future__ import annotations

from functools import partial
from typing import Optional

import httpx

from .aggregation import Aggregator
from .cache import NewsCache
from .config import DigestConfig
from .fetching import FeedFetcher
from .processing import ArticleProcessor
from .sources import load_sources
from .storage import JsonFileStore, SnapshotStore


def build_news_cache(
    config: DigestConfig,
    store: Optional[SnapshotStore] = None,
    client: Optional[httpx.Client] = None,
) -> NewsCache:
    """Assemble a :class:`NewsCache` from configuration.

    The source registry is re-read on every aggregation run, so a broken
    sources file surfaces as a failed refresh rather than a startup crash.
    """

    fetcher = FeedFetcher(config.fetcher, client=client)
    processor = ArticleProcessor(config.processor)
    aggregator = Aggregator(fetcher, processor)
    return NewsCache(
        aggregator,
        sources=partial(load_sources, config.sources_path),
        store=store or JsonFileStore(config.cache.path),
        ttl=config.cache.ttl.as_timedelta(),
    )


__all__ = ["build_news_cache"]
