"""Cached, category-grouped news digest built from RSS feeds."""

from .aggregation import AggregationResult, Aggregator
from .cache import NewsCache
from .config import DigestConfig, load_config
from .fetching import FeedFetcher
from .processing import ArticleProcessor
from .service import build_news_cache
from .storage import JsonFileStore, MemoryStore

__all__ = [
    "AggregationResult",
    "Aggregator",
    "ArticleProcessor",
    "DigestConfig",
    "FeedFetcher",
    "JsonFileStore",
    "MemoryStore",
    "NewsCache",
    "build_news_cache",
    "load_config",
]
