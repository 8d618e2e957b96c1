"""Fan-out/fan-in of feed fetches across all categories."""

from __future__ import annotations

import concurrent.futures as futures
import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Dict, List, Mapping, Optional, Sequence, TYPE_CHECKING

from .fetching import FeedFetcher
from .models import Article, CategoryBucket, FeedFailure, FeedJob, FeedOutcome, FeedSuccess, RunStats
from .processing import ArticleProcessor

if TYPE_CHECKING:
    from .progress import StageHandle

LOGGER = logging.getLogger(__name__)


@dataclass
class AggregationResult:
    categories: CategoryBucket
    stats: RunStats


def build_jobs(sources: Mapping[str, Sequence[str]]) -> List[FeedJob]:
    return [FeedJob(category=category, url=url) for category, urls in sources.items() for url in urls]


class Aggregator:
    """Run the fetcher over every (category, url) pair and clean each bucket."""

    def __init__(
        self,
        fetcher: FeedFetcher,
        processor: ArticleProcessor,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.fetcher = fetcher
        self.processor = processor
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def _settle(self, job: FeedJob, future: "futures.Future[FeedOutcome]") -> FeedOutcome:
        try:
            return future.result()
        except Exception as exc:
            LOGGER.exception("Unexpected error fetching %s", job.url)
            return FeedFailure(category=job.category, url=job.url, error=str(exc) or "Unknown error")

    def run_all(
        self,
        sources: Mapping[str, Sequence[str]],
        stage: Optional["StageHandle"] = None,
    ) -> AggregationResult:
        jobs = build_jobs(sources)
        raw: Dict[str, List[Article]] = {category: [] for category in sources}
        errors: List[Dict[str, str]] = []
        succeeded = 0
        max_per_feed = self.fetcher.config.max_per_feed

        LOGGER.info("Fetching %d feeds across %d categories", len(jobs), len(raw))
        if stage is not None:
            stage.set_total(len(jobs))

        started = time.monotonic()
        outcomes: List[FeedOutcome] = []
        if jobs:
            with futures.ThreadPoolExecutor(max_workers=len(jobs)) as pool:
                pending = [pool.submit(self.fetcher.fetch, job) for job in jobs]
                for _ in futures.as_completed(pending):
                    if stage is not None:
                        stage.advance(1)
            # Merge in registry order so duplicate resolution is deterministic.
            outcomes = [self._settle(job, fut) for job, fut in zip(jobs, pending)]
        elapsed_ms = int((time.monotonic() - started) * 1000)

        for job, outcome in zip(jobs, outcomes):
            if isinstance(outcome, FeedSuccess):
                succeeded += 1
                raw[job.category].extend(outcome.articles[:max_per_feed])
            else:
                errors.append(outcome.to_dict())

        now = self._clock()
        categories: CategoryBucket = {
            category: self.processor.process(articles, now=now) for category, articles in raw.items()
        }

        stats = RunStats(
            elapsed_ms=elapsed_ms,
            feeds_total=len(jobs),
            feeds_succeeded=succeeded,
            feeds_failed=len(errors),
            errors=errors,
        )
        LOGGER.info("Fetch complete in %dms, %d/%d feeds OK", elapsed_ms, succeeded, len(jobs))
        if errors:
            LOGGER.warning("Feed errors: %s", errors)
        return AggregationResult(categories=categories, stats=stats)


__all__ = ["AggregationResult", "Aggregator", "build_jobs"]
