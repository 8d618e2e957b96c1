"""Tests for the concurrent aggregator."""

import threading
from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from news_digest.aggregation import Aggregator, build_jobs
from news_digest.config import FetcherConfig, ProcessorConfig
from news_digest.models import FeedFailure, FeedJob, FeedSuccess
from news_digest.processing import ArticleProcessor

from conftest import NOW


class StubFetcher:
    """Return canned outcomes per URL; callables are invoked with the job."""

    def __init__(self, responses):
        self.config = FetcherConfig()
        self.responses = responses
        self.calls = []

    def fetch(self, job):
        self.calls.append(job)
        response = self.responses[job.url]
        if callable(response):
            return response(job)
        return response


def success(job, articles):
    return FeedSuccess(job=job, articles=articles)


@pytest.fixture()
def processor():
    return ArticleProcessor(ProcessorConfig())


class TestAggregator:
    def test_build_jobs_preserves_registry_order(self):
        jobs = build_jobs({"A": ["a1", "a2"], "B": ["b1"]})

        assert jobs == [FeedJob("A", "a1"), FeedJob("A", "a2"), FeedJob("B", "b1")]

    def test_each_feed_contributes_at_most_five(self, processor, make_article):
        articles = [make_article(f"L{i}", NOW - timedelta(minutes=i)) for i in range(7)]
        fetcher = StubFetcher({"f1": lambda job: success(job, articles)})

        result = Aggregator(fetcher, processor, clock=lambda: NOW).run_all({"X": ["f1"]})

        assert [a.link for a in result.categories["X"]] == ["L0", "L1", "L2", "L3", "L4"]

    def test_overlap_resolved_in_registry_order(self, processor, make_article):
        def feed(name, links):
            return lambda job: success(job, [make_article(link, source=name) for link in links])

        fetcher = StubFetcher(
            {
                "f1": feed("feed1", ["L1", "L2", "L3", "L4", "L5"]),
                "f2": feed("feed2", ["L3", "L4", "L5", "L6", "L7"]),
            }
        )

        result = Aggregator(fetcher, processor, clock=lambda: NOW).run_all({"X": ["f1", "f2"]})

        category = result.categories["X"]
        assert len(category) == 7
        assert len({a.link for a in category}) == 7
        assert {a.link: a.source for a in category}["L3"] == "feed2"

    def test_failures_are_isolated_and_counted(self, processor, make_article):
        def boom(job):
            raise RuntimeError("parser exploded")

        fetcher = StubFetcher(
            {
                "ok": lambda job: success(job, [make_article("L1")]),
                "down": FeedFailure(category="X", url="down", error="503"),
                "boom": boom,
            }
        )

        result = Aggregator(fetcher, processor, clock=lambda: NOW).run_all(
            {"X": ["ok", "down"], "Y": ["boom"]}
        )

        stats = result.stats
        assert stats.feeds_total == 3
        assert stats.feeds_succeeded == 1
        assert stats.feeds_failed == 2
        assert {"category": "X", "url": "down", "error": "503"} in stats.errors
        assert {"category": "Y", "url": "boom", "error": "parser exploded"} in stats.errors
        assert [a.link for a in result.categories["X"]] == ["L1"]
        assert result.categories["Y"] == []

    def test_all_feeds_run_concurrently(self, processor):
        urls = [f"f{i}" for i in range(6)]
        barrier = threading.Barrier(len(urls), timeout=5)

        def rendezvous(job):
            barrier.wait()
            return success(job, [])

        fetcher = StubFetcher({url: rendezvous for url in urls})

        result = Aggregator(fetcher, processor).run_all({"X": urls[:3], "Y": urls[3:]})

        assert result.stats.feeds_succeeded == 6
        assert result.stats.errors == []

    def test_empty_registry(self, processor):
        result = Aggregator(StubFetcher({}), processor).run_all({})

        assert result.categories == {}
        assert result.stats.feeds_total == 0
        assert result.stats.elapsed_ms >= 0

    def test_category_without_feeds_is_empty(self, processor):
        result = Aggregator(StubFetcher({}), processor).run_all({"Quiet": []})

        assert result.categories == {"Quiet": []}

    def test_progress_stage_advances_per_feed(self, processor):
        fetcher = StubFetcher({u: (lambda job: success(job, [])) for u in ("a", "b", "c")})
        stage = MagicMock()

        Aggregator(fetcher, processor).run_all({"X": ["a", "b", "c"]}, stage=stage)

        stage.set_total.assert_called_once_with(3)
        assert stage.advance.call_count == 3
