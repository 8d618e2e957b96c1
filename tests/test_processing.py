"""Tests for per-category article processing."""

from datetime import timedelta

import pytest

from news_digest.config import ProcessorConfig
from news_digest.processing import ArticleProcessor

from conftest import NOW


@pytest.fixture()
def processor():
    return ArticleProcessor(ProcessorConfig())


class TestArticleProcessor:
    def test_overlapping_feeds_keep_later_duplicate(self, processor, make_article):
        """Two feeds of five with three shared links yield seven unique articles."""
        feed1 = [
            make_article(f"L{i}", NOW - timedelta(minutes=i), source="feed1") for i in range(1, 6)
        ]
        feed2 = [
            make_article(f"L{i}", NOW - timedelta(minutes=i), source="feed2") for i in range(3, 8)
        ]

        result = processor.process(feed1 + feed2, now=NOW)

        assert [a.link for a in result] == ["L1", "L2", "L3", "L4", "L5", "L6", "L7"]
        by_link = {a.link: a for a in result}
        assert by_link["L3"].source == "feed2"
        assert by_link["L1"].source == "feed1"

    def test_last_duplicate_keeps_first_position(self, make_article):
        articles = [
            make_article("A", source="first"),
            make_article("B"),
            make_article("A", source="second"),
        ]

        deduped = ArticleProcessor.deduplicate(articles)

        assert [a.link for a in deduped] == ["A", "B"]
        assert deduped[0].source == "second"

    def test_old_article_is_dropped(self, processor, make_article):
        old = make_article("old", NOW - timedelta(days=40))

        assert processor.process([old], now=NOW) == []

    def test_cutoff_boundary_is_inclusive(self, processor, make_article):
        edge = make_article("edge", NOW - timedelta(days=30))
        past = make_article("past", NOW - timedelta(days=30, seconds=1))

        assert [a.link for a in processor.process([edge, past], now=NOW)] == ["edge"]

    def test_missing_date_is_dropped(self, processor, make_article):
        undated = make_article("undated", published_at=None)
        dated = make_article("dated")

        assert [a.link for a in processor.process([undated, dated], now=NOW)] == ["dated"]

    def test_sorted_newest_first_and_capped(self, processor, make_article):
        articles = [make_article(f"L{i}", NOW - timedelta(hours=i)) for i in range(12)]
        articles.reverse()

        result = processor.process(articles, now=NOW)

        assert len(result) == 8
        assert [a.link for a in result] == [f"L{i}" for i in range(8)]
        dates = [a.published_at for a in result]
        assert dates == sorted(dates, reverse=True)

    def test_empty_bucket(self, processor):
        assert processor.process([], now=NOW) == []

    def test_custom_limits(self, make_article):
        config = ProcessorConfig(max_per_category=2)
        config.max_age.since = "1d"
        processor = ArticleProcessor(config)
        articles = [make_article(f"L{i}", NOW - timedelta(hours=10 * i)) for i in range(4)]

        assert [a.link for a in processor.process(articles, now=NOW)] == ["L0", "L1"]
