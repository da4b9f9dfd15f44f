"""
Tests for the news aggregator: concurrent fan-out, filtering, ranking, dedup
"""
import asyncio
from datetime import datetime, timedelta, timezone
from typing import Dict, List

import pytest

from tebpaper.aggregators.news_aggregator import NewsAggregator
from tebpaper.utils.config import Config
from tebpaper.utils.models import CategoryPreference, RawArticle, Source


NOW = datetime(2025, 10, 20, 12, 0, tzinfo=timezone.utc)

SOURCE_A = Source(name="Source A", url="https://a.example/rss", leaning="centre")
SOURCE_B = Source(name="Source B", url="https://b.example/rss", leaning="centre")
SOURCE_C = Source(name="Source C", url="https://c.example/rss", leaning="centre-left")
SOURCE_D = Source(name="Source D", url="https://d.example/rss", leaning="right")


class FakeFetcher:
    """Returns canned entries per source; raises for sources marked broken."""

    def __init__(self, entries: Dict[str, List[dict]], broken=(), delays=None):
        self.entries = entries
        self.broken = set(broken)
        self.delays = delays or {}
        self.calls = []

    async def fetch(self, source, category, weight, affinity):
        self.calls.append((source.name, category, weight, affinity))
        await asyncio.sleep(self.delays.get(source.name, 0))
        if source.name in self.broken:
            raise RuntimeError(f"{source.name} is down")
        return [
            RawArticle(
                title=e["title"],
                link=e.get("link", ""),
                author=source.name,
                published=e.get("published"),
                source_name=source.name,
                source_leaning=source.leaning,
                category=category,
                affinity_score=affinity,
                category_weight=weight,
            )
            for e in self.entries.get(source.name, [])
        ]


def make_config(registry):
    config = Config()
    config.sources = registry
    return config


@pytest.fixture
def registry():
    return {"national": [SOURCE_A, SOURCE_B, SOURCE_C]}


class TestFetchNews:

    @pytest.mark.asyncio
    async def test_partial_failure_with_duplicate(self, registry):
        """A fails, B returns two stories, C repeats B's first: two distinct articles."""
        fetcher = FakeFetcher(
            {
                "Source B": [
                    {"title": "Budget passes", "published": NOW - timedelta(hours=1)},
                    {"title": "Storm warning", "published": NOW - timedelta(days=2)},
                ],
                "Source C": [
                    {"title": "Budget passes!", "published": NOW - timedelta(hours=1)},
                ],
            },
            broken={"Source A"},
        )
        aggregator = NewsAggregator(make_config(registry), fetcher=fetcher)

        articles = await aggregator.fetch_news(
            [CategoryPreference(category="national", weight=8)],
            "centre",
            since=NOW - timedelta(days=7),
            now=NOW,
        )

        assert [a.title for a in articles] == ["Budget passes", "Storm warning"]
        assert articles[0].source_name == "Source B"
        assert articles[0].score > articles[1].score

    @pytest.mark.asyncio
    async def test_all_fetches_failing_returns_empty(self, registry):
        fetcher = FakeFetcher({}, broken={"Source A", "Source B", "Source C"})
        aggregator = NewsAggregator(make_config(registry), fetcher=fetcher)

        articles = await aggregator.fetch_news(
            [CategoryPreference(category="national", weight=5)], "centre", now=NOW
        )

        assert articles == []
        assert len(fetcher.calls) == 3

    @pytest.mark.asyncio
    async def test_future_since_keeps_only_undated(self, registry):
        fetcher = FakeFetcher({
            "Source A": [
                {"title": "Dated", "published": NOW - timedelta(hours=2)},
                {"title": "Undated", "published": None},
            ],
        })
        aggregator = NewsAggregator(make_config(registry), fetcher=fetcher)

        articles = await aggregator.fetch_news(
            [CategoryPreference(category="national", weight=5)],
            "centre",
            since=NOW + timedelta(days=1),
            now=NOW,
        )

        assert [a.title for a in articles] == ["Undated"]

    @pytest.mark.asyncio
    async def test_disabled_and_unknown_categories_are_skipped(self):
        registry = {"national": [SOURCE_A], "sport": [SOURCE_B]}
        fetcher = FakeFetcher({})
        aggregator = NewsAggregator(make_config(registry), fetcher=fetcher)

        await aggregator.fetch_news(
            [
                CategoryPreference(category="national", weight=5),
                CategoryPreference(category="sport", weight=5, enabled=False),
                CategoryPreference(category="gardening", weight=9),
            ],
            "centre",
            now=NOW,
        )

        assert [call[0] for call in fetcher.calls] == ["Source A"]

    @pytest.mark.asyncio
    async def test_affinity_and_weight_passed_per_source(self):
        registry = {"opinion": [SOURCE_B, SOURCE_D]}
        fetcher = FakeFetcher({})
        aggregator = NewsAggregator(make_config(registry), fetcher=fetcher)

        await aggregator.fetch_news(
            [CategoryPreference(category="opinion", weight=3)], "left", now=NOW
        )

        assert fetcher.calls == [
            ("Source B", "opinion", 3, 0.5),
            ("Source D", "opinion", 3, 0.0),
        ]

    @pytest.mark.asyncio
    async def test_fetches_run_concurrently(self, registry):
        fetcher = FakeFetcher(
            {name: [{"title": f"From {name}"}] for name in ("Source A", "Source B", "Source C")},
            delays={"Source A": 0.2, "Source B": 0.2, "Source C": 0.2},
        )
        aggregator = NewsAggregator(make_config(registry), fetcher=fetcher)

        loop = asyncio.get_running_loop()
        started = loop.time()
        articles = await aggregator.fetch_news(
            [CategoryPreference(category="national", weight=5)], "centre", now=NOW
        )
        elapsed = loop.time() - started

        assert len(articles) == 3
        assert elapsed < 0.5

    @pytest.mark.asyncio
    async def test_ranking_prefers_weight_then_keeps_arrival_order(self):
        registry = {"sport": [SOURCE_A], "national": [SOURCE_B]}
        fetcher = FakeFetcher({
            "Source A": [{"title": "Sport one"}, {"title": "Sport two"}],
            "Source B": [{"title": "National one"}],
        })
        aggregator = NewsAggregator(make_config(registry), fetcher=fetcher)

        articles = await aggregator.fetch_news(
            [
                CategoryPreference(category="sport", weight=2),
                CategoryPreference(category="national", weight=9),
            ],
            "centre",
            now=NOW,
        )

        assert [a.title for a in articles] == ["National one", "Sport one", "Sport two"]

    @pytest.mark.asyncio
    async def test_no_sources_configured(self):
        aggregator = NewsAggregator(make_config({}), fetcher=FakeFetcher({}))

        articles = await aggregator.fetch_news(
            [CategoryPreference(category="national", weight=5)], "centre", now=NOW
        )

        assert articles == []
