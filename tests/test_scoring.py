"""
Tests for freshness filtering and composite scoring
"""
from datetime import datetime, timedelta, timezone

import pytest

from tebpaper.processors.scoring import (
    compute_score,
    is_within_window,
    rank_articles,
    recency_factor,
)
from tebpaper.utils.models import RawArticle


NOW = datetime(2025, 10, 20, 12, 0, tzinfo=timezone.utc)


def make_article(title="Story", weight=5, affinity=1.0, published=NOW, **kwargs):
    return RawArticle(
        title=title,
        link=kwargs.pop('link', f"https://example.com/{title.replace(' ', '-').lower()}"),
        author="Reporter",
        published=published,
        source_name=kwargs.pop('source_name', "Example"),
        source_leaning="centre",
        category=kwargs.pop('category', "national"),
        affinity_score=affinity,
        category_weight=weight,
        **kwargs,
    )


class TestRecencyFactor:

    def test_brand_new_article_is_fully_fresh(self):
        assert recency_factor(NOW, NOW) == 1.0

    def test_half_week_old(self):
        assert recency_factor(NOW - timedelta(days=3.5), NOW) == pytest.approx(0.5)

    def test_older_than_a_week_clamps_to_zero(self):
        assert recency_factor(NOW - timedelta(days=30), NOW) == 0.0

    def test_future_dates_clamp_to_one(self):
        assert recency_factor(NOW + timedelta(days=1), NOW) == 1.0

    def test_undated_is_neutral(self):
        assert recency_factor(None, NOW) == 0.5

    def test_naive_datetimes_are_treated_as_utc(self):
        naive = datetime(2025, 10, 20, 12, 0)
        assert recency_factor(naive, NOW) == 1.0


class TestComputeScore:

    def test_maximum_score_is_one(self):
        assert compute_score(make_article(weight=10, affinity=1.0), NOW) == pytest.approx(1.0)

    def test_week_old_article_keeps_floor(self):
        article = make_article(weight=10, affinity=1.0, published=NOW - timedelta(days=8))
        assert compute_score(article, NOW) == pytest.approx(0.3)

    def test_undated_article_uses_neutral_recency(self):
        article = make_article(weight=10, affinity=1.0, published=None)
        assert compute_score(article, NOW) == pytest.approx(0.3 + 0.7 * 0.5)

    def test_zero_affinity_scores_zero(self):
        assert compute_score(make_article(affinity=0.0), NOW) == 0.0

    def test_monotonic_in_weight(self):
        scores = [compute_score(make_article(weight=w), NOW) for w in range(1, 11)]
        assert scores == sorted(scores)

    def test_monotonic_in_affinity(self):
        scores = [compute_score(make_article(affinity=a / 4), NOW) for a in range(5)]
        assert scores == sorted(scores)

    def test_score_stays_in_unit_interval(self):
        for weight in (1, 5, 10):
            for affinity in (0.0, 0.5, 1.0):
                for age in (0, 3, 10):
                    article = make_article(
                        weight=weight, affinity=affinity, published=NOW - timedelta(days=age)
                    )
                    assert 0.0 <= compute_score(article, NOW) <= 1.0


class TestIsWithinWindow:

    def test_no_cutoff_keeps_everything(self):
        assert is_within_window(make_article(published=NOW - timedelta(days=100)), None)

    def test_article_at_cutoff_is_kept(self):
        assert is_within_window(make_article(published=NOW), NOW)

    def test_article_before_cutoff_is_dropped(self):
        assert not is_within_window(make_article(published=NOW - timedelta(seconds=1)), NOW)

    def test_undated_article_is_always_kept(self):
        future = NOW + timedelta(days=365)
        assert is_within_window(make_article(published=None), future)


class TestRankArticles:

    def test_sorted_by_score_descending(self):
        low = make_article("Low", weight=2)
        high = make_article("High", weight=9)
        mid = make_article("Mid", weight=5)

        ranked = rank_articles([low, high, mid], NOW)

        assert [a.title for a in ranked] == ["High", "Mid", "Low"]
        assert all(a.score > 0 for a in ranked)

    def test_ties_keep_arrival_order(self):
        articles = [make_article(f"Tie {i}") for i in range(5)]
        ranked = rank_articles(articles, NOW)
        assert [a.title for a in ranked] == [f"Tie {i}" for i in range(5)]

    def test_empty_input(self):
        assert rank_articles([], NOW) == []
