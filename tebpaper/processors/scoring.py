"""
Freshness filtering and composite scoring for aggregated articles
"""
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from tebpaper.utils.constants import ScoringConstants
from tebpaper.utils.models import RawArticle, ScoredArticle


def normalize_datetime(dt: Optional[datetime]) -> Optional[datetime]:
    """Normalize datetime to timezone-aware UTC for comparison"""
    if dt is None:
        return dt
    # If timezone-naive, assume UTC
    if dt.tzinfo is None or dt.tzinfo.utcoffset(dt) is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def is_within_window(article: RawArticle, since: Optional[datetime]) -> bool:
    """
    Inclusive freshness check.

    Undated articles always pass; missing data is not a reason to drop them.
    """
    if since is None or article.published is None:
        return True
    return normalize_datetime(article.published) >= normalize_datetime(since)


def recency_factor(published: Optional[datetime], now: datetime) -> float:
    """1.0 for brand new, decaying to 0.0 over a week; 0.5 when undated"""
    if published is None:
        return ScoringConstants.NEUTRAL_RECENCY
    age = normalize_datetime(now) - normalize_datetime(published)
    ratio = 1 - age / ScoringConstants.RECENCY_WINDOW
    return min(1.0, max(0.0, ratio))


def compute_score(article: RawArticle, now: datetime) -> float:
    weight = article.category_weight / ScoringConstants.MAX_CATEGORY_WEIGHT
    recency = recency_factor(article.published, now)
    return weight * article.affinity_score * (
        ScoringConstants.RECENCY_FLOOR + ScoringConstants.RECENCY_WEIGHT * recency
    )


def rank_articles(articles: Iterable[RawArticle], now: datetime) -> List[ScoredArticle]:
    """Score articles and sort best first; equal scores keep arrival order"""
    scored = [
        ScoredArticle(**article.model_dump(exclude={'score'}), score=compute_score(article, now))
        for article in articles
    ]
    # sorted() is stable, including with reverse=True
    return sorted(scored, key=lambda a: a.score, reverse=True)
