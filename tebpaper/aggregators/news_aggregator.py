"""
News aggregator: fans out feed fetches for a reader's categories and ranks the results
"""
import asyncio
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from tebpaper.aggregators.base import BaseAggregator
from tebpaper.aggregators.feed_fetcher import FeedFetcher
from tebpaper.processors.affinity import leaning_affinity
from tebpaper.processors.duplicate_detector import DuplicateDetector
from tebpaper.processors.scoring import is_within_window, normalize_datetime, rank_articles
from tebpaper.utils.logger import logger
from tebpaper.utils.models import CategoryPreference, RawArticle, ScoredArticle


class NewsAggregator(BaseAggregator):
    """Aggregates articles from every source under the reader's enabled categories"""

    def __init__(self, config, fetcher: Optional[FeedFetcher] = None,
                 duplicate_detector: Optional[DuplicateDetector] = None):
        super().__init__(config)
        self.registry = config.sources
        self.fetcher = fetcher or FeedFetcher(config)
        self.duplicate_detector = duplicate_detector or DuplicateDetector()

    async def fetch_news(
        self,
        categories: Sequence[CategoryPreference],
        reader_leaning: str,
        since: Optional[datetime] = None,
        now: Optional[datetime] = None,
    ) -> List[ScoredArticle]:
        """
        Fetch, filter, score, sort and deduplicate articles.

        Returns an empty list when nothing could be fetched; deciding whether
        that is fatal is left to the caller.
        """
        now = normalize_datetime(now) if now else datetime.now(timezone.utc)

        dispatched = []
        tasks = []
        for preference in categories:
            sources = self.registry.get(preference.category, [])
            if not preference.enabled or not sources:
                continue

            for source in sources:
                affinity = leaning_affinity(reader_leaning, source.leaning)
                dispatched.append(source)
                tasks.append(
                    self.fetcher.fetch(source, preference.category, preference.weight, affinity)
                )

        if not tasks:
            logger.warning("No enabled category has any configured source")
            return []

        # Wait for every fetch to settle; one failure never cancels the rest
        results = await asyncio.gather(*tasks, return_exceptions=True)

        collected: List[RawArticle] = []
        silent_sources = 0
        for source, result in zip(dispatched, results):
            if isinstance(result, BaseException):
                silent_sources += 1
                logger.error(f"Error collecting from feed {source.name}: {result!r}")
                continue
            if not result:
                silent_sources += 1
            collected.extend(a for a in result if self._is_valid_article(a, since))

        logger.info(
            f"Fetched {len(collected)} articles from {len(dispatched) - silent_sources}/"
            f"{len(dispatched)} sources"
        )

        ranked = rank_articles(collected, now)
        return self.duplicate_detector.deduplicate(ranked)

    def _is_valid_article(self, article: RawArticle, since: Optional[datetime]) -> bool:
        return is_within_window(article, since)
