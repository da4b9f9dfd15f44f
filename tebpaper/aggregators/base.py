"""
Base aggregator interface
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Sequence

from tebpaper.utils.models import CategoryPreference, RawArticle, ScoredArticle


class BaseAggregator(ABC):
    """Base class for content aggregators"""

    def __init__(self, config):
        self.config = config

    @abstractmethod
    async def fetch_news(
        self,
        categories: Sequence[CategoryPreference],
        reader_leaning: str,
        since: Optional[datetime] = None,
        now: Optional[datetime] = None,
    ) -> List[ScoredArticle]:
        """Collect, rank and deduplicate articles for a reader"""
        pass

    @abstractmethod
    def _is_valid_article(self, article: RawArticle, since: Optional[datetime]) -> bool:
        """Validate if article belongs in this run"""
        pass
