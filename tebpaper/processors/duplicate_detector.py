"""
Duplicate detection using normalized titles
"""
from typing import List, Sequence, TypeVar

from tebpaper.utils.constants import DedupConstants
from tebpaper.utils.logger import logger
from tebpaper.utils.models import RawArticle

ArticleT = TypeVar('ArticleT', bound=RawArticle)


class DuplicateDetector:
    """Removes articles whose titles normalize to the same key"""

    def __init__(self, key_length: int = DedupConstants.TITLE_KEY_LENGTH):
        self.key_length = key_length

    def title_key(self, title: str) -> str:
        """Lower-case, drop everything but letters and digits, truncate"""
        stripped = DedupConstants.NON_ALPHANUMERIC_PATTERN.sub('', (title or '').lower())
        return stripped[:self.key_length]

    def deduplicate(self, articles: Sequence[ArticleT]) -> List[ArticleT]:
        """
        Keep the first article for each title key.

        Input is expected in ranking order, so the best scored copy survives.
        """
        if not articles:
            return []

        seen = set()
        unique_articles = []
        for article in articles:
            key = self.title_key(article.title)
            if key in seen:
                continue
            seen.add(key)
            unique_articles.append(article)

        duplicates_found = len(articles) - len(unique_articles)
        if duplicates_found:
            logger.info(f"Removed {duplicates_found} duplicates, kept {len(unique_articles)} unique articles")

        return unique_articles
