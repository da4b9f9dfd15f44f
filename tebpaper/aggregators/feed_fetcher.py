"""
RSS/Atom feed fetcher
"""
import asyncio
from datetime import datetime, timezone
from typing import List, Optional

import aiohttp
import feedparser
from bs4 import BeautifulSoup

from tebpaper.utils.constants import FetchConstants
from tebpaper.utils.logger import logger
from tebpaper.utils.models import RawArticle, Source


class SourceUnavailableError(Exception):
    """Raised when a single feed cannot be downloaded or parsed."""
    pass


class FeedFetcher:
    """Downloads one feed and normalizes its entries"""

    def __init__(self, config=None):
        if config is not None:
            self.timeout = config.fetch.timeout
            self.user_agent = config.fetch.user_agent
            self.max_entries = config.fetch.max_entries
        else:
            self.timeout = FetchConstants.DEFAULT_TIMEOUT
            self.user_agent = FetchConstants.USER_AGENT
            self.max_entries = FetchConstants.MAX_ARTICLES_PER_FEED

    async def fetch(self, source: Source, category: str, weight: int, affinity: float) -> List[RawArticle]:
        """
        Fetch articles from one source.

        Never raises for a broken feed: the failure is logged and the source
        contributes no articles.
        """
        try:
            feed_content = await self._download(source)
            entries = self._parse_feed(source, feed_content)
        except SourceUnavailableError as e:
            logger.error(f"Failed to fetch feed {source.name} ({source.url}): {e}")
            return []

        if len(entries) > self.max_entries:
            logger.debug(
                f"Keeping the first {self.max_entries} of {len(entries)} entries from {source.name}"
            )

        articles = []
        for entry in entries[:self.max_entries]:
            try:
                articles.append(self._parse_entry(entry, source, category, weight, affinity))
            except Exception as e:
                logger.warning(f"Error parsing entry from {source.name}: {e}")

        logger.info(f"Collected {len(articles)} articles from {source.name}")
        return articles

    async def _download(self, source: Source) -> str:
        headers = {
            'User-Agent': self.user_agent,
            'Accept': FetchConstants.ACCEPT,
        }
        try:
            async with aiohttp.ClientSession(headers=headers) as session:
                async with session.get(
                    source.url, timeout=aiohttp.ClientTimeout(total=self.timeout)
                ) as response:
                    if response.status != 200:
                        raise SourceUnavailableError(f"HTTP {response.status}")
                    return await response.text()
        except SourceUnavailableError:
            raise
        except asyncio.TimeoutError as e:
            raise SourceUnavailableError(f"timed out after {self.timeout}s") from e
        except Exception as e:
            raise SourceUnavailableError(str(e) or type(e).__name__) from e

    def _parse_feed(self, source: Source, feed_content: str) -> list:
        try:
            feed = feedparser.parse(feed_content)
        except Exception as e:
            raise SourceUnavailableError(f"unparseable feed: {e}") from e

        if feed.bozo and not feed.entries:
            raise SourceUnavailableError(f"unparseable feed: {feed.get('bozo_exception')}")
        if feed.bozo:
            logger.warning(f"RSS feed parsing warning for {source.name}: {feed.get('bozo_exception')}")
        if not feed.entries:
            logger.warning(f"No entries found in RSS feed: {source.name}")

        return list(feed.entries)

    def _parse_entry(self, entry, source: Source, category: str, weight: int, affinity: float) -> RawArticle:
        """Parse feed entry into RawArticle model"""
        return RawArticle(
            title=(entry.get('title') or '').strip(),
            link=(entry.get('link') or '').strip(),
            summary=self._extract_summary(entry),
            author=entry.get('author') or source.name,
            published=self._extract_published(entry),
            source_name=source.name,
            source_leaning=source.leaning,
            # The category comes from the fetch context, not the feed's own tags
            category=category,
            affinity_score=affinity,
            category_weight=weight,
        )

    @staticmethod
    def _extract_summary(entry) -> str:
        snippet = _strip_html(entry.get('summary') or '')
        if snippet:
            return snippet

        content = entry.get('content') or []
        if content:
            return _strip_html(content[0].get('value') or '')
        return ''

    @staticmethod
    def _extract_published(entry) -> Optional[datetime]:
        for key in ('published_parsed', 'updated_parsed'):
            parsed = entry.get(key)
            if not parsed:
                continue
            try:
                # feedparser normalizes to UTC struct_time
                return datetime(*parsed[:6], tzinfo=timezone.utc)
            except (ValueError, TypeError) as e:
                logger.warning(f"Invalid {key} in RSS entry: {e}")
        return None


def _strip_html(text: str) -> str:
    if not text:
        return ''
    return ' '.join(BeautifulSoup(text, 'html.parser').get_text(' ').split())
