"""
Digest generation service for TebPaper.

Orchestrates one generation cycle: aggregate feeds, ask the curator for a
selection, enrich and store the chosen articles, and drive the digest to a
terminal status. Every failure after the digest row exists leaves it
'failed'; the original error is what the caller sees.
"""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy.orm import Session

from tebpaper.aggregators.base import BaseAggregator
from tebpaper.aggregators.news_aggregator import NewsAggregator
from tebpaper.curators.curation_adapter import (
    CurationAdapter,
    LLMCurationAdapter,
    build_curation_request,
)
from tebpaper.processors.archive_enricher import ArchiveEnricher
from tebpaper.services import digest_service, profile_service
from tebpaper.services.paper_store import PaperStore, paper_store
from tebpaper.services.repository import DigestRepository, SqlDigestRepository
from tebpaper.utils.config import Config
from tebpaper.utils.models import (
    AnonymousPaper,
    CurationSelection,
    DigestArticleData,
    DigestStatus,
    ReaderPreferences,
    ScoredArticle,
)
from tebpaper.utils.sources import DEFAULT_CATEGORIES

logger = logging.getLogger(__name__)


# Custom Exceptions
class GenerationServiceError(Exception):
    """Base exception for generation service errors."""
    pass


class NoArticlesFoundError(GenerationServiceError):
    """Raised when no source produced any article; no digest is created."""
    pass


class DigestOrchestrator:
    """Runs the aggregate → curate → enrich → persist pipeline."""

    def __init__(
        self,
        config: Optional[Config] = None,
        aggregator: Optional[BaseAggregator] = None,
        curator: Optional[CurationAdapter] = None,
        enricher: Optional[ArchiveEnricher] = None,
    ):
        self.config = config or Config()
        self.aggregator = aggregator or NewsAggregator(self.config)
        self.curator = curator or LLMCurationAdapter(self.config)
        self.enricher = enricher or ArchiveEnricher(self.config)
        self.max_candidates = self.config.curation.max_candidates
        self.lookback = timedelta(days=self.config.digest.lookback_days)

    async def generate(
        self,
        repository: DigestRepository,
        owner_id: int,
        preferences: ReaderPreferences,
        since: Optional[datetime] = None,
    ) -> int:
        """
        Generate a digest for one reader.

        Args:
            repository: Storage for the digest, its articles and the watermark
            owner_id: Owning profile ID
            preferences: Reader leaning, frequency and category weights
            since: Start of the window; defaults to the configured lookback

        Returns:
            ID of the ready digest

        Raises:
            NoArticlesFoundError: If nothing was fetched (no digest is created)
            CurationError: If curation fails (digest marked failed)
            DigestServiceError: If storing the articles or the ready status fails
                (digest marked failed). A failed watermark write is only logged.
        """
        if since is None:
            since = datetime.now(timezone.utc) - self.lookback

        articles = await self._collect(preferences, since)

        now = datetime.now(timezone.utc)
        digest_id = repository.create_digest(owner_id, since, now)
        logger.info(f"Created digest {digest_id} for owner {owner_id} covering {since.isoformat()} to {now.isoformat()}")

        try:
            candidates, selection = await self._curate(articles, preferences)
            records = self.build_digest_articles(candidates, selection, digest_id)

            # Children first; 'ready' is the commit point
            repository.insert_digest_articles(digest_id, records)
            repository.update_digest_status(
                digest_id, DigestStatus.READY, subtitle=selection.digest_title
            )
        except (Exception, asyncio.CancelledError) as e:
            logger.error(
                f"Digest {digest_id} generation failed: {e!r}",
                extra={"digest_id": digest_id, "owner_id": owner_id},
            )
            self._mark_failed(repository, digest_id)
            raise

        # A stale watermark only makes the next window overlap this one
        try:
            repository.update_owner_watermark(owner_id, now)
        except Exception as e:
            logger.error(f"Digest {digest_id} is ready but the watermark for owner {owner_id} was not advanced: {e}")

        logger.info(f"Digest {digest_id} ready with {len(records)} articles")
        return digest_id

    async def generate_anonymous_paper(
        self,
        leaning: Optional[str] = None,
        store: PaperStore = paper_store,
    ) -> str:
        """
        Generate a paper for a visitor without a profile.

        Uses the default category set over the configured lookback and keeps
        the result in the in-memory store only.

        Returns:
            Paper ID, valid while the store retains it
        """
        now = datetime.now(timezone.utc)
        since = now - self.lookback
        preferences = ReaderPreferences(
            leaning=leaning or self.config.digest.default_leaning,
            frequency=self.config.digest.default_frequency,
            categories=DEFAULT_CATEGORIES,
        )

        articles = await self._collect(preferences, since)
        candidates, selection = await self._curate(articles, preferences)
        records = self.build_digest_articles(candidates, selection)
        records.sort(key=lambda r: r.importance, reverse=True)

        paper = AnonymousPaper(
            id=store.new_id(),
            subtitle=selection.digest_title,
            created_at=now,
            period_start=since,
            period_end=now,
            articles=records,
        )
        return store.save(paper)

    def build_digest_articles(
        self,
        candidates: Sequence[ScoredArticle],
        selection: CurationSelection,
        digest_id: Optional[int] = None,
    ) -> List[DigestArticleData]:
        """
        Map curated entries back to candidates, in curation order.

        Entries pointing outside the candidate list are skipped. Positions
        are assigned 0..n-1 over the entries that remain, which may be none.
        """
        records: List[DigestArticleData] = []
        for entry in selection.articles:
            if not 0 <= entry.index < len(candidates):
                logger.warning(
                    f"Skipping curated entry with index {entry.index} "
                    f"(only {len(candidates)} candidates)"
                )
                continue

            original = self.enricher.enrich(candidates[entry.index])
            records.append(DigestArticleData(
                digest_id=digest_id,
                title=entry.headline,
                subtitle=entry.subtitle,
                summary=entry.summary,
                original_url=original.link or None,
                archive_url=original.archive_url,
                source_name=original.source_name or None,
                author=original.author or None,
                category=entry.category,
                importance=entry.importance,
                published_at=original.published,
                position=len(records),
            ))

        return records

    async def _collect(self, preferences: ReaderPreferences, since: datetime) -> List[ScoredArticle]:
        articles = await self.aggregator.fetch_news(
            preferences.categories, preferences.leaning, since
        )
        if not articles:
            raise NoArticlesFoundError(
                "No articles found from any sources. Please check your internet "
                "connection and try again."
            )
        return articles

    async def _curate(
        self, articles: Sequence[ScoredArticle], preferences: ReaderPreferences
    ) -> Tuple[List[ScoredArticle], CurationSelection]:
        candidates = list(articles[:self.max_candidates])
        request = build_curation_request(candidates, preferences, self.max_candidates)
        selection = await self.curator.curate(request)
        return candidates, selection

    @staticmethod
    def _mark_failed(repository: DigestRepository, digest_id: int) -> None:
        """Best-effort compensation; never raises."""
        try:
            repository.update_digest_status(digest_id, DigestStatus.FAILED)
        except Exception as e:
            logger.error(f"Could not mark digest {digest_id} as failed: {e}", exc_info=True)


async def generate_digest_for_profile(
    db: Session,
    profile_id: int,
    orchestrator: Optional[DigestOrchestrator] = None,
) -> int:
    """
    Generate a digest for a stored profile.

    Reads the profile's preferences and starts the window at its watermark
    (or the configured lookback when it has never had a digest).

    Raises:
        ProfileNotFoundError: If profile doesn't exist
    """
    orchestrator = orchestrator or DigestOrchestrator()
    preferences = profile_service.get_reader_preferences(db, profile_id)
    since = profile_service.get_since_cutoff(db, profile_id, lookback=orchestrator.lookback)

    return await orchestrator.generate(
        SqlDigestRepository(db), profile_id, preferences, since
    )


def get_generation_status(db: Session, digest_id: int) -> Dict[str, Any]:
    """
    Get current generation status of a digest.

    Raises:
        DigestNotFoundError: If digest doesn't exist
    """
    digest = digest_service.get_digest(db, digest_id)
    return {
        "status": digest.status,
        "subtitle": digest.subtitle,
        "created_at": digest.created_at,
        "status_changed_at": digest.status_changed_at,
        "article_count": digest_service.get_digest_article_count(db, digest_id),
    }
