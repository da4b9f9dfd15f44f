"""
Persistence boundary used by the digest orchestrator.

These four operations are the only writes a generation performs; each can
fail on its own.
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tebpaper.services import digest_service
from tebpaper.services.digest_service import DigestPersistenceError
from tebpaper.utils.models import DigestArticleData, DigestStatus

logger = logging.getLogger(__name__)


class DigestRepository(ABC):
    """Storage operations for digests and the owner's watermark."""

    @abstractmethod
    def create_digest(self, owner_id: int, period_start: datetime, period_end: datetime) -> int:
        """Create a 'generating' digest and return its id."""

    @abstractmethod
    def insert_digest_articles(self, digest_id: int, articles: Sequence[DigestArticleData]) -> None:
        """Store all articles of a digest atomically."""

    @abstractmethod
    def update_digest_status(
        self, digest_id: int, status: DigestStatus, subtitle: Optional[str] = None
    ) -> None:
        """Move a digest to a terminal status."""

    @abstractmethod
    def update_owner_watermark(self, owner_id: int, watermark: datetime) -> None:
        """Advance the owner's last-digest timestamp."""


class SqlDigestRepository(DigestRepository):
    """SQLAlchemy implementation backed by digest_service."""

    def __init__(self, db: Session):
        self.db = db

    def _run(self, operation: str, func, *args, **kwargs):
        try:
            return func(self.db, *args, **kwargs)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error during {operation}: {e}")
            raise DigestPersistenceError(f"Failed to {operation}: {e}") from e

    def create_digest(self, owner_id, period_start, period_end):
        digest = self._run(
            "create digest", digest_service.create_generating_digest,
            owner_id, period_start, period_end,
        )
        return digest.id

    def insert_digest_articles(self, digest_id, articles):
        self._run(
            "insert digest articles", digest_service.insert_digest_articles,
            digest_id, articles,
        )

    def update_digest_status(self, digest_id, status, subtitle=None):
        self._run(
            "update digest status", digest_service.update_digest_status,
            digest_id, status, subtitle=subtitle,
        )

    def update_owner_watermark(self, owner_id, watermark):
        self._run(
            "update owner watermark", digest_service.update_profile_watermark,
            owner_id, watermark,
        )
