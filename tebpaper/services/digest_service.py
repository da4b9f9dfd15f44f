"""
Digest service for TebPaper.

Manages the digest lifecycle:
(pending) → generating → ready/failed

A digest row only exists from 'generating' onwards. Both 'ready' and
'failed' are terminal; a new generation always creates a new row.
"""
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Sequence

from sqlalchemy.orm import Session

from tebpaper.persistence.models import Digest, DigestArticle, Profile
from tebpaper.utils.constants import DigestConstants
from tebpaper.utils.models import DigestArticleData, DigestStatus


# Custom Exceptions
class DigestServiceError(Exception):
    """Base exception for digest service errors."""
    pass


class DigestNotFoundError(DigestServiceError):
    """Raised when digest is not found."""
    pass


class InvalidDigestTransitionError(DigestServiceError):
    """Raised when a status change would leave a terminal state."""
    pass


class DigestPersistenceError(DigestServiceError):
    """Raised when a digest write fails at the storage layer."""
    pass


def to_iso(value: Optional[datetime]) -> Optional[str]:
    """Serialize a datetime as an ISO-8601 UTC string (naive means UTC)."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def from_iso(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def get_digest(db: Session, digest_id: int) -> Digest:
    """
    Get digest by ID.

    Raises:
        DigestNotFoundError: If digest doesn't exist
    """
    digest = db.query(Digest).filter(Digest.id == digest_id).first()
    if not digest:
        raise DigestNotFoundError(f"Digest with ID {digest_id} not found")
    return digest


def create_generating_digest(
    db: Session,
    profile_id: int,
    period_start: datetime,
    period_end: datetime,
) -> Digest:
    """
    Create a digest in 'generating' status and commit it immediately.

    The commit makes the row visible before any further work, so a crash
    mid-generation leaves a diagnosable 'generating' record.

    Args:
        db: Database session
        profile_id: Owning profile ID
        period_start: Start of the covered period (the 'since' cutoff)
        period_end: End of the covered period

    Returns:
        Created Digest object
    """
    now = to_iso(datetime.now(timezone.utc))
    digest = Digest(
        profile_id=profile_id,
        title=DigestConstants.MASTHEAD,
        subtitle=None,
        period_start=to_iso(period_start),
        period_end=to_iso(period_end),
        status=DigestStatus.GENERATING.value,
        created_at=now,
        status_changed_at=now,
    )

    db.add(digest)
    db.commit()
    db.refresh(digest)

    return digest


def insert_digest_articles(
    db: Session,
    digest_id: int,
    articles: Sequence[DigestArticleData],
) -> int:
    """
    Store a digest's articles in one transaction.

    Either every article is stored or none is.

    Returns:
        Number of articles stored

    Raises:
        DigestNotFoundError: If digest doesn't exist
        DigestServiceError: If the digest is no longer generating
    """
    digest = get_digest(db, digest_id)
    if digest.status != DigestStatus.GENERATING.value:
        raise DigestServiceError(
            f"Cannot add articles to digest {digest_id} in status {digest.status}"
        )

    try:
        for article in articles:
            db.add(DigestArticle(
                digest_id=digest_id,
                title=article.title,
                subtitle=article.subtitle,
                summary=article.summary,
                original_url=article.original_url,
                archive_url=article.archive_url,
                source_name=article.source_name,
                author=article.author,
                category=article.category,
                importance=article.importance,
                published_at=to_iso(article.published_at),
                position=article.position,
            ))
        db.commit()
    except Exception:
        db.rollback()
        raise

    return len(articles)


def update_digest_status(
    db: Session,
    digest_id: int,
    status: DigestStatus,
    subtitle: Optional[str] = None,
) -> Digest:
    """
    Move a generating digest to a terminal status.

    Marking a digest failed also drops any articles already stored under
    it, since they are meaningless without a ready digest.

    Raises:
        DigestNotFoundError: If digest doesn't exist
        InvalidDigestTransitionError: If the digest is not generating
    """
    status = DigestStatus(status)
    digest = get_digest(db, digest_id)

    if digest.status == status.value:
        return digest
    if digest.status != DigestStatus.GENERATING.value:
        raise InvalidDigestTransitionError(
            f"Digest {digest_id} is already {digest.status}; cannot move to {status.value}"
        )

    try:
        digest.status = status.value
        digest.status_changed_at = to_iso(datetime.now(timezone.utc))
        if subtitle is not None:
            digest.subtitle = subtitle
        if status == DigestStatus.FAILED:
            db.query(DigestArticle).filter(DigestArticle.digest_id == digest_id).delete(
                synchronize_session=False
            )
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(digest)
    return digest


def mark_digest_ready(db: Session, digest_id: int, subtitle: str) -> Digest:
    return update_digest_status(db, digest_id, DigestStatus.READY, subtitle=subtitle)


def mark_digest_failed(db: Session, digest_id: int) -> Digest:
    return update_digest_status(db, digest_id, DigestStatus.FAILED)


def update_profile_watermark(db: Session, profile_id: int, watermark: datetime) -> Profile:
    """
    Record the end of the latest completed generation on the profile.

    Raises:
        DigestServiceError: If profile doesn't exist
    """
    profile = db.query(Profile).filter(Profile.id == profile_id).first()
    if not profile:
        raise DigestServiceError(f"Profile with ID {profile_id} not found")

    try:
        profile.last_digest_at = to_iso(watermark)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(profile)
    return profile


def get_latest_ready_digest(db: Session, profile_id: int) -> Optional[Digest]:
    """Most recent ready digest for a profile, or None."""
    return db.query(Digest).filter(
        Digest.profile_id == profile_id,
        Digest.status == DigestStatus.READY.value,
    ).order_by(Digest.created_at.desc(), Digest.id.desc()).first()


def get_digest_articles(db: Session, digest_id: int) -> List[DigestArticle]:
    """
    Articles of a ready digest, lead story first.

    Ordered by importance (highest first), then curation position. Digests
    that are not ready have no visible articles.
    """
    digest = get_digest(db, digest_id)
    if digest.status != DigestStatus.READY.value:
        return []

    return db.query(DigestArticle).filter(
        DigestArticle.digest_id == digest_id
    ).order_by(DigestArticle.importance.desc(), DigestArticle.position.asc()).all()


def get_digest_article_count(db: Session, digest_id: int) -> int:
    """Count of stored articles for a digest regardless of its status."""
    return db.query(DigestArticle).filter(DigestArticle.digest_id == digest_id).count()


def find_stuck_digests(
    db: Session,
    older_than: timedelta = DigestConstants.STUCK_AFTER,
    now: Optional[datetime] = None,
) -> List[Digest]:
    """
    Digests still 'generating' after ``older_than``.

    Used by an external reconciler; nothing here changes their status.
    """
    cutoff = to_iso((now or datetime.now(timezone.utc)) - older_than)
    return db.query(Digest).filter(
        Digest.status == DigestStatus.GENERATING.value,
        Digest.status_changed_at < cutoff,
    ).order_by(Digest.status_changed_at).all()
