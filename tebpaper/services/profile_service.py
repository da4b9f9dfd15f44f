"""
Profile service for TebPaper.

Read access to a reader's stored preferences. Editing preferences belongs to
the settings layer and is not handled here.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy.orm import Session

from tebpaper.persistence.models import Profile, ProfileCategory
from tebpaper.services.digest_service import from_iso
from tebpaper.utils.constants import DigestConstants, LeaningConstants
from tebpaper.utils.models import CategoryPreference, ReaderPreferences


# Custom Exceptions
class ProfileServiceError(Exception):
    """Base exception for profile service errors."""
    pass


class ProfileNotFoundError(ProfileServiceError):
    """Raised when profile is not found."""
    pass


def create_profile(
    db: Session,
    display_name: Optional[str] = None,
    political_leaning: str = LeaningConstants.DEFAULT_LEANING,
    digest_frequency: str = DigestConstants.DEFAULT_FREQUENCY,
) -> Profile:
    """Create a reader profile with no digest history."""
    profile = Profile(
        display_name=display_name,
        political_leaning=political_leaning,
        digest_frequency=digest_frequency,
        last_digest_at=None,
    )
    db.add(profile)
    db.commit()
    db.refresh(profile)
    return profile


def get_profile(db: Session, profile_id: int) -> Profile:
    """
    Raises:
        ProfileNotFoundError: If profile doesn't exist
    """
    profile = db.query(Profile).filter(Profile.id == profile_id).first()
    if not profile:
        raise ProfileNotFoundError(f"Profile with ID {profile_id} not found")
    return profile


def get_reader_preferences(db: Session, profile_id: int) -> ReaderPreferences:
    """
    Build the pipeline's preference input from stored rows.

    Missing leaning or frequency fall back to 'centre' and 'weekly'.
    """
    profile = get_profile(db, profile_id)
    rows = db.query(ProfileCategory).filter(
        ProfileCategory.profile_id == profile_id
    ).order_by(ProfileCategory.id).all()

    return ReaderPreferences(
        leaning=profile.political_leaning or LeaningConstants.DEFAULT_LEANING,
        frequency=profile.digest_frequency or DigestConstants.DEFAULT_FREQUENCY,
        categories=[
            CategoryPreference(category=row.category, weight=row.weight, enabled=bool(row.enabled))
            for row in rows
        ],
    )


def get_since_cutoff(
    db: Session,
    profile_id: int,
    lookback: timedelta = DigestConstants.DEFAULT_LOOKBACK,
    now: Optional[datetime] = None,
) -> datetime:
    """
    Start of the next digest's window.

    The previous digest's watermark when there is one, otherwise ``lookback``
    before now.
    """
    profile = get_profile(db, profile_id)
    watermark = from_iso(profile.last_digest_at)
    if watermark is not None:
        return watermark
    return (now or datetime.now(timezone.utc)) - lookback
