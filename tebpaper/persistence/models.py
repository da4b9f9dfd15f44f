"""SQLAlchemy ORM models for TebPaper.

Timestamps are stored as ISO-8601 UTC strings.
"""

from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    Boolean,
    ForeignKey,
    CheckConstraint,
    UniqueConstraint,
    Index,
    text,
)
from sqlalchemy.orm import relationship, declarative_base

Base = declarative_base()


class Profile(Base):
    """Profile model - a reader and their digest watermark."""

    __tablename__ = "profiles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    display_name = Column(String, nullable=True)
    political_leaning = Column(String, nullable=False, server_default="centre")
    digest_frequency = Column(String, nullable=False, server_default="weekly")
    last_digest_at = Column(String, nullable=True)
    created_at = Column(String, nullable=False, server_default=text("(datetime('now'))"))

    digests = relationship(
        "Digest", back_populates="profile", cascade="all, delete-orphan"
    )
    categories = relationship(
        "ProfileCategory", back_populates="profile", cascade="all, delete-orphan"
    )

    def __repr__(self):
        return f"<Profile(id={self.id}, political_leaning='{self.political_leaning}')>"


class ProfileCategory(Base):
    """ProfileCategory model - a reader's weighting for one category."""

    __tablename__ = "category_preferences"

    id = Column(Integer, primary_key=True, autoincrement=True)
    profile_id = Column(
        Integer, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    )
    category = Column(String, nullable=False)
    weight = Column(Integer, nullable=False, server_default="5")
    enabled = Column(Boolean, nullable=False, server_default="1")

    __table_args__ = (
        UniqueConstraint("profile_id", "category", name="uq_profile_category"),
        CheckConstraint("weight BETWEEN 1 AND 10", name="check_category_weight"),
        Index("idx_category_preferences_profile_id", "profile_id"),
    )

    profile = relationship("Profile", back_populates="categories")

    def __repr__(self):
        return f"<ProfileCategory(profile_id={self.profile_id}, category='{self.category}', weight={self.weight})>"


class Digest(Base):
    """Digest model - one generation cycle for a reader."""

    __tablename__ = "digests"

    id = Column(Integer, primary_key=True, autoincrement=True)
    profile_id = Column(
        Integer, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    )
    title = Column(String, nullable=False, server_default="The TebPaper")
    subtitle = Column(String, nullable=True)
    period_start = Column(String, nullable=False)
    period_end = Column(String, nullable=False)
    status = Column(String, nullable=False, server_default="generating")
    created_at = Column(String, nullable=False)
    # Lets a reconciler find rows stuck in 'generating'
    status_changed_at = Column(String, nullable=False)

    __table_args__ = (
        CheckConstraint(
            "status IN ('generating', 'ready', 'failed')",
            name="check_digest_status",
        ),
        Index("idx_digests_profile_id", "profile_id"),
        Index("idx_digests_status", "status"),
        Index("idx_digests_profile_created", "profile_id", "created_at"),
    )

    profile = relationship("Profile", back_populates="digests")
    articles = relationship(
        "DigestArticle",
        back_populates="digest",
        cascade="all, delete-orphan",
        order_by="DigestArticle.position",
    )

    def __repr__(self):
        return f"<Digest(id={self.id}, profile_id={self.profile_id}, status='{self.status}')>"


class DigestArticle(Base):
    """DigestArticle model - a curated article owned by one digest."""

    __tablename__ = "digest_articles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    digest_id = Column(
        Integer, ForeignKey("digests.id", ondelete="CASCADE"), nullable=False
    )
    title = Column(Text, nullable=False)
    subtitle = Column(Text, nullable=True)
    summary = Column(Text, nullable=False)
    original_url = Column(Text, nullable=True)
    archive_url = Column(Text, nullable=True)
    source_name = Column(String, nullable=True)
    author = Column(String, nullable=True)
    category = Column(String, nullable=False)
    importance = Column(Integer, nullable=False)
    published_at = Column(String, nullable=True)
    position = Column(Integer, nullable=False)

    __table_args__ = (
        UniqueConstraint("digest_id", "position", name="uq_digest_article_position"),
        Index("idx_digest_articles_digest_id", "digest_id"),
    )

    digest = relationship("Digest", back_populates="articles")

    def __repr__(self):
        return f"<DigestArticle(id={self.id}, digest_id={self.digest_id}, position={self.position})>"
