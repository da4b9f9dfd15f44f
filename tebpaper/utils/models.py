"""
Base models and data structures
"""
from datetime import datetime
from enum import Enum
from typing import Optional, List

from pydantic import BaseModel, ConfigDict, Field

from tebpaper.utils.constants import (
    CurationConstants,
    DigestConstants,
    LeaningConstants,
)


class DigestStatus(str, Enum):
    # "pending" is implicit: a digest row only exists once it is generating
    GENERATING = "generating"
    READY = "ready"
    FAILED = "failed"


class Source(BaseModel):
    """One outlet's feed, configured externally"""
    model_config = ConfigDict(frozen=True)

    name: str
    url: str
    leaning: str


class CategoryPreference(BaseModel):
    """A reader's weighting for one category"""
    category: str
    weight: int = Field(ge=1, le=10)
    enabled: bool = True


class ReaderPreferences(BaseModel):
    leaning: str = LeaningConstants.DEFAULT_LEANING
    frequency: str = DigestConstants.DEFAULT_FREQUENCY
    categories: List[CategoryPreference] = Field(default_factory=list)

    @property
    def enabled_categories(self) -> List[CategoryPreference]:
        return [c for c in self.categories if c.enabled]


class RawArticle(BaseModel):
    """Normalized feed entry, tagged with the context it was fetched under"""
    title: str = ""
    link: str = ""
    summary: str = ""
    author: str
    published: Optional[datetime] = None
    source_name: str
    source_leaning: str
    category: str
    affinity_score: float
    category_weight: int


class ScoredArticle(RawArticle):
    """Article with its composite ranking score"""
    score: float


class ArchivedArticle(RawArticle):
    """Article after paywall classification"""
    score: Optional[float] = None
    is_paywalled: bool = False
    archive_url: Optional[str] = None


class CurationCandidate(BaseModel):
    index: int
    title: str
    source_name: str
    category: str
    summary: str


class CurationRequest(BaseModel):
    """Everything the curation service needs to pick and rewrite articles"""
    candidates: List[CurationCandidate]
    reader_leaning: str
    frequency: str
    categories: List[CategoryPreference] = Field(default_factory=list)


class CuratedEntry(BaseModel):
    index: int
    headline: str
    subtitle: str = ""
    summary: str
    importance: int = Field(
        ge=CurationConstants.MIN_IMPORTANCE, le=CurationConstants.MAX_IMPORTANCE
    )
    category: str


class CurationSelection(BaseModel):
    """Validated response from the curation service"""
    digest_title: str
    articles: List[CuratedEntry] = Field(default_factory=list)


class DigestArticleData(BaseModel):
    """Final article record as stored under a digest"""
    digest_id: Optional[int] = None
    title: str
    subtitle: str = ""
    summary: str
    original_url: Optional[str] = None
    archive_url: Optional[str] = None
    source_name: Optional[str] = None
    author: Optional[str] = None
    category: str
    importance: int
    published_at: Optional[datetime] = None
    position: int


class AnonymousPaper(BaseModel):
    """Digest generated for a visitor without a profile; never persisted"""
    id: str
    title: str = DigestConstants.MASTHEAD
    subtitle: str
    created_at: datetime
    period_start: datetime
    period_end: datetime
    articles: List[DigestArticleData] = Field(default_factory=list)
