"""
Configuration management for TebPaper using environment variables
"""
import os
import yaml
from pathlib import Path
from typing import Dict, Any, List, Optional
from pydantic import BaseModel, Field, field_validator
from dotenv import load_dotenv

from tebpaper.utils.constants import (
    ArchiveConstants,
    CurationConstants,
    DigestConstants,
    FetchConstants,
    LeaningConstants,
)
from tebpaper.utils.models import Source
from tebpaper.utils.sources import DEFAULT_SOURCES, parse_registry


# Load environment variables from .env file
load_dotenv()


class FetchConfig(BaseModel):
    timeout: float = Field(default_factory=lambda: float(os.getenv("FEED_TIMEOUT", str(FetchConstants.DEFAULT_TIMEOUT))))
    user_agent: str = Field(default_factory=lambda: os.getenv("FEED_USER_AGENT", FetchConstants.USER_AGENT))
    max_entries: int = Field(default_factory=lambda: int(os.getenv("MAX_ARTICLES_PER_FEED", str(FetchConstants.MAX_ARTICLES_PER_FEED))))


class CurationConfig(BaseModel):
    api_url: str = Field(default_factory=lambda: os.getenv("CURATION_API_URL", "http://localhost:8000/v1"))
    model: str = Field(default_factory=lambda: os.getenv("CURATION_MODEL", "llama-3.1-8b-instruct"))
    api_key: str = Field(default_factory=lambda: os.getenv("CURATION_API_KEY", "not-needed"))
    temperature: float = Field(default_factory=lambda: float(os.getenv("CURATION_TEMPERATURE", "0.4")))
    max_tokens: int = Field(default_factory=lambda: int(os.getenv("CURATION_MAX_TOKENS", "4096")))
    timeout: float = Field(default_factory=lambda: float(os.getenv("CURATION_TIMEOUT", str(CurationConstants.DEFAULT_TIMEOUT))))
    max_candidates: int = Field(default_factory=lambda: int(os.getenv("CURATION_MAX_CANDIDATES", str(CurationConstants.MAX_CANDIDATES))))


class ArchiveConfig(BaseModel):
    base_url: str = Field(default_factory=lambda: os.getenv("ARCHIVE_BASE_URL", ArchiveConstants.ARCHIVE_BASE))
    paywalled_domains: List[str] = Field(default_factory=lambda: list(ArchiveConstants.PAYWALLED_DOMAINS))

    @field_validator('base_url')
    @classmethod
    def strip_trailing_slash(cls, v):
        return v.rstrip('/')


class DigestConfig(BaseModel):
    default_leaning: str = Field(default_factory=lambda: os.getenv("DEFAULT_LEANING", LeaningConstants.DEFAULT_LEANING))
    default_frequency: str = Field(default_factory=lambda: os.getenv("DEFAULT_FREQUENCY", DigestConstants.DEFAULT_FREQUENCY))
    lookback_days: int = Field(default_factory=lambda: int(os.getenv("DIGEST_LOOKBACK_DAYS", str(DigestConstants.DEFAULT_LOOKBACK.days))))
    paper_store_size: int = Field(default_factory=lambda: int(os.getenv("PAPER_STORE_SIZE", str(DigestConstants.PAPER_STORE_SIZE))))


class LoggingConfig(BaseModel):
    level: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    file: str = Field(default_factory=lambda: os.getenv("LOG_FILE", "logs/tebpaper.log"))


class Config(BaseModel):
    sources: Dict[str, List[Source]] = Field(default_factory=lambda: dict(DEFAULT_SOURCES))
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    curation: CurationConfig = Field(default_factory=CurationConfig)
    archive: ArchiveConfig = Field(default_factory=ArchiveConfig)
    digest: DigestConfig = Field(default_factory=DigestConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    def __init__(self, config_path: Optional[str] = None, **data: Any):
        super().__init__(**data)

        # The YAML file may replace the source registry and the paywall list
        if config_path and Path(config_path).exists():
            config_data = self._load_config(config_path) or {}
            if 'sources' in config_data:
                self.sources = parse_registry(config_data['sources'])
            if 'paywalled_domains' in config_data:
                self.archive.paywalled_domains = list(config_data['paywalled_domains'])

    def _load_config(self, config_path: str) -> Dict[str, Any]:
        """Load configuration from YAML file"""
        with open(config_path, 'r') as f:
            return yaml.safe_load(f)
