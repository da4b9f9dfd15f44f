"""
Constants and configuration values for TebPaper
"""
import re
from datetime import timedelta


# Leaning Constants
class LeaningConstants:
    # Ordered from one pole to the other
    SPECTRUM = ['left', 'centre-left', 'centre', 'centre-right', 'right']
    NEUTRAL_AFFINITY = 0.5
    DEFAULT_LEANING = 'centre'


# Scoring Constants
class ScoringConstants:
    RECENCY_WINDOW = timedelta(days=7)
    RECENCY_FLOOR = 0.3
    RECENCY_WEIGHT = 0.7
    NEUTRAL_RECENCY = 0.5  # Undated articles
    MAX_CATEGORY_WEIGHT = 10


# Deduplication Constants
class DedupConstants:
    TITLE_KEY_LENGTH = 60
    NON_ALPHANUMERIC_PATTERN = re.compile(r'[\W_]+')


# Feed Fetching Constants
class FetchConstants:
    DEFAULT_TIMEOUT = 10
    MAX_ARTICLES_PER_FEED = 50
    USER_AGENT = "TebPaper/1.0 (News Digest Application)"
    ACCEPT = "application/rss+xml, application/atom+xml, application/xml;q=0.9, */*;q=0.8"


# Curation Constants
class CurationConstants:
    MAX_CANDIDATES = 80
    CANDIDATE_SUMMARY_LENGTH = 200
    DEFAULT_TIMEOUT = 120
    MIN_IMPORTANCE = 1
    MAX_IMPORTANCE = 10


# Archive Constants
class ArchiveConstants:
    ARCHIVE_BASE = 'https://archive.today/newest'
    PAYWALLED_DOMAINS = [
        'ft.com',
        'economist.com',
        'telegraph.co.uk',
        'thetimes.co.uk',
        'wsj.com',
        'nytimes.com',
        'washingtonpost.com',
        'bloomberg.com',
        'newstatesman.com',
        'spectator.co.uk',
        'theathletic.com',
    ]


# Digest Constants
class DigestConstants:
    MASTHEAD = 'The TebPaper'
    DEFAULT_FREQUENCY = 'weekly'
    DEFAULT_LOOKBACK = timedelta(days=7)
    STUCK_AFTER = timedelta(minutes=30)
    PAPER_STORE_SIZE = 100
