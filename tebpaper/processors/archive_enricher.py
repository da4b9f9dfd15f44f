"""
Archive links for likely paywalled articles.

Builds archive.today URLs so readers can get past paywalls. Only the URL is
constructed; whether a snapshot exists is never checked.
"""
from typing import Iterable, Optional

from tebpaper.utils.constants import ArchiveConstants
from tebpaper.utils.models import ArchivedArticle, RawArticle


def get_archive_url(original_url: Optional[str], base_url: str = ArchiveConstants.ARCHIVE_BASE) -> Optional[str]:
    if not original_url:
        return None
    return f"{base_url}/{original_url}"


def is_likely_paywalled(
    url: Optional[str],
    paywalled_domains: Iterable[str] = ArchiveConstants.PAYWALLED_DOMAINS,
) -> bool:
    if not url:
        return False
    return any(domain in url for domain in paywalled_domains)


class ArchiveEnricher:
    """Flags paywalled articles and attaches an archive link to them"""

    def __init__(self, config=None):
        if config is not None:
            self.base_url = config.archive.base_url
            self.paywalled_domains = list(config.archive.paywalled_domains)
        else:
            self.base_url = ArchiveConstants.ARCHIVE_BASE
            self.paywalled_domains = list(ArchiveConstants.PAYWALLED_DOMAINS)

    def enrich(self, article: RawArticle) -> ArchivedArticle:
        data = article.model_dump(exclude={'is_paywalled', 'archive_url'})
        if is_likely_paywalled(article.link, self.paywalled_domains):
            return ArchivedArticle(
                **data,
                is_paywalled=True,
                archive_url=get_archive_url(article.link, self.base_url),
            )
        return ArchivedArticle(**data, is_paywalled=False, archive_url=None)
