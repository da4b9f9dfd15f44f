"""
Tests for paywall detection and archive links
"""
import pytest

from tebpaper.processors.archive_enricher import (
    ArchiveEnricher,
    get_archive_url,
    is_likely_paywalled,
)
from tebpaper.utils.config import Config
from tebpaper.utils.constants import ArchiveConstants
from tebpaper.utils.models import RawArticle, ScoredArticle


def make_article(link):
    return RawArticle(
        title="Story",
        link=link,
        author="Reporter",
        source_name="Outlet",
        source_leaning="centre",
        category="economy",
        affinity_score=1.0,
        category_weight=5,
    )


@pytest.fixture
def enricher():
    return ArchiveEnricher()


class TestHelpers:

    def test_archive_url_appends_original_verbatim(self):
        url = "https://www.ft.com/content/abc?x=1&y=2"
        assert get_archive_url(url) == f"{ArchiveConstants.ARCHIVE_BASE}/{url}"

    def test_archive_url_for_empty_link(self):
        assert get_archive_url("") is None
        assert get_archive_url(None) is None

    @pytest.mark.parametrize("url", [
        "https://www.ft.com/content/123",
        "https://www.nytimes.com/2025/10/20/world/story.html",
        "https://www.telegraph.co.uk/news/2025/10/20/story/",
        "https://www.economist.com/briefing/2025/10/20/story",
    ])
    def test_known_paywalled_domains(self, url):
        assert is_likely_paywalled(url)

    @pytest.mark.parametrize("url", [
        "https://www.bbc.co.uk/news/articles/xyz",
        "https://www.theguardian.com/uk-news/2025/oct/20/story",
        "",
        None,
    ])
    def test_open_domains(self, url):
        assert not is_likely_paywalled(url)


class TestArchiveEnricher:

    def test_paywalled_article_gets_archive_url(self, enricher):
        link = "https://www.wsj.com/articles/markets-123"
        enriched = enricher.enrich(make_article(link))

        assert enriched.is_paywalled is True
        assert enriched.archive_url == ArchiveConstants.ARCHIVE_BASE + "/" + link

    def test_open_article_has_no_archive_url(self, enricher):
        enriched = enricher.enrich(make_article("https://feeds.bbci.co.uk/news/story"))

        assert enriched.is_paywalled is False
        assert enriched.archive_url is None

    def test_original_fields_preserved(self, enricher):
        article = make_article("https://www.bloomberg.com/news/1")
        enriched = enricher.enrich(article)

        assert enriched.link == article.link
        assert enriched.title == article.title
        assert enriched.source_name == article.source_name

    def test_score_is_carried_over(self, enricher):
        scored = ScoredArticle(**make_article("https://www.ft.com/x").model_dump(), score=0.42)
        assert enricher.enrich(scored).score == 0.42

    def test_does_not_mutate_input(self, enricher):
        article = make_article("https://www.ft.com/x")
        enricher.enrich(article)
        assert not hasattr(article, "archive_url")

    def test_configured_domains_and_base(self):
        config = Config()
        config.archive.paywalled_domains = ["example.org"]
        config.archive.base_url = "https://archive.example"
        enricher = ArchiveEnricher(config)

        enriched = enricher.enrich(make_article("https://example.org/a"))
        assert enriched.archive_url == "https://archive.example/https://example.org/a"
        assert not enricher.enrich(make_article("https://www.ft.com/a")).is_paywalled
