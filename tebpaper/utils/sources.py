"""
Default feed registry, organised by category.

Each category maps to an ordered list of outlets. A YAML file passed to
``Config`` can replace the whole registry.
"""
from typing import Dict, List

from tebpaper.utils.models import CategoryPreference, Source


def _sources(*entries) -> List[Source]:
    return [Source(name=name, url=url, leaning=leaning) for name, url, leaning in entries]


DEFAULT_SOURCES: Dict[str, List[Source]] = {
    'national': _sources(
        ('BBC News', 'https://feeds.bbci.co.uk/news/rss.xml', 'centre'),
        ('The Guardian', 'https://www.theguardian.com/uk/rss', 'centre-left'),
        ('The Telegraph', 'https://www.telegraph.co.uk/rss.xml', 'centre-right'),
        ('Reuters UK', 'https://www.reutersagency.com/feed/', 'centre'),
        ('AP News', 'https://rsshub.app/apnews/topics/apf-topnews', 'centre'),
    ),
    'international': _sources(
        ('BBC World', 'https://feeds.bbci.co.uk/news/world/rss.xml', 'centre'),
        ('Al Jazeera', 'https://www.aljazeera.com/xml/rss/all.xml', 'centre-left'),
        ('Reuters World', 'https://www.reutersagency.com/feed/', 'centre'),
        ('NPR World', 'https://feeds.npr.org/1004/rss.xml', 'centre-left'),
        ('The Economist', 'https://www.economist.com/international/rss.xml', 'centre'),
    ),
    'sport': _sources(
        ('BBC Sport', 'https://feeds.bbci.co.uk/sport/rss.xml', 'centre'),
        ('ESPN', 'https://www.espn.com/espn/rss/news', 'centre'),
        ('The Guardian Sport', 'https://www.theguardian.com/uk/sport/rss', 'centre'),
    ),
    'economy': _sources(
        ('Financial Times', 'https://www.ft.com/rss/home', 'centre-right'),
        ('BBC Business', 'https://feeds.bbci.co.uk/news/business/rss.xml', 'centre'),
        ('Bloomberg', 'https://feeds.bloomberg.com/markets/news.rss', 'centre'),
    ),
    'technology': _sources(
        ('BBC Technology', 'https://feeds.bbci.co.uk/news/technology/rss.xml', 'centre'),
        ('Ars Technica', 'https://feeds.arstechnica.com/arstechnica/index', 'centre'),
        ('The Verge', 'https://www.theverge.com/rss/index.xml', 'centre-left'),
    ),
    'science': _sources(
        ('BBC Science', 'https://feeds.bbci.co.uk/news/science_and_environment/rss.xml', 'centre'),
        ('Nature News', 'https://www.nature.com/nature.rss', 'centre'),
        ('New Scientist', 'https://www.newscientist.com/feed/home/', 'centre'),
    ),
    'opinion': _sources(
        ('Guardian Opinion', 'https://www.theguardian.com/uk/commentisfree/rss', 'centre-left'),
        ('The Spectator', 'https://www.spectator.co.uk/feed', 'right'),
        ('New Statesman', 'https://www.newstatesman.com/feed', 'left'),
    ),
    'travel': _sources(
        ('Guardian Travel', 'https://www.theguardian.com/uk/travel/rss', 'centre'),
        ('Lonely Planet', 'https://www.lonelyplanet.com/news/feed', 'centre'),
    ),
    'culture': _sources(
        ('Guardian Culture', 'https://www.theguardian.com/uk/culture/rss', 'centre-left'),
        ('BBC Culture', 'https://feeds.bbci.co.uk/news/entertainment_and_arts/rss.xml', 'centre'),
    ),
    # Region-specific; readers are expected to bring their own
    'local': _sources(
        ('BBC England', 'https://feeds.bbci.co.uk/news/england/rss.xml', 'centre'),
    ),
}

# Used for visitors who have no stored preferences
DEFAULT_CATEGORIES: List[CategoryPreference] = [
    CategoryPreference(category='national', weight=8),
    CategoryPreference(category='international', weight=8),
    CategoryPreference(category='sport', weight=5),
    CategoryPreference(category='economy', weight=6),
    CategoryPreference(category='technology', weight=5),
    CategoryPreference(category='opinion', weight=4),
    CategoryPreference(category='science', weight=5),
]


def parse_registry(raw: Dict[str, List[dict]]) -> Dict[str, List[Source]]:
    """Build a registry from plain mappings, e.g. loaded from YAML"""
    return {
        category: [Source(**entry) for entry in (entries or [])]
        for category, entries in raw.items()
    }
