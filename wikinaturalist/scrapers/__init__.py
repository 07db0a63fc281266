"""
Scrapers module - Wikimedia API clients.

Provides clients for:
- Wikidata: taxon relationships, search, card metadata
- Wikipedia: article text and Wikidata item lookup
"""
from .wikidata_client import (
    EntitySearchHit,
    GraphEntity,
    TaxonDetails,
    WikidataClient,
    commons_image_url,
)
from .wikipedia_client import ArticleText, WikipediaClient, parse_article_html

__all__ = [
    "EntitySearchHit",
    "GraphEntity",
    "TaxonDetails",
    "WikidataClient",
    "commons_image_url",
    "ArticleText",
    "WikipediaClient",
    "parse_article_html",
]
