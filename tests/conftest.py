"""
Pytest configuration and fixtures.
"""
import pytest
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from wikinaturalist.scrapers.wikidata_client import GraphEntity
from wikinaturalist.scrapers.wikipedia_client import ArticleText


class FakeWikidata:
    """In-memory claims graph; records every fetched identifier."""

    def __init__(self, graph: dict[str, dict] | None = None, failing: set[str] | None = None):
        self.graph = graph or {}
        self.failing = failing or set()
        self.fetched: list[str] = []

    def fetch_claims(self, identifier: str) -> GraphEntity:
        self.fetched.append(identifier)
        if identifier in self.failing or identifier not in self.graph:
            return GraphEntity(identifier=identifier)
        node = self.graph[identifier]
        return GraphEntity(
            identifier=identifier,
            parent_identifier=node.get("parent"),
            conceptual_identifiers=list(node.get("concepts", [])),
            related_name_identifiers=list(node.get("related", [])),
        )


class FakeWikipedia:
    """Name lookup and article text from dictionaries."""

    def __init__(self, seeds: dict[str, str] | None = None, articles: dict[str, ArticleText] | None = None):
        self.seeds = seeds or {}
        self.articles = articles or {}

    def lookup_entity_id(self, name: str, language: str = "en") -> str | None:
        return self.seeds.get(name)

    def fetch_text(self, name: str, language: str = "en") -> ArticleText | None:
        return self.articles.get(name)


@pytest.fixture
def fake_wikidata():
    return FakeWikidata


@pytest.fixture
def fake_wikipedia():
    return FakeWikipedia


@pytest.fixture
def mobile_html():
    """Trimmed REST mobile-html of an oak article."""
    return """
<html><body>
<header>
  <p id="pcs-edit-section-title-description">Species of flowering plant</p>
</header>
<section data-mw-section-id="0">
  <table class="infobox biota">
    <tr><th>Kingdom:</th><td><a href="./Plant">Plantae</a></td></tr>
    <tr><th>Order:</th><td><a href="./Fagales">Fagales</a></td></tr>
  </table>
  <p class="mw-empty-elt"></p>
  <p><b>Quercus robur</b> is a large deciduous <a href="./Tree">tree</a>,
  native to most of Europe.<span class="noexcerpt">[edit]</span></p>
  <p>It is a tree of great ecological value.</p>
</section>
<section data-mw-section-id="1"><p>Description of the grass layer.</p></section>
</body></html>
"""


@pytest.fixture
def sample_datalist():
    return """
== Spain ==
# { lat: 43.0, lon: 1.17 }
# Quercus robur
# Pica pica

== Indonesia ==
* Pongo pygmaeus
* { lat: 0.27, lon: 115.03 }
* Neofelis diardi
"""
