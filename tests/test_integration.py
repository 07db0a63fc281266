"""
WikiNaturalist — Integration Tests

Tests all modules to verify:
1. Core module imports and configuration defaults
2. Package exports
3. Client construction (no network)
4. End-to-end wiring from a wikitext list to species cards

Run:
    python tests/test_integration.py           # All tests
    python tests/test_integration.py -v        # Verbose
"""
import sys
import unittest
from pathlib import Path
from unittest.mock import MagicMock

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))


# ============================================================
# 1. Core Module Tests
# ============================================================

class TestCoreImports(unittest.TestCase):
    """Test that all core modules import without errors."""

    def test_import_config(self):
        from wikinaturalist.core.config import Settings
        s = Settings()
        self.assertEqual(s.wiki.language, "en")
        self.assertEqual(s.wiki.thumbnail_width, 400)
        self.assertEqual(s.rate_limits.meta, 1.0)
        self.assertIn("{language}", s.wiki.wikipedia_host_template)

    def test_resolve_paths(self):
        from wikinaturalist.core.config import PathSettings
        resolved = PathSettings().resolve(Path("/srv/app"))
        self.assertEqual(resolved.data_cache, Path("/srv/app/data/cache"))

    def test_import_registry(self):
        from wikinaturalist.core import get_registry, UNKNOWN_GROUP
        registry = get_registry()
        self.assertEqual(registry.fallback.id, UNKNOWN_GROUP)
        self.assertIn("fungi", registry.ids)

    def test_import_schemas(self):
        from wikinaturalist.core.schemas import SpeciesCard
        card = SpeciesCard(binomial_name="Pica pica", taxon_name="Pica pica")
        self.assertEqual(card.assessed_group, "unknown")
        self.assertEqual(card.assessment_method, "fallback")


# ============================================================
# 2. Package Exports
# ============================================================

class TestPackageExports(unittest.TestCase):
    """Test that subpackages expose their public classes."""

    def test_scrapers(self):
        from wikinaturalist.scrapers import WikidataClient, WikipediaClient
        self.assertTrue(callable(WikidataClient))
        self.assertTrue(callable(WikipediaClient))

    def test_enrichment(self):
        from wikinaturalist.enrichment import CardEnricher, GraphResolver, GroupClassifier
        self.assertTrue(callable(CardEnricher.from_settings))
        self.assertTrue(callable(GraphResolver))
        self.assertTrue(callable(GroupClassifier))

    def test_extraction(self):
        from wikinaturalist.extraction import TextClassifier
        self.assertTrue(callable(TextClassifier))

    def test_ingestion(self):
        from wikinaturalist.ingestion import DatalistSource, parse_datalist
        self.assertTrue(callable(DatalistSource))
        self.assertIsNone(parse_datalist(""))


# ============================================================
# 3. Client Construction
# ============================================================

class TestClientConstruction(unittest.TestCase):
    """Test that clients build from settings without network access."""

    def test_from_settings(self):
        from wikinaturalist.core.config import Settings
        from wikinaturalist.enrichment import CardEnricher

        enricher = CardEnricher.from_settings(Settings())
        try:
            self.assertEqual(enricher.max_workers, 4)
            self.assertIsNone(enricher.wikidata.cache)
            self.assertIs(enricher.classifier.graph_resolver.wikidata, enricher.wikidata)
            self.assertIs(enricher.classifier.text_classifier.wikipedia, enricher.wikipedia)
        finally:
            enricher.close()

    def test_user_agent_header(self):
        from wikinaturalist.scrapers import WikipediaClient
        client = WikipediaClient(user_agent="WikiNaturalist-test")
        try:
            self.assertEqual(client.session.headers["User-Agent"], "WikiNaturalist-test")
        finally:
            client.close()


# ============================================================
# 4. End-to-end wiring
# ============================================================

class TestEndToEnd(unittest.TestCase):
    """Wikitext list -> collections -> cards, with stubbed network clients."""

    def setUp(self):
        from wikinaturalist.enrichment import GraphResolver, GroupClassifier, CardEnricher
        from wikinaturalist.extraction import TextClassifier
        from wikinaturalist.scrapers import ArticleText, GraphEntity

        edges = {
            "Q25418": GraphEntity("Q25418", parent_identifier="Q5113"),
            "Q165145": GraphEntity("Q165145", conceptual_identifiers=["Q7541"]),
        }
        wikidata = MagicMock()
        wikidata.fetch_claims.side_effect = lambda qid: edges.get(qid, GraphEntity(qid))
        wikidata.search_entities.return_value = []

        seeds = {"Pica pica": "Q25418", "Quercus robur": "Q165145"}
        articles = {"Hyla arborea": ArticleText(
            medium_description="A small frog.",
            infobox="Class: Amphibia",
        )}
        wikipedia = MagicMock()
        wikipedia.lookup_entity_id.side_effect = lambda name, language="en": seeds.get(name)
        wikipedia.fetch_text.side_effect = lambda name, language="en": articles.get(name)

        classifier = GroupClassifier(
            GraphResolver(wikidata, wikipedia),
            TextClassifier(wikipedia),
        )
        self.enricher = CardEnricher(wikidata, wikipedia, classifier, max_workers=2)

    def test_list_to_cards(self):
        from wikinaturalist.ingestion import parse_datalist

        wikitext = """
== Spain ==
# { lat: 43.0, lon: 1.17 }
# Pica pica (magpie)
# Quercus robur
# Hyla arborea
# Nonexistus imaginarius
"""
        collections = parse_datalist(wikitext)
        enriched = self.enricher.enrich_collections(collections)

        self.assertEqual(len(enriched), 1)
        cards = {c.binomial_name: c for c in enriched[0].cards}

        self.assertEqual(cards["Pica pica"].assessed_group, "bird")
        self.assertEqual(cards["Pica pica"].assessment_method, "graph")
        self.assertEqual(cards["Quercus robur"].assessed_group, "plant")
        self.assertEqual(cards["Hyla arborea"].assessed_group, "amphibian")
        self.assertEqual(cards["Hyla arborea"].assessment_method, "text")
        self.assertEqual(cards["Nonexistus imaginarius"].assessed_group, "unknown")
        self.assertEqual(cards["Nonexistus imaginarius"].assessment_method, "fallback")


if __name__ == "__main__":
    unittest.main()
