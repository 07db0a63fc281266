"""
Card enricher - builds species cards from Wikidata and Wikipedia.

Combines:
- Wikidata search and claims (taxon name, common name, image, range map)
- Wikipedia article text (descriptions, intro paragraph, infobox)
- Group assessment (graph resolver, text classifier as fallback)
"""
import logging
import re
from concurrent.futures import ThreadPoolExecutor

from ..core.config import Settings, get_settings
from ..core.schemas import Collection, EnrichedCollection, SpeciesCard
from ..extraction.text_classifier import TextClassifier
from ..scrapers.wikidata_client import WikidataClient
from ..scrapers.wikipedia_client import ArticleText, WikipediaClient
from .graph_resolver import GraphResolver
from .group_classifier import GroupClassifier

logger = logging.getLogger(__name__)

PARENTHETICAL = re.compile(r"\s*\([^)]*\)")


def clean_binomial_name(name: str) -> str:
    """Drop the first parenthetical note, e.g. "Pica pica (magpie)" -> "Pica pica"."""
    return PARENTHETICAL.sub("", name, count=1).strip()


class CardEnricher:
    """
    Orchestrates enrichment of organism names into species cards.

    Every name gets a card: failures only leave fields empty and the group
    at "unknown".
    """

    def __init__(
        self,
        wikidata: WikidataClient,
        wikipedia: WikipediaClient,
        classifier: GroupClassifier,
        max_workers: int = 4
    ):
        self.wikidata = wikidata
        self.wikipedia = wikipedia
        self.classifier = classifier
        self.max_workers = max_workers

        logger.info("CardEnricher initialized")

    @classmethod
    def from_settings(cls, settings: Settings | None = None, cache_dir: str | None = None) -> "CardEnricher":
        """Wire clients, resolver and classifiers from configuration."""
        settings = settings or get_settings()
        wiki = settings.wiki

        wikidata = WikidataClient(
            api_url=wiki.wikidata_api,
            cache_dir=cache_dir,
            rate_limit=settings.rate_limits.wikidata,
            timeout=settings.http.timeout,
            user_agent=wiki.user_agent,
            thumbnail_width=wiki.thumbnail_width,
            commons_file_path=wiki.commons_file_path,
        )
        wikipedia = WikipediaClient(
            host_template=wiki.wikipedia_host_template,
            rate_limit=settings.rate_limits.wikipedia,
            timeout=settings.http.timeout,
            user_agent=wiki.user_agent,
        )
        classifier = GroupClassifier(
            GraphResolver(wikidata, wikipedia),
            TextClassifier(wikipedia),
        )
        return cls(wikidata, wikipedia, classifier, max_workers=settings.http.max_workers)

    def close(self):
        self.wikidata.close()
        self.wikipedia.close()

    def enrich(self, name: str, language: str = "en") -> SpeciesCard:
        """
        Build the card of one name.

        Args:
            name: Scientific name as written in the list
            language: Language of descriptions and common names

        Returns:
            SpeciesCard
        """
        clean_name = clean_binomial_name(name)

        try:
            card = SpeciesCard(binomial_name=clean_name, taxon_name=clean_name)

            hits = self.wikidata.search_entities(clean_name, language)
            if hits:
                hit = hits[0]
                card.wikidata_id = hit.id
                card.short_description = hit.description

                details = self.wikidata.get_taxon_details(hit.id, language)
                if details:
                    card.taxon_name = details.taxon_name or clean_name
                    card.common_name = details.common_name
                    card.image = details.image
                    card.range_map = details.range_map

            article = self.wikipedia.fetch_text(clean_name, language)
            if article:
                card.medium_description = article.medium_description or None
                card.long_description = article.intro_paragraph or None
                card.infobox = article.infobox or None

            # A missing article is not fetched again for the text fallback
            assessment = self.classifier.assess(clean_name, language, article=article or ArticleText())
            card.assessed_group = assessment.group
            card.assessment_method = assessment.method

            return card

        except Exception as e:
            logger.error(f"Error fetching data for {name}: {e}")
            return SpeciesCard(binomial_name=name, taxon_name=name)

    def enrich_batch(self, names: list[str], language: str = "en") -> list[SpeciesCard]:
        """Enrich names in parallel; output keeps input order."""
        if not names:
            return []

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            return list(executor.map(lambda n: self.enrich(n, language), names))

    def enrich_collection(self, collection: Collection, language: str = "en") -> EnrichedCollection:
        return EnrichedCollection(
            title=collection.title,
            latitude=collection.latitude,
            longitude=collection.longitude,
            cards=self.enrich_batch(collection.names, language),
        )

    def enrich_collections(
        self,
        collections: list[Collection],
        language: str = "en"
    ) -> list[EnrichedCollection]:
        return [self.enrich_collection(c, language) for c in collections]
