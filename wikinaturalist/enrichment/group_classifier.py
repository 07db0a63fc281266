"""
Group classifier combining the graph resolver and the text classifier.

The graph resolver is authoritative; article text is only consulted when
the graph yields "unknown".
"""
import logging
from dataclasses import dataclass

from ..core.group_registry import UNKNOWN_GROUP
from ..extraction.text_classifier import TextClassifier
from ..scrapers.wikipedia_client import ArticleText
from .graph_resolver import GraphResolver

logger = logging.getLogger(__name__)


@dataclass
class GroupAssessment:
    """Group of one name and the method that decided it."""
    name: str
    group: str
    method: str  # "graph", "text", "fallback"


class GroupClassifier:
    """Graph first, text second, "unknown" last."""

    def __init__(self, graph_resolver: GraphResolver, text_classifier: TextClassifier | None = None):
        self.graph_resolver = graph_resolver
        self.text_classifier = text_classifier

    def assess(
        self,
        name: str,
        language: str = "en",
        article: ArticleText | None = None
    ) -> GroupAssessment:
        """
        Assess the group of one name.

        Args:
            name: Scientific name
            language: Wikipedia edition
            article: Article text already fetched for `name`; the text
                classifier fetches it itself when None
        """
        group = self.graph_resolver.resolve_group(name, language)
        if group != UNKNOWN_GROUP:
            return GroupAssessment(name=name, group=group, method="graph")

        if self.text_classifier is not None:
            if article is not None:
                group = self.text_classifier.classify_article(article)
            else:
                group = self.text_classifier.classify_by_text(name, language)
            if group != UNKNOWN_GROUP:
                logger.info(f"Text fallback classified {name} -> {group}")
                return GroupAssessment(name=name, group=group, method="text")

        return GroupAssessment(name=name, group=UNKNOWN_GROUP, method="fallback")

    def classify(self, name: str, language: str = "en") -> str:
        """Group id only."""
        return self.assess(name, language).group
