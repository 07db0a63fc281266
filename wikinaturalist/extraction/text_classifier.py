"""
Text Classifier - Fallback group classification from Wikipedia text.

Heuristic and lower confidence than the graph resolver: it only looks at
which words appear in the article, not at what they mean. Use it when the
graph resolver returns "unknown".

Strategies are tried in order; each returns a group id or None
("no opinion").
"""
import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Protocol

from ..core.group_registry import GroupRegistry, UNKNOWN_GROUP, get_registry
from ..scrapers.wikipedia_client import ArticleText

logger = logging.getLogger(__name__)

PLANT_GROUP = "plant"
# Sub-groups the plant group is split into by word frequency
PLANT_SUBGROUPS = ("tree", "grass")

NON_ALPHA = re.compile(r"[^a-z\s]")


@dataclass
class WordFrequency:
    """Most frequent target word of a text, with all counts."""
    word: str | None = None
    count: int = 0
    all_counts: dict[str, int] = field(default_factory=dict)


def tokenize(text: str) -> list[str]:
    """Lowercase, replace anything but a-z and whitespace by spaces, split."""
    return NON_ALPHA.sub(" ", text.lower()).split()


def most_frequent_word(target_words: Iterable[str], text: str) -> WordFrequency:
    """
    Count occurrences of target words in a text.

    The winner is the first word to reach the highest count; a later word
    that only equals that count does not replace it.
    """
    targets = {w.lower() for w in target_words}
    result = WordFrequency()

    for word in tokenize(text):
        if word not in targets:
            continue
        result.all_counts[word] = result.all_counts.get(word, 0) + 1
        if result.all_counts[word] > result.count:
            result.count = result.all_counts[word]
            result.word = word

    return result


class ClassificationStrategy(Protocol):
    name: str

    def classify(self, article: ArticleText) -> str | None: ...


class InfoboxLabelStrategy:
    """
    Match phylogenetic labels (e.g. "Mammalia") in the infobox.

    Labels are matched as whole words, case-insensitively, in registry
    order. A match on the general plant group is refined to tree or grass
    by word frequency over the whole article.
    """

    name = "infobox_label"

    def __init__(self, registry: GroupRegistry):
        self.registry = registry
        self._patterns = [
            (group.id, re.compile(rf"\b{re.escape(group.label)}\b", re.IGNORECASE))
            for group in registry
            if group.external_id is not None
        ]

    def classify(self, article: ArticleText) -> str | None:
        if not article.infobox:
            return None

        for group_id, pattern in self._patterns:
            if pattern.search(article.infobox):
                if group_id == PLANT_GROUP:
                    return self._plant_subgroup(article)
                return group_id

        return None

    def _plant_subgroup(self, article: ArticleText) -> str:
        frequency = most_frequent_word(PLANT_SUBGROUPS, article.full_text())
        return frequency.word or PLANT_GROUP


class GroupNameFrequencyStrategy:
    """Pick the registry group name used most often in the article."""

    name = "group_name_frequency"

    def __init__(self, registry: GroupRegistry):
        self.group_ids = registry.ids

    def classify(self, article: ArticleText) -> str | None:
        frequency = most_frequent_word(self.group_ids, article.full_text())
        if frequency.word:
            logger.debug(f"Group name counts: {frequency.all_counts}")
        return frequency.word


class TextClassifier:
    """
    Classifies organisms from their Wikipedia article.

    Default strategy chain:
    1. Phylogenetic label in the infobox (with plant refinement)
    2. Group name frequency across the article
    """

    def __init__(
        self,
        wikipedia,
        registry: GroupRegistry | None = None,
        strategies: list[ClassificationStrategy] | None = None
    ):
        """
        Initialize classifier.

        Args:
            wikipedia: Object with `fetch_text(name, language)`
            registry: Group registry (process default if None)
            strategies: Ordered strategies (default chain if None)
        """
        self.wikipedia = wikipedia
        self.registry = registry or get_registry()
        self.strategies = strategies if strategies is not None else [
            InfoboxLabelStrategy(self.registry),
            GroupNameFrequencyStrategy(self.registry),
        ]

    def classify_by_text(self, name: str, language: str = "en") -> str:
        """
        Classify a name from its article text.

        Returns:
            Group id; "unknown" when there is no article or no strategy
            has an opinion.
        """
        try:
            article = self.wikipedia.fetch_text(name, language)
        except Exception as e:
            logger.error(f"Error fetching article for {name}: {e}")
            return UNKNOWN_GROUP

        if article is None:
            logger.info(f"No Wikipedia data available for {name}")
            return UNKNOWN_GROUP

        return self.classify_article(article)

    def classify_article(self, article: ArticleText) -> str:
        """Run the strategy chain on already fetched text."""
        for strategy in self.strategies:
            group_id = strategy.classify(article)
            if group_id:
                logger.debug(f"Strategy {strategy.name} -> {group_id}")
                return group_id

        return UNKNOWN_GROUP
