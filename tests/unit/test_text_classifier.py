"""
Unit tests for the text-frequency classifier.
"""
import pytest
from pathlib import Path
from unittest.mock import MagicMock

import sys
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from wikinaturalist.core.group_registry import UNKNOWN_GROUP, get_registry
from wikinaturalist.extraction.text_classifier import (
    GroupNameFrequencyStrategy,
    InfoboxLabelStrategy,
    TextClassifier,
    most_frequent_word,
    tokenize,
)
from wikinaturalist.scrapers.wikipedia_client import ArticleText, parse_article_html


class TestMostFrequentWord:
    """Tests for word counting."""

    def test_tokenize_strips_punctuation(self):
        assert tokenize("A tree, (tall) TREE-like!") == ["a", "tree", "tall", "tree", "like"]

    def test_counts_targets_only(self):
        result = most_frequent_word(["tree", "grass"], "tree grass tree shrub tree")
        assert result.word == "tree"
        assert result.count == 3
        assert result.all_counts == {"tree": 3, "grass": 1}

    def test_tie_keeps_first_to_reach_count(self):
        result = most_frequent_word(["mammal", "bird"], "mammal bird mammal bird")
        assert result.word == "mammal"
        assert result.count == 2

    def test_later_strict_winner_replaces(self):
        result = most_frequent_word(["mammal", "bird"], "mammal bird bird")
        assert result.word == "bird"

    def test_no_target_found(self):
        result = most_frequent_word(["tree"], "nothing relevant here")
        assert result.word is None
        assert result.count == 0


class TestStrategies:
    """Tests for the individual classification strategies."""

    @pytest.fixture
    def registry(self):
        return get_registry()

    def test_infobox_label_match(self, registry):
        article = ArticleText(infobox="Kingdom: Animalia Class: Aves Order: Passeriformes")
        # Animalia belongs to a later group than Aves
        assert InfoboxLabelStrategy(registry).classify(article) == "bird"

    def test_infobox_label_needs_whole_word(self, registry):
        article = ArticleText(infobox="Clade: Reptiliaformes")
        assert InfoboxLabelStrategy(registry).classify(article) is None

    def test_infobox_label_case_insensitive(self, registry):
        article = ArticleText(infobox="class: MAMMALIA")
        assert InfoboxLabelStrategy(registry).classify(article) == "mammal"

    def test_plant_refined_by_frequency(self, registry):
        article = ArticleText(
            medium_description="The oak is a tree. This tree forms tree lines above grass.",
            infobox="Kingdom: Plantae",
        )
        assert InfoboxLabelStrategy(registry).classify(article) == "tree"

    def test_plant_without_subgroup_words(self, registry):
        article = ArticleText(medium_description="A flowering herb.", infobox="Kingdom: Plantae")
        assert InfoboxLabelStrategy(registry).classify(article) == "plant"

    def test_no_infobox_no_opinion(self, registry):
        article = ArticleText(medium_description="Mammalia everywhere")
        assert InfoboxLabelStrategy(registry).classify(article) is None

    def test_group_name_frequency(self, registry):
        article = ArticleText(medium_description="This fish eats every insect. Fish fish.")
        assert GroupNameFrequencyStrategy(registry).classify(article) == "fish"


class TestTextClassifier:
    """Tests for TextClassifier.classify_by_text."""

    def _classifier(self, fake_wikipedia, articles):
        return TextClassifier(fake_wikipedia(articles=articles))

    def test_no_article_is_unknown(self, fake_wikipedia):
        assert self._classifier(fake_wikipedia, {}).classify_by_text("Ghost") == UNKNOWN_GROUP

    def test_fetch_error_is_unknown(self):
        wikipedia = MagicMock()
        wikipedia.fetch_text.side_effect = RuntimeError("offline")
        assert TextClassifier(wikipedia).classify_by_text("Ghost") == UNKNOWN_GROUP

    def test_nothing_matches_is_unknown(self, fake_wikipedia):
        articles = {"Rock": ArticleText(medium_description="A piece of granite.")}
        assert self._classifier(fake_wikipedia, articles).classify_by_text("Rock") == UNKNOWN_GROUP

    def test_infobox_before_frequency(self, fake_wikipedia):
        articles = {"Bat": ArticleText(
            medium_description="Often mistaken for a bird, bird, bird.",
            infobox="Class: Mammalia",
        )}
        assert self._classifier(fake_wikipedia, articles).classify_by_text("Bat") == "mammal"

    def test_frequency_when_no_label(self, fake_wikipedia):
        articles = {"Gecko": ArticleText(medium_description="A reptile. Every reptile sheds.")}
        assert self._classifier(fake_wikipedia, articles).classify_by_text("Gecko") == "reptile"

    def test_parsed_article(self, fake_wikipedia, mobile_html):
        articles = {"Quercus robur": parse_article_html(mobile_html)}
        assert self._classifier(fake_wikipedia, articles).classify_by_text("Quercus robur") == "tree"

    def test_intro_paragraph_not_counted_twice(self, fake_wikipedia):
        html = """
<section data-mw-section-id="0">
  <table class="infobox"><tr><td>Kingdom: Plantae</td></tr></table>
  <p>A grass or grass-like herb.</p>
  <p>Often confused with a tree; tree roots, tree bark.</p>
</section>
"""
        articles = {"Herb": parse_article_html(html)}
        assert self._classifier(fake_wikipedia, articles).classify_by_text("Herb") == "tree"

    def test_custom_strategy_chain(self, fake_wikipedia):
        strategy = MagicMock()
        strategy.name = "always_fungi"
        strategy.classify.return_value = "fungi"
        classifier = TextClassifier(fake_wikipedia(articles={"X": ArticleText()}), strategies=[strategy])

        assert classifier.classify_by_text("X") == "fungi"
