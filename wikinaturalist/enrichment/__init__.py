"""
Enrichment module - Group resolution over Wikidata and species card building.
"""
from .graph_resolver import (
    DOMESTIC_ANIMAL_OVERRIDES,
    GROUP_OUTPUT_MAP,
    GraphResolver,
    ResolutionState,
)
from .group_classifier import GroupAssessment, GroupClassifier
from .card_enricher import CardEnricher, clean_binomial_name

__all__ = [
    "DOMESTIC_ANIMAL_OVERRIDES",
    "GROUP_OUTPUT_MAP",
    "GraphResolver",
    "ResolutionState",
    "GroupAssessment",
    "GroupClassifier",
    "CardEnricher",
    "clean_binomial_name",
]
