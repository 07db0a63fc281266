"""WikiNaturalist - species list enrichment from Wikidata and Wikipedia."""

__version__ = "0.1.0"
