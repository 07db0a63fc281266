"""
Ingestion module - Species lists from wikitext pages.
"""
from .datalist_parser import parse_datalist, parse_wikitext_biolist, wikitext_filter
from .datalist_source import DEFAULT_DATALIST, DatalistSource, default_collections

__all__ = [
    "parse_datalist",
    "parse_wikitext_biolist",
    "wikitext_filter",
    "DEFAULT_DATALIST",
    "DatalistSource",
    "default_collections",
]
