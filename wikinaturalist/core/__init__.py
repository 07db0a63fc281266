"""
Core module - Configuration, group registry and schemas.
"""
from .config import Settings, get_settings
from .group_registry import DEFAULT_GROUPS, UNKNOWN_GROUP, Group, GroupRegistry, get_registry
from .schemas import BiolistEntry, Collection, EnrichedCollection, SpeciesCard

__all__ = [
    "Settings",
    "get_settings",
    "DEFAULT_GROUPS",
    "UNKNOWN_GROUP",
    "Group",
    "GroupRegistry",
    "get_registry",
    "BiolistEntry",
    "Collection",
    "EnrichedCollection",
    "SpeciesCard",
]
