"""
Pydantic schemas for parsed species lists and enriched species cards.
"""
from pydantic import BaseModel, Field


# ============================================================
# Species lists
# ============================================================

class Collection(BaseModel):
    """One named, optionally geolocated list of organism names."""
    title: str = Field(..., description="Section header text, trimmed")
    latitude: float | None = None
    longitude: float | None = None
    names: list[str] = Field(default_factory=list, description="Raw scientific names, in page order")

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class BiolistEntry(BaseModel):
    """Entry of the legacy JSON biolist format."""
    binomial: str

    model_config = {"extra": "allow"}


# ============================================================
# Enriched output
# ============================================================

class SpeciesCard(BaseModel):
    """Everything known about one organism name after enrichment."""
    binomial_name: str = Field(..., description="Name after cleaning")
    taxon_name: str = Field(..., description="Taxon name (P225) or the cleaned name")
    common_name: str | None = None
    image: str | None = Field(None, description="Thumbnail URL of the main image (P18)")
    range_map: str | None = Field(None, description="Thumbnail URL of the range map (P181)")

    short_description: str | None = None
    medium_description: str | None = None
    long_description: str | None = Field(None, description="Intro paragraph HTML")
    infobox: str | None = None

    wikidata_id: str | None = None
    assessed_group: str = "unknown"
    assessment_method: str = "fallback"  # "graph", "text", "fallback"


class EnrichedCollection(BaseModel):
    """A collection whose names have been turned into species cards."""
    title: str
    latitude: float | None = None
    longitude: float | None = None
    cards: list[SpeciesCard] = Field(default_factory=list)
