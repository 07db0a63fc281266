"""
Wikidata API client for taxon relationships and card metadata.

Provides:
- Relationship edges used for group resolution (parent taxon,
  instance of / subclass of, taxon known by this common name)
- Entity search by free-text name
- Card metadata: taxon name, common name, image and range map
"""
import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

import httpx
from diskcache import Cache


logger = logging.getLogger(__name__)

WIKIDATA_API = "https://www.wikidata.org/w/api.php"
COMMONS_FILE_PATH = "https://commons.wikimedia.org/wiki/Special:FilePath"

# Wikidata properties
PARENT_TAXON = "P171"
INSTANCE_OF = "P31"
SUBCLASS_OF = "P279"
TAXON_KNOWN_BY_COMMON_NAME = "P1176"
IMAGE = "P18"
RANGE_MAP = "P181"
TAXON_NAME = "P225"
TAXON_COMMON_NAME = "P1843"

# Punctuation left unescaped in Commons file names (besides _.-~)
_URI_COMPONENT_SAFE = "!*'()"


@dataclass
class GraphEntity:
    """Relationship edges of one Wikidata item."""

    identifier: str
    parent_identifier: str | None = None
    conceptual_identifiers: list[str] = field(default_factory=list)
    related_name_identifiers: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return (
            self.parent_identifier is None
            and not self.conceptual_identifiers
            and not self.related_name_identifiers
        )


@dataclass
class EntitySearchHit:
    """One candidate returned by wbsearchentities."""

    id: str
    label: str | None = None
    description: str | None = None


@dataclass
class TaxonDetails:
    """Card metadata extracted from an entity's claims."""

    id: str
    taxon_name: str | None = None
    common_name: str | None = None
    image: str | None = None
    range_map: str | None = None
    label: str | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "taxon_name": self.taxon_name,
            "common_name": self.common_name,
            "image": self.image,
            "range_map": self.range_map,
            "label": self.label,
        }


def commons_image_url(
    filename: str,
    width: int = 400,
    base_url: str = COMMONS_FILE_PATH
) -> str:
    """Turn a Commons file name into a fixed-width thumbnail URL."""
    normalized = quote(filename.replace(" ", "_"), safe=_URI_COMPONENT_SAFE)
    return f"{base_url}/{normalized}?width={width}"


def _item_ids(claims: dict, prop: str) -> list[str]:
    """Item ids of a property's claims, skipping novalue/somevalue snaks."""
    ids = []
    for claim in claims.get(prop, []):
        value = claim.get("mainsnak", {}).get("datavalue", {}).get("value")
        if isinstance(value, dict) and value.get("id"):
            ids.append(value["id"])
    return ids


def _first_string(claims: dict, prop: str) -> str | None:
    for claim in claims.get(prop, []):
        value = claim.get("mainsnak", {}).get("datavalue", {}).get("value")
        if isinstance(value, str) and value:
            return value
    return None


def _dedupe(ids: list[str]) -> list[str]:
    return list(dict.fromkeys(ids))


class WikidataClient:
    """
    Client for the Wikidata action API.

    Missing entities and failed requests are not errors: they come back
    as empty results so graph traversal can treat them as dead ends.
    """

    def __init__(
        self,
        api_url: str = WIKIDATA_API,
        cache_dir: str | None = None,
        rate_limit: float = 0.0,
        timeout: float = 30.0,
        user_agent: str | None = None,
        thumbnail_width: int = 400,
        commons_file_path: str = COMMONS_FILE_PATH
    ):
        """
        Initialize Wikidata client.

        Args:
            api_url: Wikidata action API endpoint
            cache_dir: Directory for caching claim lookups (disabled if None)
            rate_limit: Minimum seconds between requests
            timeout: Request timeout in seconds
            user_agent: User-Agent header sent with every request
            thumbnail_width: Width of Commons thumbnails
            commons_file_path: Base URL of Special:FilePath
        """
        self.api_url = api_url
        self.rate_limit = rate_limit
        self.timeout = timeout
        self.thumbnail_width = thumbnail_width
        self.commons_file_path = commons_file_path
        self._last_request = 0.0
        self._lock = threading.Lock()

        headers = {"User-Agent": user_agent} if user_agent else {}
        self._client = httpx.Client(timeout=timeout, headers=headers)

        if cache_dir:
            self.cache = Cache(cache_dir)
        else:
            self.cache = None

        logger.info(f"WikidataClient initialized (cache={'enabled' if cache_dir else 'disabled'})")

    def fetch_claims(self, identifier: str) -> GraphEntity:
        """
        Get the relationship edges of an entity.

        Args:
            identifier: Wikidata QID (e.g., "Q140")

        Returns:
            GraphEntity; all fields empty if the entity is missing or the
            request fails.
        """
        cache_key = f"claims:{identifier}"
        if self.cache is not None and cache_key in self.cache:
            logger.debug(f"Cache hit for claims: {identifier}")
            return self.cache[cache_key]

        entity = self._get_entity(identifier, props="claims")
        if entity is None:
            return GraphEntity(identifier=identifier)

        claims = entity.get("claims") or {}
        parents = _item_ids(claims, PARENT_TAXON)
        result = GraphEntity(
            identifier=identifier,
            parent_identifier=parents[0] if parents else None,
            conceptual_identifiers=_dedupe(
                _item_ids(claims, INSTANCE_OF) + _item_ids(claims, SUBCLASS_OF)
            ),
            related_name_identifiers=_dedupe(_item_ids(claims, TAXON_KNOWN_BY_COMMON_NAME)),
        )

        if self.cache is not None:
            self.cache[cache_key] = result

        return result

    def search_entities(self, name: str, language: str = "en", limit: int = 7) -> list[EntitySearchHit]:
        """
        Search entities by free-text name.

        Returns:
            Ranked candidates; empty list on failure or no match.
        """
        data = self._get({
            "action": "wbsearchentities",
            "search": name,
            "language": language,
            "limit": limit,
            "format": "json",
        })
        if not data:
            return []

        return [
            EntitySearchHit(
                id=hit["id"],
                label=hit.get("label"),
                description=hit.get("description"),
            )
            for hit in data.get("search", [])
            if hit.get("id")
        ]

    def get_taxon_details(self, identifier: str, language: str = "en") -> TaxonDetails | None:
        """
        Get card metadata for an entity.

        The common name prefers the requested language and falls back to
        the first one listed.
        """
        entity = self._get_entity(identifier, props="claims|labels", languages=language)
        if entity is None:
            return None

        claims = entity.get("claims") or {}
        details = TaxonDetails(id=identifier)
        details.taxon_name = _first_string(claims, TAXON_NAME)
        details.label = entity.get("labels", {}).get(language, {}).get("value")

        image = _first_string(claims, IMAGE)
        if image:
            details.image = commons_image_url(image, self.thumbnail_width, self.commons_file_path)

        range_map = _first_string(claims, RANGE_MAP)
        if range_map:
            details.range_map = commons_image_url(range_map, self.thumbnail_width, self.commons_file_path)

        details.common_name = self._common_name(claims, language)
        return details

    def _common_name(self, claims: dict, language: str) -> str | None:
        """Pick a P1843 monolingual text, preferring the given language."""
        texts = []
        for claim in claims.get(TAXON_COMMON_NAME, []):
            value = claim.get("mainsnak", {}).get("datavalue", {}).get("value")
            if isinstance(value, dict) and value.get("text"):
                texts.append(value)

        for value in texts:
            if value.get("language") == language:
                return value["text"]

        return texts[0]["text"] if texts else None

    def _get_entity(self, identifier: str, props: str, languages: str | None = None) -> dict | None:
        """Fetch one entity, or None if it is missing or the request fails."""
        params = {
            "action": "wbgetentities",
            "ids": identifier,
            "props": props,
            "format": "json",
        }
        if languages:
            params["languages"] = languages

        data = self._get(params)
        if not data:
            return None

        entity = data.get("entities", {}).get(identifier)
        if not entity or "missing" in entity:
            logger.debug(f"Wikidata entity missing: {identifier}")
            return None

        return entity

    def _get(self, params: dict[str, Any]) -> dict | None:
        """GET the action API and decode JSON; None on any failure."""
        self._rate_limit_wait()

        try:
            response = self._client.get(self.api_url, params=params)

            if response.status_code != 200:
                logger.debug(f"Wikidata request failed: {response.status_code}")
                return None

            data = response.json()
            if "error" in data:
                logger.debug(f"Wikidata API error: {data['error'].get('info')}")
                return None

            return data

        except httpx.HTTPError as e:
            logger.warning(f"Wikidata request error: {e}")
            return None
        except ValueError as e:
            logger.warning(f"Wikidata returned invalid JSON: {e}")
            return None

    def _rate_limit_wait(self):
        """Wait for rate limit."""
        if self.rate_limit <= 0:
            return
        with self._lock:
            elapsed = time.time() - self._last_request
            if elapsed < self.rate_limit:
                time.sleep(self.rate_limit - elapsed)
            self._last_request = time.time()

    def close(self):
        """Close the HTTP client and cache."""
        self._client.close()
        if self.cache is not None:
            self.cache.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
