"""
Loads species lists from a Wikimedia user page, with a built-in default.

The page `User:<name>/WikiNaturalist` on meta.wikimedia.org holds the
list in the sectioned format read by `parse_datalist`, or in the legacy
JSON biolist format read by `parse_wikitext_biolist`.
"""
import logging
import time

import httpx

from ..core.schemas import Collection
from .datalist_parser import parse_datalist, parse_wikitext_biolist, wikitext_filter

logger = logging.getLogger(__name__)

META_API = "https://meta.wikimedia.org/w/api.php"

DEFAULT_DATALIST = """
== Spain ==
# { lat: 43.0, lon: 1.17 }
# Quercus robur
# Erinaceus europaeus
# Pica pica
# Podarcis muralis
# Hyla arborea

== Indonesia ==
# { lat: 0.27, lon: 115.03 }
# Polypedates otilophus
# Draco quinquefasciatus
# Pongo pygmaeus
# Helarctos malayanus
# Neofelis diardi
# Tragulus kanchil
# Hylobates muelleri
# Hydrornis baudii
# Hydrornis schwaneri
# Trogonoptera brookiana
"""


def default_collections() -> list[Collection]:
    return parse_datalist(DEFAULT_DATALIST) or []


class DatalistSource:
    """Fetches a user's species lists from their Wikimedia user page."""

    def __init__(
        self,
        api_url: str = META_API,
        page_suffix: str = "WikiNaturalist",
        rate_limit: float = 1.0,
        timeout: float = 30.0,
        user_agent: str | None = None
    ):
        """
        Initialize the source.

        Args:
            api_url: Action API of the wiki holding user pages
            page_suffix: Sub-page of the user page holding the list
            rate_limit: Minimum seconds between requests
            timeout: Request timeout in seconds
            user_agent: User-Agent header sent with every request
        """
        self.api_url = api_url
        self.page_suffix = page_suffix
        self.rate_limit = rate_limit
        self._last_request = 0.0

        headers = {"User-Agent": user_agent} if user_agent else {}
        self._client = httpx.Client(timeout=timeout, headers=headers)

    def page_title(self, username: str) -> str:
        username = username.replace('"', "")
        return f"User:{username}/{self.page_suffix}"

    def fetch_wikitext(self, username: str) -> str | None:
        """Raw wikitext of the user's list page, or None if missing."""
        title = self.page_title(username)
        self._rate_limit_wait()

        try:
            response = self._client.get(
                self.api_url,
                params={
                    "action": "parse",
                    "page": title,
                    "prop": "wikitext",
                    "format": "json",
                }
            )

            if response.status_code != 200:
                logger.debug(f"User page request failed: {response.status_code}")
                return None

            data = response.json()

        except httpx.HTTPError as e:
            logger.error(f"Error fetching user datalist: {e}")
            return None
        except ValueError as e:
            logger.error(f"User page response is not JSON: {e}")
            return None

        if "error" in data or not data.get("parse", {}).get("wikitext"):
            logger.info(f"Page {title} does not exist")
            return None

        return data["parse"]["wikitext"].get("*")

    def fetch_user_collections(self, username: str) -> list[Collection] | None:
        """
        Parsed collections of the user's page, or None.

        Pages in the legacy JSON biolist format are read as a single
        collection titled after the user, without coordinates.
        """
        wikitext = self.fetch_wikitext(username)
        if not wikitext:
            return None

        collections = parse_datalist(wikitext_filter(wikitext))
        if collections:
            return collections

        entries = parse_wikitext_biolist(wikitext)
        if entries:
            logger.info(f"Read legacy biolist of {username} ({len(entries)} entries)")
            return [Collection(title=username, names=[e.binomial for e in entries])]

        return None

    def fetch(self, username: str | None = None) -> list[Collection]:
        """
        The user's collections, or the default ones.

        Falls back to the default list when no username is given, the page
        does not exist, or it holds no valid collection.
        """
        if not username:
            logger.info("No Wikimedia username given, using default datalist")
            return default_collections()

        collections = self.fetch_user_collections(username)
        if collections:
            logger.info(f"Using custom datalist of {username}")
            return collections

        logger.info("No valid custom datalist found, using default")
        return default_collections()

    def _rate_limit_wait(self):
        """Wait for rate limit."""
        elapsed = time.time() - self._last_request
        if elapsed < self.rate_limit:
            time.sleep(self.rate_limit - elapsed)
        self._last_request = time.time()

    def close(self):
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
