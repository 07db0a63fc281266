"""
Wikipedia client for article text and Wikidata item lookup.

Provides:
- Name to Wikidata QID lookup (page props, redirects followed)
- Article text: short description, lead summary, intro paragraph, infobox
"""
import logging
import re
import threading
import time
from dataclasses import dataclass
from urllib.parse import quote

import requests
from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

WIKIPEDIA_HOST_TEMPLATE = "https://{language}.wikipedia.org"

# Elements the mobile renderer marks as not part of an excerpt
EXCLUDED_SELECTORS = ".noexcerpt, .mw-empty-elt"
RELATIVE_LINK = re.compile(r"^\./")


@dataclass
class ArticleText:
    """Text extracted from a rendered Wikipedia article."""
    short_description: str = ""
    medium_description: str = ""
    intro_paragraph: str = ""  # HTML, links made absolute
    intro_text: str = ""  # Same paragraph as plain text
    infobox: str = ""

    def full_text(self) -> str:
        """
        Short description, lead text and infobox joined for text analysis.

        The medium description already holds the intro paragraph, so the
        intro is only used on its own when there is no medium description.
        """
        lead = self.medium_description or self.intro_text
        parts = [self.short_description, lead, self.infobox]
        return " ".join(p for p in parts if p)

    def to_dict(self) -> dict:
        return {
            "short_description": self.short_description,
            "medium_description": self.medium_description,
            "intro_paragraph": self.intro_paragraph,
            "infobox": self.infobox,
        }


def parse_article_html(html: str, language: str = "en",
                       host_template: str = WIKIPEDIA_HOST_TEMPLATE) -> ArticleText:
    """
    Extract the pieces of a mobile-html article used for cards and classification.

    Args:
        html: Rendered article (REST `page/mobile-html`)
        language: Wikipedia edition, used to make relative links absolute
        host_template: Host URL with a `{language}` placeholder

    Returns:
        ArticleText; missing pieces are empty strings.
    """
    soup = BeautifulSoup(html, "html.parser")

    for element in soup.select(EXCLUDED_SELECTORS):
        element.decompose()

    article = ArticleText()

    description = soup.select_one("#pcs-edit-section-title-description")
    if description is not None:
        article.short_description = description.get_text().strip()

    introduction = soup.select_one('[data-mw-section-id="0"]')
    if introduction is None:
        return article

    wiki_base = host_template.format(language=language) + "/wiki/"
    for link in introduction.select("a[href]"):
        href = link["href"]
        if RELATIVE_LINK.match(href):
            link["href"] = RELATIVE_LINK.sub(wiki_base, href)

    infobox = introduction.select_one(".infobox")
    if infobox is not None:
        article.infobox = infobox.get_text(" ").strip()
        infobox.extract()

    paragraphs = [p for p in introduction.find_all("p") if p.get_text().strip()]
    if paragraphs:
        first = paragraphs[0]
        article.intro_paragraph = first.decode_contents().strip()
        article.intro_text = first.get_text().strip()
        article.medium_description = "\n\n".join(p.get_text().strip() for p in paragraphs)

    return article


class WikipediaClient:
    """
    Client for Wikipedia's action and REST APIs.

    Missing articles and failed requests return None; they are a normal
    outcome for obscure taxa, not an error.
    """

    def __init__(
        self,
        host_template: str = WIKIPEDIA_HOST_TEMPLATE,
        rate_limit: float = 0.0,
        timeout: float = 30.0,
        user_agent: str | None = None
    ):
        """
        Initialize Wikipedia client.

        Args:
            host_template: Host URL with a `{language}` placeholder
            rate_limit: Seconds between requests
            timeout: Request timeout in seconds
            user_agent: User-Agent header sent with every request
        """
        self.host_template = host_template
        self.rate_limit = rate_limit
        self.timeout = timeout
        self._last_request = 0.0
        self._lock = threading.Lock()

        self.session = requests.Session()
        if user_agent:
            self.session.headers["User-Agent"] = user_agent

        logger.info("WikipediaClient initialized")

    def host(self, language: str) -> str:
        return self.host_template.format(language=language)

    def lookup_entity_id(self, name: str, language: str = "en") -> str | None:
        """
        Find the Wikidata QID of the article titled `name`.

        Returns:
            QID, or None if there is no such article or it has no item.
        """
        self._rate_limit_wait()

        try:
            response = self.session.get(
                f"{self.host(language)}/w/api.php",
                params={
                    "action": "query",
                    "prop": "pageprops",
                    "titles": name,
                    "redirects": 1,
                    "ppprop": "wikibase_item",
                    "format": "json",
                },
                timeout=self.timeout
            )

            if response.status_code != 200:
                logger.debug(f"Wikipedia page props request failed: {response.status_code}")
                return None

            pages = response.json().get("query", {}).get("pages", {})

        except requests.RequestException as e:
            logger.warning(f"Wikipedia lookup error for {name}: {e}")
            return None
        except ValueError as e:
            logger.warning(f"Wikipedia returned invalid JSON for {name}: {e}")
            return None

        for page_id, page in pages.items():
            if page_id == "-1":
                continue
            qid = page.get("pageprops", {}).get("wikibase_item")
            if qid:
                return qid

        return None

    def fetch_text(self, name: str, language: str = "en") -> ArticleText | None:
        """
        Fetch and parse the article for `name`.

        Returns:
            ArticleText, or None if the article does not exist or the
            request fails.
        """
        self._rate_limit_wait()

        url = f"{self.host(language)}/api/rest_v1/page/mobile-html/{quote(name, safe='')}"
        try:
            response = self.session.get(url, timeout=self.timeout)

            if response.status_code != 200:
                logger.debug(f"Wikipedia article request failed for {name}: {response.status_code}")
                return None

            html = response.text

        except requests.RequestException as e:
            logger.warning(f"Wikipedia article error for {name}: {e}")
            return None

        return parse_article_html(html, language, self.host_template)

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
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
