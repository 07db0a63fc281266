"""
Parser for sectioned species lists written in wikitext.

Expected format:

    == Collection name ==
    # { lat: 43.0, lon: 1.17 }
    # Quercus robur
    * Pica pica

Each `== header ==` starts a collection. List lines start with `*` or `#`.
One line per section may hold coordinates; every other list line is a name.
"""
import json
import logging
import re

from ..core.schemas import BiolistEntry, Collection

logger = logging.getLogger(__name__)

SECTION_HEADER = re.compile(r"^==+\s*(.+?)\s*==+$", re.MULTILINE)
LIST_MARKERS = ("*", "#")
COORDINATES = re.compile(r"\{\s*lat\s*:\s*([0-9.+-]+)\s*,\s*lon\s*:\s*([0-9.+-]+)\s*\}")

# Wrappers a JSON biolist may be embedded in
_WRAPPER_TAGS = ("syntaxhighlight", "pre", "nowiki")
_JSON_ARRAY = re.compile(r"\[\s*{[\s\S]*}\s*\]", re.MULTILINE)


def wikitext_filter(wikitext: str) -> str:
    """Keep only lines starting with `=`, `*` or `#` (after trimming)."""
    return "\n".join(
        line for line in wikitext.split("\n")
        if line.strip().startswith(("=",) + LIST_MARKERS)
    )


def _list_items(body: str) -> list[str]:
    items = []
    for line in body.split("\n"):
        line = line.strip()
        if not line.startswith(LIST_MARKERS):
            continue
        item = line[1:].strip()
        if item:
            items.append(item)
    return items


def _parse_coordinates(item: str) -> tuple[float, float] | None:
    match = COORDINATES.search(item)
    if not match:
        return None
    try:
        return float(match.group(1)), float(match.group(2))
    except ValueError:
        # e.g. "1.2.3" fits the character class but is not a number
        return None


def parse_datalist(wikitext: str) -> list[Collection] | None:
    """
    Parse sectioned wikitext into collections.

    Args:
        wikitext: Raw page text

    Returns:
        Collections in page order, or None if no section holds any name.
    """
    collections = []
    wikitext = wikitext.replace("\r\n", "\n")

    # re.split with one capture group alternates: [preamble, title, body, title, body, ...]
    parts = SECTION_HEADER.split(wikitext)

    for i in range(1, len(parts), 2):
        title = parts[i].strip()
        body = parts[i + 1] if i + 1 < len(parts) else ""

        items = _list_items(body)
        latitude = longitude = None

        for index, item in enumerate(items):
            coordinates = _parse_coordinates(item)
            if coordinates is not None:
                latitude, longitude = coordinates
                del items[index]
                break

        if not items:
            logger.debug(f"Dropping empty collection: {title}")
            continue

        collections.append(Collection(
            title=title,
            latitude=latitude,
            longitude=longitude,
            names=items,
        ))

    return collections or None


def parse_wikitext_biolist(wikitext: str) -> list[BiolistEntry] | None:
    """
    Extract a legacy JSON biolist from wikitext.

    The JSON array may be wrapped in <syntaxhighlight>, <pre> or <nowiki>.
    Every item must be an object with a string "binomial".

    Returns:
        Entries, or None if no valid list is found.
    """
    text = wikitext
    for tag in _WRAPPER_TAGS:
        text = re.sub(rf"<{tag}[^>]*>([\s\S]*?)</{tag}>", r"\1", text, flags=re.IGNORECASE)

    match = _JSON_ARRAY.search(text)
    if match:
        text = match.group(0)

    try:
        parsed = json.loads(text.strip())
    except ValueError as e:
        logger.debug(f"Biolist is not valid JSON: {e}")
        return None

    if not isinstance(parsed, list):
        logger.warning("Parsed biolist is not an array")
        return None

    if not all(isinstance(item, dict) and isinstance(item.get("binomial"), str) for item in parsed):
        logger.warning("Biolist items are missing required keys (binomial)")
        return None

    return [BiolistEntry.model_validate(item) for item in parsed]
