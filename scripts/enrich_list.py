"""
WikiNaturalist list enrichment.

Reads species lists (a wikitext file, a Wikimedia user page, or the default
list), classifies every name and prints the result as JSON.

Usage:
    python scripts/enrich_list.py                         # Default list
    python scripts/enrich_list.py my_list.txt             # Local wikitext file
    python scripts/enrich_list.py --user Alice            # User:Alice/WikiNaturalist
    python scripts/enrich_list.py my_list.txt --classify-only --language fr
"""
import argparse
import json
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from wikinaturalist.core.config import get_settings, load_dotenv_if_exists
from wikinaturalist.core.schemas import Collection
from wikinaturalist.enrichment.card_enricher import CardEnricher
from wikinaturalist.ingestion.datalist_parser import parse_datalist, wikitext_filter
from wikinaturalist.ingestion.datalist_source import DatalistSource

load_dotenv_if_exists()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%H:%M:%S"
)
logger = logging.getLogger("enrich_list")


def load_collections(input_path: Path | None, username: str | None) -> list[Collection]:
    """Collections from a file, a user page, or the default list."""
    settings = get_settings()

    if input_path is not None:
        text = input_path.read_text(encoding="utf-8")
        collections = parse_datalist(wikitext_filter(text))
        if not collections:
            logger.error(f"No collection with names found in {input_path}")
            return []
        return collections

    with DatalistSource(
        api_url=settings.wiki.meta_api,
        page_suffix=settings.wiki.datalist_page_suffix,
        rate_limit=settings.rate_limits.meta,
        timeout=settings.http.timeout,
        user_agent=settings.wiki.user_agent,
    ) as source:
        return source.fetch(username or settings.wiki.username)


def run(
    input_path: Path | None,
    username: str | None,
    language: str,
    classify_only: bool,
    use_cache: bool,
    workers: int | None,
) -> list[dict]:
    settings = get_settings()
    collections = load_collections(input_path, username)
    logger.info(f"Loaded {len(collections)} collection(s)")

    cache_dir = str(settings.paths.resolve(settings.project_root).data_cache) if use_cache else None
    enricher = CardEnricher.from_settings(settings, cache_dir=cache_dir)
    if workers:
        enricher.max_workers = workers

    try:
        if classify_only:
            output = []
            for collection in collections:
                groups = {
                    name: enricher.classifier.classify(name, language)
                    for name in collection.names
                }
                output.append({**collection.model_dump(), "groups": groups})
            return output

        enriched = enricher.enrich_collections(collections, language)
        return [c.model_dump() for c in enriched]
    finally:
        enricher.close()


def main():
    parser = argparse.ArgumentParser(
        description="WikiNaturalist - Classify and enrich species lists",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/enrich_list.py                     # Default list
  python scripts/enrich_list.py list.txt            # Wikitext file
  python scripts/enrich_list.py --user Alice        # Wikimedia user page
  python scripts/enrich_list.py --classify-only     # Groups only, no cards
        """
    )
    parser.add_argument(
        "input_path",
        type=Path,
        nargs="?",
        help="Wikitext file with == sections == and * / # list lines"
    )
    parser.add_argument(
        "--user",
        help="Wikimedia username whose WikiNaturalist page to read"
    )
    parser.add_argument(
        "--language", default=None,
        help="Wikipedia language (default: WIKI_LANGUAGE or 'en')"
    )
    parser.add_argument(
        "--classify-only", action="store_true",
        help="Only assess groups, skip card metadata"
    )
    parser.add_argument(
        "--cache", action="store_true",
        help="Cache Wikidata claims on disk (DATA_CACHE_PATH)"
    )
    parser.add_argument(
        "--workers", type=int, default=None,
        help="Names enriched in parallel (default: ENRICH_MAX_WORKERS)"
    )

    args = parser.parse_args()

    output = run(
        input_path=args.input_path,
        username=args.user,
        language=args.language or get_settings().wiki.language,
        classify_only=args.classify_only,
        use_cache=args.cache,
        workers=args.workers,
    )
    print(json.dumps(output, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
