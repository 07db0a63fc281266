"""
Central configuration management for WikiNaturalist.

Loads settings from environment variables and provides typed access.
"""
from pathlib import Path
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class WikiSettings(BaseSettings):
    """Wikimedia endpoints and defaults.

    `wikipedia_host_template` is formatted with the article language, so a
    single setting serves every Wikipedia edition.
    """
    language: str = Field(default="en", alias="WIKI_LANGUAGE")
    wikidata_api: str = Field(default="https://www.wikidata.org/w/api.php", alias="WIKIDATA_API")
    wikipedia_host_template: str = Field(
        default="https://{language}.wikipedia.org",
        alias="WIKIPEDIA_HOST_TEMPLATE"
    )
    meta_api: str = Field(default="https://meta.wikimedia.org/w/api.php", alias="META_API")
    commons_file_path: str = Field(
        default="https://commons.wikimedia.org/wiki/Special:FilePath",
        alias="COMMONS_FILE_PATH"
    )
    thumbnail_width: int = Field(default=400, alias="THUMBNAIL_WIDTH")
    user_agent: str = Field(
        default="WikiNaturalist/0.1 (https://meta.wikimedia.org/wiki/WikiNaturalist)",
        alias="WIKI_USER_AGENT"
    )
    datalist_page_suffix: str = Field(default="WikiNaturalist", alias="DATALIST_PAGE_SUFFIX")
    username: str | None = Field(default=None, alias="WIKIMEDIA_USERNAME")


class HttpSettings(BaseSettings):
    """HTTP behaviour shared by all clients."""
    timeout: float = Field(default=30.0, alias="HTTP_TIMEOUT")
    max_workers: int = Field(default=4, alias="ENRICH_MAX_WORKERS")


class RateLimitSettings(BaseSettings):
    """Rate limits for external APIs (seconds between requests)."""
    wikidata: float = Field(default=0.0, alias="WIKIDATA_RATE_LIMIT")
    wikipedia: float = Field(default=0.0, alias="WIKIPEDIA_RATE_LIMIT")
    meta: float = Field(default=1.0, alias="META_RATE_LIMIT")


class PathSettings(BaseSettings):
    """Path configuration."""
    data_cache: Path = Field(default=Path("data/cache"), alias="DATA_CACHE_PATH")

    def resolve(self, base_dir: Path) -> "PathSettings":
        """Resolve relative paths against base directory."""
        return self.model_copy(update={"data_cache": base_dir / self.data_cache})


class Settings(BaseSettings):
    """Main settings aggregator."""
    wiki: WikiSettings = Field(default_factory=WikiSettings)
    http: HttpSettings = Field(default_factory=HttpSettings)
    rate_limits: RateLimitSettings = Field(default_factory=RateLimitSettings)
    paths: PathSettings = Field(default_factory=PathSettings)

    # Project root
    project_root: Path = Field(default_factory=lambda: Path(__file__).parent.parent.parent)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Convenience function
def load_dotenv_if_exists():
    """Load .env file from the project root if it exists."""
    from dotenv import load_dotenv
    env_path = Path(__file__).parent.parent.parent / ".env"
    if env_path.exists():
        load_dotenv(env_path)
