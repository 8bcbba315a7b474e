"""Configuration schema models using Pydantic."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
Environment = Literal["development", "production"]


class PathsConfig(BaseModel):
    """Locations of the site's file-backed data.

    Relative paths are resolved against the working directory of the
    server process.
    """

    feed_xml: Path = Path("public/podcast-feed.xml")
    analysis_json: Path = Path("data/podcast-analysis-progress.json")
    articles_dir: Path = Path("content/articles")
    questions_json: Path = Path("content/listener-questions.json")
    public_dir: Path = Path("public")
    asset_manifest: Path | None = None  # Defaults to <public_dir>/asset-manifest.json

    @property
    def manifest_path(self) -> Path:
        return self.asset_manifest or self.public_dir / "asset-manifest.json"


class QuestionsConfig(BaseModel):
    """Listener question gate settings."""

    min_form_time_ms: int = Field(default=3000, ge=0)
    rate_limit_window_ms: int = Field(default=60_000, gt=0)
    max_submissions: int = Field(default=3, ge=1)
    max_tracked_clients: int = Field(default=10_000, ge=1)
    default_name: str = "Анонимный слушатель"
    default_category: str = "other"


class AssetsConfig(BaseModel):
    """Cache busting for static assets."""

    hash_length: int = Field(default=8, ge=4, le=32)
    asset_paths: list[str] = Field(
        default_factory=lambda: [
            "stylesheets/styles.css",
            "javascript/player.js",
            "javascript/scripts.js",
        ]
    )


class StatsConfig(BaseModel):
    """Figures on the statistics page that do not come from the feed."""

    listeners: int = 3433
    countries: int = 17
    guests: int = 8


class ExportConfig(BaseModel):
    """Markdown archive export rules."""

    excluded_link_substrings: list[str] = Field(
        default_factory=lambda: ["youtube.com/@techlifepodcast"]
    )
    skipped_paragraph_prefixes: list[str] = Field(default_factory=lambda: ["📺"])
    skipped_paragraph_substrings: list[str] = Field(
        default_factory=lambda: ["наш подкаст в директории"]
    )


class ServerConfig(BaseModel):
    """HTTP server settings."""

    host: str = "127.0.0.1"
    port: int = Field(default=3000, ge=1, le=65535)
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])
    episodes_per_page: int = Field(default=10, ge=1)


class SiteConfig(BaseModel):
    """Global Techlife site configuration."""

    version: str = "1"
    environment: Environment = "development"
    log_level: LogLevel = "INFO"
    site_title: str = "Технологии и жизнь"
    base_url: str = "https://www.techlifepodcast.com"

    paths: PathsConfig = Field(default_factory=PathsConfig)
    questions: QuestionsConfig = Field(default_factory=QuestionsConfig)
    assets: AssetsConfig = Field(default_factory=AssetsConfig)
    stats: StatsConfig = Field(default_factory=StatsConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)

    @property
    def is_production(self) -> bool:
        return self.environment == "production"
