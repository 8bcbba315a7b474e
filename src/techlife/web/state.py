"""Process-wide state shared by request handlers."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from fastapi import Request

from techlife.assets.cache_buster import CacheBuster
from techlife.blog.articles import ArticleIndex
from techlife.config.schema import SiteConfig
from techlife.feeds.facets import get_all_tags
from techlife.feeds.models import TagFacet
from techlife.feeds.service import EpisodeCatalog, load_catalog
from techlife.output.markdown import EpisodesMarkdownExporter
from techlife.questions.gate import SubmissionGate
from techlife.questions.store import QuestionStore

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    """Everything built once at startup.

    The catalog and article index are read-only for the life of the
    process; new feed entries or analysis results need a restart.
    """

    config: SiteConfig
    catalog: EpisodeCatalog
    articles: ArticleIndex
    store: QuestionStore
    gate: SubmissionGate
    cache_buster: CacheBuster
    exporter: EpisodesMarkdownExporter
    tags: list[TagFacet] = field(default_factory=list)
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def build(cls, config: SiteConfig) -> "AppState":
        """Load feed, analysis and articles, and wire up the services."""
        paths = config.paths
        catalog = load_catalog(paths.feed_xml, paths.analysis_json)
        store = QuestionStore(paths.questions_json)

        state = cls(
            config=config,
            catalog=catalog,
            articles=ArticleIndex.load(paths.articles_dir),
            store=store,
            gate=SubmissionGate(config.questions, store),
            cache_buster=CacheBuster(
                paths.public_dir,
                manifest_path=paths.manifest_path,
                hash_length=config.assets.hash_length,
                dev_mode=not config.is_production,
            ),
            exporter=EpisodesMarkdownExporter(config.export),
            tags=get_all_tags(catalog.episodes),
        )
        logger.info(
            "Application initialization complete: %d episodes, %d tags, %d articles",
            len(catalog),
            len(state.tags),
            len(state.articles),
        )
        return state

    def asset_urls(self) -> dict[str, str]:
        return {
            path: self.cache_buster.get_asset_url(f"/{path}")
            for path in self.config.assets.asset_paths
        }


def get_state(request: Request) -> AppState:
    """FastAPI dependency returning the application state."""
    return request.app.state.site
