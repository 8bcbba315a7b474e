"""Episode pipeline: feed file + analysis file -> enriched, sorted episodes."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from techlife.feeds.analysis import load_analysis
from techlife.feeds.enricher import enrich_episodes, sort_newest_first
from techlife.feeds.models import Episode, Podcast
from techlife.feeds.parser import RSSParser

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EpisodeCatalog:
    """The podcast and its episodes, newest first."""

    podcast: Podcast = field(default_factory=Podcast)
    episodes: tuple[Episode, ...] = ()

    def __len__(self) -> int:
        return len(self.episodes)


def load_catalog(
    feed_path: Path,
    analysis_path: Path,
    parser: RSSParser | None = None,
) -> EpisodeCatalog:
    """Run the whole episode pipeline.

    A missing or unreadable feed yields an empty catalog and a missing
    analysis file yields untagged episodes; both are logged as warnings.

    Args:
        feed_path: Podcast RSS file
        analysis_path: Episode analysis JSON file
        parser: Parser instance (creates one if None)

    Returns:
        EpisodeCatalog ready for the web layer
    """
    parser = parser or RSSParser()

    feed_result = parser.parse_file(feed_path)
    if not feed_result.is_ok:
        logger.warning("%s; serving no episodes", feed_result.error)
        return EpisodeCatalog()
    feed = feed_result.unwrap()

    analysis_result = load_analysis(analysis_path)
    if not analysis_result.is_ok:
        logger.warning("%s; episodes will have no tags", analysis_result.error)
    analyses = analysis_result.unwrap_or({})

    episodes = sort_newest_first(enrich_episodes(feed.items, analyses))
    tagged = sum(1 for episode in episodes if episode.tags)
    logger.info(
        "Loaded %d episodes (%d with analysis) from %s", len(episodes), tagged, feed_path
    )

    return EpisodeCatalog(podcast=feed.podcast, episodes=tuple(episodes))
