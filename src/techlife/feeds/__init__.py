"""Feed parsing and the episode pipeline for Techlife."""

from techlife.feeds.enricher import enrich_episodes
from techlife.feeds.facets import get_all_tags, get_episodes_by_tag
from techlife.feeds.models import AnalysisRecord, Episode, FeedItem, Podcast, TagFacet
from techlife.feeds.parser import RSSParser
from techlife.feeds.service import EpisodeCatalog, load_catalog

__all__ = [
    "AnalysisRecord",
    "Episode",
    "EpisodeCatalog",
    "FeedItem",
    "Podcast",
    "RSSParser",
    "TagFacet",
    "enrich_episodes",
    "get_all_tags",
    "get_episodes_by_tag",
    "load_catalog",
]
