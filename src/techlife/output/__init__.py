"""Text exports derived from the episode collection."""

from techlife.output.markdown import EpisodesMarkdownExporter
from techlife.output.sitemap import build_sitemap

__all__ = ["EpisodesMarkdownExporter", "build_sitemap"]
