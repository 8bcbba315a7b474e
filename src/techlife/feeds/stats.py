"""Figures for the statistics page."""

from collections.abc import Sequence

from pydantic import Field

from techlife.config.schema import StatsConfig
from techlife.feeds.models import Episode, WireModel


class PodcastStats(WireModel):
    """Aggregate numbers about the podcast."""

    episode_count: int
    total_duration_seconds: int
    total_hours: int
    listeners: int
    countries: int
    guests: int
    episodes_by_year: dict[int, list[Episode]] = Field(default_factory=dict)


def group_by_year(episodes: Sequence[Episode]) -> dict[int, list[Episode]]:
    """Group dated episodes by publication year, most recent year first."""
    groups: dict[int, list[Episode]] = {}
    for episode in episodes:
        if episode.published is None:
            continue
        groups.setdefault(episode.published.year, []).append(episode)
    return dict(sorted(groups.items(), reverse=True))


def compute_stats(episodes: Sequence[Episode], config: StatsConfig | None = None) -> PodcastStats:
    config = config or StatsConfig()
    total_seconds = sum(episode.duration_seconds for episode in episodes)
    return PodcastStats(
        episode_count=len(episodes),
        total_duration_seconds=total_seconds,
        total_hours=round(total_seconds / 3600),
        listeners=config.listeners,
        countries=config.countries,
        guests=config.guests,
        episodes_by_year=group_by_year(episodes),
    )
