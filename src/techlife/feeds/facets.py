"""Derived views over the episode collection: tags, lookup, search, pages."""

import math
from collections import Counter
from collections.abc import Sequence
from functools import lru_cache
from typing import Generic, TypeVar

from pyuca import Collator

from techlife.feeds.models import Episode, TagFacet, WireModel

T = TypeVar("T")


@lru_cache(maxsize=1)
def _collator() -> Collator:
    # Loads the Unicode collation table once per process
    return Collator()


def _tag_sort_key(name: str) -> tuple[tuple[int, ...], str]:
    # Unicode collation: "ё" sorts with "е", lowercase before uppercase
    return _collator().sort_key(name), name


def get_all_tags(episodes: Sequence[Episode]) -> list[TagFacet]:
    """Count tag occurrences across all episodes.

    Returns:
        Facets sorted by tag name, ascending
    """
    counts: Counter[str] = Counter()
    for episode in episodes:
        counts.update(episode.tags)

    return [
        TagFacet(name=name, count=counts[name])
        for name in sorted(counts, key=_tag_sort_key)
    ]


def get_episodes_by_tag(episodes: Sequence[Episode], tag_name: str) -> list[Episode]:
    """Return episodes carrying ``tag_name`` (exact, case-sensitive match).

    Results are sorted by episode number, newest first. An empty list means
    no episode has the tag; callers decide whether that is a 404.
    """
    tagged = [episode for episode in episodes if tag_name in episode.tags]
    return sorted(tagged, key=lambda ep: ep.number, reverse=True)


def find_episode(episodes: Sequence[Episode], episode_num: str) -> Episode | None:
    """Look up an episode by its number string."""
    for episode in episodes:
        if episode.episode_num == episode_num:
            return episode
    return None


def episode_neighbours(
    episodes: Sequence[Episode], episode_num: str
) -> tuple[Episode, Episode | None, Episode | None] | None:
    """Find an episode together with the ones around it.

    With the collection sorted newest first, ``next`` is the item after
    the episode (older) and ``prev`` the item before it (newer).

    Returns:
        (episode, next, prev), or None if the episode is unknown
    """
    for index, episode in enumerate(episodes):
        if episode.episode_num == episode_num:
            next_episode = episodes[index + 1] if index + 1 < len(episodes) else None
            prev_episode = episodes[index - 1] if index > 0 else None
            return episode, next_episode, prev_episode
    return None


def search_episodes(episodes: Sequence[Episode], query: str) -> list[Episode]:
    """Case-insensitive substring search over titles, subtitles, summaries and tags."""
    needle = query.strip().casefold()
    if not needle:
        return []

    results = []
    for episode in episodes:
        haystack = " ".join(
            [episode.title, episode.subtitle or "", episode.summary or "", *episode.tags]
        ).casefold()
        if needle in haystack:
            results.append(episode)
    return results


class Page(WireModel, Generic[T]):
    """One page of a paginated collection."""

    items: list[T]
    page: int
    per_page: int
    total: int
    pages: int


def paginate(items: Sequence[T], page: int = 1, per_page: int = 10) -> Page[T]:
    """Slice ``items`` into a 1-based page.

    Pages past the end are empty rather than an error.
    """
    per_page = max(per_page, 1)
    page = max(page, 1)
    start = (page - 1) * per_page
    return Page[T](
        items=list(items[start:start + per_page]),
        page=page,
        per_page=per_page,
        total=len(items),
        pages=math.ceil(len(items) / per_page),
    )
