"""Join raw feed items with analysis records."""

from collections.abc import Iterable, Mapping
from datetime import datetime, timezone

from techlife.feeds.models import AnalysisRecord, Episode, FeedItem
from techlife.feeds.parser import extract_episode_number, parse_duration
from techlife.utils.dates import convert_date, parse_flexible_date


def build_episode(
    item: FeedItem,
    position: int,
    analyses: Mapping[int, AnalysisRecord] | None = None,
) -> Episode:
    """Normalize one feed item into an Episode with its analysis record attached."""
    episode_num, title = extract_episode_number(item.title, position)
    analysis = (analyses or {}).get(int(episode_num))
    published = parse_flexible_date(item.pub_date)

    return Episode(
        episode_num=episode_num,
        title=title,
        raw_title=item.title,
        subtitle=item.subtitle,
        description=item.description,
        pub_date=item.pub_date,
        pub_date_converted=convert_date(item.pub_date),
        published=published,
        duration=item.duration,
        duration_seconds=parse_duration(item.duration),
        enclosure_url=item.enclosure_url,
        guid=item.guid,
        link=item.link,
        tags=analysis.tags if analysis else (),
        summary=analysis.summary if analysis else None,
    )


def enrich_episodes(
    items: Iterable[FeedItem],
    analyses: Mapping[int, AnalysisRecord],
) -> list[Episode]:
    """Left-join feed items with analysis records.

    Order is preserved and nothing is dropped; items without a record get
    no tags and no summary.

    Args:
        items: Raw items in feed order
        analyses: Records keyed by integer episode number

    Returns:
        Episodes in the same order as ``items``
    """
    return [build_episode(item, position, analyses) for position, item in enumerate(items)]


_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def sort_newest_first(episodes: Iterable[Episode]) -> list[Episode]:
    """Sort by publication date, newest first.

    Undated episodes go last and keep their relative order.
    """
    return sorted(
        episodes,
        key=lambda ep: (ep.published is not None, ep.published or _OLDEST),
        reverse=True,
    )
