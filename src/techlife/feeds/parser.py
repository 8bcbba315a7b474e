"""RSS feed parser using feedparser."""

import logging
import re
from pathlib import Path
from typing import Any

import feedparser

from techlife.feeds.models import FeedItem, ParsedFeed, Podcast
from techlife.utils.errors import FeedParseError
from techlife.utils.result import LoadResult

logger = logging.getLogger(__name__)

EPISODE_NUMBER_PATTERN = re.compile(r"^#(\d+):\s*")


def extract_episode_number(title: str, position: int) -> tuple[str, str]:
    """Split a ``#N: Title`` string into its number and bare title.

    Titles without the prefix fall back to the 1-based feed position.

    Args:
        title: Raw item title
        position: Zero-based index of the item in the feed

    Returns:
        Tuple of (episode number as string, title without the prefix)

    Example:
        >>> extract_episode_number("#42: Роботы", 0)
        ('42', 'Роботы')
    """
    stripped = title.strip()
    match = EPISODE_NUMBER_PATTERN.match(stripped)
    if match:
        return match.group(1), stripped[match.end():].strip()
    return str(position + 1), stripped


def parse_duration(value: str | None) -> int:
    """Convert an ``itunes:duration`` value to seconds.

    Accepts ``HH:MM:SS``, ``MM:SS`` and bare seconds; anything else is 0.
    """
    if not value:
        return 0

    parts = value.strip().split(":")
    try:
        numbers = [int(part) for part in parts]
    except ValueError:
        logger.debug("Unexpected duration format: %r", value)
        return 0

    if len(numbers) == 3:
        return numbers[0] * 3600 + numbers[1] * 60 + numbers[2]
    if len(numbers) == 2:
        return numbers[0] * 60 + numbers[1]
    if len(numbers) == 1:
        return numbers[0]

    logger.debug("Unexpected duration format: %r", value)
    return 0


class RSSParser:
    """Parses RSS feeds and extracts episode information."""

    def parse(self, content: str | bytes) -> ParsedFeed:
        """Parse feed XML into channel info and items in feed order.

        Malformed documents are tolerated: whatever feedparser recovers is
        returned and a warning is logged.

        Args:
            content: Feed document

        Returns:
            ParsedFeed with podcast info and raw items
        """
        parsed = feedparser.parse(content)

        if parsed.get("bozo"):
            logger.warning(
                "Feed is not well-formed, using recovered items: %s",
                parsed.get("bozo_exception"),
            )

        podcast = self._extract_podcast(parsed.get("feed", {}))
        items = tuple(self._extract_item(entry) for entry in parsed.get("entries", []))

        logger.debug("Parsed %d feed items", len(items))
        return ParsedFeed(podcast=podcast, items=items)

    def parse_file(self, path: Path) -> LoadResult[ParsedFeed]:
        """Read and parse a feed file.

        Returns:
            LoadResult holding the ParsedFeed, or a FeedParseError if the
            file could not be read
        """
        try:
            content = path.read_bytes()
        except OSError as e:
            return LoadResult.fail(FeedParseError(f"Cannot read feed {path}: {e}"))
        return LoadResult.ok(self.parse(content))

    def _extract_podcast(self, feed: Any) -> Podcast:
        image = feed.get("image") or {}
        return Podcast(
            title=feed.get("title", ""),
            description=feed.get("subtitle", "") or feed.get("description", ""),
            link=feed.get("link"),
            image_url=image.get("href"),
            language=feed.get("language"),
        )

    def _extract_item(self, entry: Any) -> FeedItem:
        # content:encoded wins over description
        content = entry.get("content") or []
        description = content[0].get("value", "") if content else entry.get("summary", "")

        enclosures = entry.get("enclosures") or []
        enclosure_url = enclosures[0].get("href") if enclosures else None

        return FeedItem(
            title=entry.get("title", ""),
            description=description or "",
            pub_date=entry.get("published", ""),
            guid=entry.get("id"),
            link=entry.get("link"),
            subtitle=entry.get("subtitle") or None,
            duration=entry.get("itunes_duration") or None,
            enclosure_url=enclosure_url,
        )
