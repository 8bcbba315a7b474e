"""Date handling for feed publication dates.

Feed dates arrive as RFC 2822 strings with numeric offsets or literal
``UTC``/``GMT`` suffixes, or as ISO 8601. Display strings use Russian
genitive month names, e.g. ``"2 января 2023"``.
"""

import logging
from datetime import datetime, timezone

from dateutil import parser as date_parser

logger = logging.getLogger(__name__)

DATE_UNKNOWN = "Дата не указана"

# Tried in order; the first format that matches wins.
DATE_FORMATS = (
    "%a, %d %b %Y %H:%M:%S %z",
    "%a, %d %b %Y %H:%M %z",
    "%a, %d %b %Y %H:%M:%S UTC",
    "%a, %d %b %Y %H:%M UTC",
    "%a, %d %b %Y %H:%M:%S GMT",
    "%a, %d %b %Y %H:%M GMT",
    "%Y-%m-%dT%H:%M:%S.%f%z",
    "%Y-%m-%dT%H:%M:%S%z",
)

RU_MONTHS_GENITIVE = (
    "января",
    "февраля",
    "марта",
    "апреля",
    "мая",
    "июня",
    "июля",
    "августа",
    "сентября",
    "октября",
    "ноября",
    "декабря",
)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_flexible_date(value: str | None) -> datetime | None:
    """Parse a feed date string into an aware UTC datetime.

    Args:
        value: Raw date string from the feed

    Returns:
        Parsed datetime, or None if nothing could make sense of it
    """
    if not value or not value.strip():
        return None

    text = value.strip()
    for fmt in DATE_FORMATS:
        try:
            return _as_utc(datetime.strptime(text, fmt))
        except ValueError:
            continue

    try:
        return _as_utc(date_parser.parse(text))
    except (ValueError, OverflowError) as e:
        logger.debug("Could not parse date %r: %s", value, e)
        return None


def format_ru_date(value: datetime) -> str:
    """Format a datetime as ``D MMMM YYYY`` with Russian month names."""
    return f"{value.day} {RU_MONTHS_GENITIVE[value.month - 1]} {value.year}"


def convert_date(value: str | None) -> str:
    """Convert a raw feed date to its display string.

    Never raises; unparsable input yields ``DATE_UNKNOWN``.

    Example:
        >>> convert_date("Mon, 02 Jan 2023 10:00:00 UTC")
        '2 января 2023'
    """
    parsed = parse_flexible_date(value)
    if parsed is None:
        return DATE_UNKNOWN
    return format_ru_date(parsed)
