"""Data models for podcast episodes and feeds."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Immutable model serialized with camelCase keys for the web client."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class Podcast(WireModel):
    """Channel-level information from the feed."""

    title: str = ""
    description: str = ""
    link: str | None = None
    image_url: str | None = None
    language: str | None = None


class FeedItem(WireModel):
    """One ``<item>`` of the feed, validated at the parse boundary.

    Every field other than the title is optional in real-world feeds, so
    each has a default.
    """

    title: str = ""
    description: str = ""
    pub_date: str = ""
    guid: str | None = None
    link: str | None = None
    subtitle: str | None = None
    duration: str | None = None
    enclosure_url: str | None = None


class Episode(WireModel):
    """A podcast episode ready for presentation.

    Built once per process from a ``FeedItem`` and (optionally) an
    analysis record; never mutated afterwards.
    """

    episode_num: str
    title: str
    raw_title: str
    subtitle: str | None = None
    description: str = ""
    pub_date: str = ""
    pub_date_converted: str
    published: datetime | None = None
    duration: str | None = None
    duration_seconds: int = 0
    enclosure_url: str | None = None
    guid: str | None = None
    link: str | None = None
    tags: tuple[str, ...] = ()
    summary: str | None = None

    @property
    def number(self) -> int:
        """Episode number as an integer, 0 if it is not numeric."""
        try:
            return int(self.episode_num)
        except ValueError:
            return 0


class AnalysisRecord(BaseModel):
    """Externally computed tags and summary for one episode."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    episode_number: int = Field(alias="episodeNumber")
    tags: tuple[str, ...] = ()
    summary: str | None = None


class TagFacet(WireModel):
    """A tag with the number of episodes carrying it."""

    name: str
    count: int


class ParsedFeed(BaseModel):
    """Result of parsing a feed document."""

    model_config = ConfigDict(frozen=True)

    podcast: Podcast = Field(default_factory=Podcast)
    items: tuple[FeedItem, ...] = ()
