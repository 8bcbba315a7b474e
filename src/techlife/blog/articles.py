"""Markdown blog articles with YAML front matter.

Each article is ``<articles_dir>/<slug>.md``::

    ---
    title: Заголовок
    description: Коротко о статье
    author: Автор
    date: 2024-03-01
    ---
    Текст статьи в markdown.
"""

import datetime as dt
import logging
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, field_validator

from techlife.feeds.models import WireModel

logger = logging.getLogger(__name__)

FRONTMATTER_PATTERN = re.compile(r"\A---\s*\n(.*?)\n---\s*(?:\n|\Z)", re.DOTALL)
SLUG_PATTERN = re.compile(r"^[\w-]+$")


class Article(WireModel):
    """Metadata for one blog article."""

    slug: str
    title: str
    description: str = ""
    author: str = ""
    date: dt.date | None = None
    image: str | None = None
    tags: list[str] = Field(default_factory=list)

    @field_validator("description", "author", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Any:
        # YAML turns bare numbers and dates into non-strings, empty keys into None
        if v is None:
            return ""
        return v if isinstance(v, str) else str(v)

    @field_validator("title", "image", mode="before")
    @classmethod
    def coerce_optional_text(cls, v: Any) -> Any:
        if v is None or isinstance(v, str):
            return v
        return str(v)

    @field_validator("tags", mode="before")
    @classmethod
    def coerce_tags(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, (list, tuple)):
            return [str(tag) for tag in v if tag is not None]
        return [str(v)]

    @field_validator("date", mode="before")
    @classmethod
    def coerce_date(cls, v: Any) -> Any:
        if isinstance(v, dt.datetime):
            return v.date()
        if isinstance(v, dt.date) or v is None:
            return v
        try:
            return dt.date.fromisoformat(str(v).strip())
        except ValueError:
            logger.warning("Ignoring unparseable article date %r", v)
            return None


def split_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Split a markdown document into front matter and body.

    Documents without front matter get an empty dict.
    """
    match = FRONTMATTER_PATTERN.match(text)
    if not match:
        return {}, text

    data = yaml.safe_load(match.group(1)) or {}
    if not isinstance(data, dict):
        data = {}
    return data, text[match.end():]


class ArticleIndex:
    """In-memory index of the blog, newest first.

    Example:
        >>> index = ArticleIndex.load(Path("content/articles"))
        >>> index.search("raspberry")
    """

    def __init__(self, articles_dir: Path, articles: list[Article] | None = None) -> None:
        self.articles_dir = articles_dir
        self.articles = articles or []
        self._by_slug = {article.slug: article for article in self.articles}

    @classmethod
    def load(cls, articles_dir: Path) -> "ArticleIndex":
        """Read front matter of every article in ``articles_dir``.

        A missing directory gives an empty index; unreadable articles are
        skipped with a warning.
        """
        if not articles_dir.is_dir():
            logger.warning("Articles directory %s not found; blog is empty", articles_dir)
            return cls(articles_dir, [])

        articles = []
        for path in sorted(articles_dir.glob("*.md")):
            try:
                metadata, _ = split_frontmatter(path.read_text(encoding="utf-8"))
                # The file name is the slug, whatever the front matter says
                metadata = {"title": path.stem, **metadata, "slug": path.stem}
                if metadata["title"] is None:
                    metadata["title"] = path.stem
                articles.append(Article.model_validate(metadata))
            except (OSError, yaml.YAMLError, ValueError) as e:
                logger.warning("Skipping article %s: %s", path.name, e)

        articles.sort(key=lambda a: (a.date is not None, a.date or dt.date.min), reverse=True)
        logger.info("Loaded %d articles from %s", len(articles), articles_dir)
        return cls(articles_dir, articles)

    def __len__(self) -> int:
        return len(self.articles)

    def get_metadata(self, slug: str) -> Article | None:
        return self._by_slug.get(slug)

    def read_body(self, slug: str) -> str | None:
        """Return the markdown body of an article, or None if unknown."""
        if not SLUG_PATTERN.match(slug) or slug not in self._by_slug:
            return None

        path = self.articles_dir / f"{slug}.md"
        try:
            _, body = split_frontmatter(path.read_text(encoding="utf-8"))
        except OSError as e:
            logger.warning("Cannot read article %s: %s", path, e)
            return None
        return body.strip()

    def search(self, query: str) -> list[Article]:
        """Substring search over title, description and author."""
        needle = query.strip().lower()
        if not needle:
            return []
        return [
            article
            for article in self.articles
            if needle in (article.title + article.description + article.author).lower()
        ]
