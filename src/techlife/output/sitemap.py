"""XML sitemap for search engines."""

from collections.abc import Sequence
from datetime import date
from urllib.parse import quote
from xml.sax.saxutils import escape

from techlife.blog.articles import Article
from techlife.feeds.models import Episode, TagFacet

# (path, changefreq, priority)
STATIC_PAGES = (
    ("/", "weekly", "1.0"),
    ("/about", "monthly", "0.7"),
    ("/resources", "monthly", "0.6"),
    ("/tags", "weekly", "0.7"),
    ("/episodes.md", "weekly", "0.6"),
    ("/blog", "monthly", "0.6"),
)


def encode_uri_component(value: str) -> str:
    """Percent-encode like JavaScript's ``encodeURIComponent``."""
    return quote(value, safe="-_.!~*'()")


def _url(loc: str, changefreq: str, priority: str, lastmod: str | None = None) -> str:
    lines = ["  <url>", f"    <loc>{escape(loc)}</loc>"]
    if lastmod:
        lines.append(f"    <lastmod>{lastmod}</lastmod>")
    lines.append(f"    <changefreq>{changefreq}</changefreq>")
    lines.append(f"    <priority>{priority}</priority>")
    lines.append("  </url>")
    return "\n".join(lines)


def build_sitemap(
    base_url: str,
    episodes: Sequence[Episode],
    tags: Sequence[TagFacet],
    articles: Sequence[Article] = (),
    today: date | None = None,
) -> str:
    """Render the sitemap document.

    Episodes carry their publication date as ``lastmod``; undated ones use
    ``today``.
    """
    base_url = base_url.rstrip("/")
    today_str = (today or date.today()).isoformat()

    entries = [_url(f"{base_url}{path}", freq, prio) for path, freq, prio in STATIC_PAGES]

    for episode in episodes:
        lastmod = episode.published.date().isoformat() if episode.published else today_str
        entries.append(
            _url(f"{base_url}/episodes/{episode.episode_num}", "monthly", "0.8", lastmod)
        )

    for tag in tags:
        entries.append(_url(f"{base_url}/tags/{encode_uri_component(tag.name)}", "weekly", "0.5"))

    for article in articles:
        lastmod = article.date.isoformat() if article.date else None
        entries.append(
            _url(f"{base_url}/blog/{encode_uri_component(article.slug)}", "monthly", "0.6", lastmod)
        )

    return "\n".join(
        [
            '<?xml version="1.0" encoding="UTF-8"?>',
            '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">',
            *entries,
            "</urlset>",
        ]
    ) + "\n"
