"""Shared fixtures for Techlife tests."""

import json
from pathlib import Path

import pytest
import yaml

from techlife.config.schema import PathsConfig, SiteConfig
from techlife.feeds.models import Episode
from techlife.feeds.service import EpisodeCatalog, load_catalog

SAMPLE_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0"
     xmlns:itunes="http://www.itunes.com/dtds/podcast-1.0.dtd"
     xmlns:content="http://purl.org/rss/1.0/modules/content/">
  <channel>
    <title>Технологии и жизнь</title>
    <link>https://www.techlifepodcast.com</link>
    <description>Подкаст о технологиях</description>
    <language>ru</language>
    <item>
      <title>#6: Title B</title>
      <description>Short description B</description>
      <content:encoded><![CDATA[<p>Full <a href="https://example.com/b">link B</a></p><ul><li>Item one</li></ul>]]></content:encoded>
      <pubDate>Mon, 09 Jan 2023 10:00:00 +0000</pubDate>
      <guid>episode-6</guid>
      <itunes:duration>01:02:03</itunes:duration>
      <enclosure url="https://cdn.example.com/6.mp3" length="1" type="audio/mpeg"/>
    </item>
    <item>
      <title>#5: Title A</title>
      <description><![CDATA[<p>About A</p>]]></description>
      <pubDate>Mon, 02 Jan 2023 10:00:00 UTC</pubDate>
      <guid>episode-5</guid>
      <itunes:subtitle>Subtitle A</itunes:subtitle>
      <itunes:duration>45:30</itunes:duration>
      <enclosure url="https://cdn.example.com/5.mp3" length="1" type="audio/mpeg"/>
    </item>
  </channel>
</rss>
"""

SAMPLE_ANALYSIS = {
    "episodeAnalyses": [
        {"episodeNumber": 5, "tags": ["Technology"], "summary": "Summary A"},
    ]
}


def make_episode(num: int, tags: tuple[str, ...] = (), **kwargs) -> Episode:
    """Build an Episode without going through the feed."""
    defaults = {
        "episode_num": str(num),
        "title": f"Episode {num}",
        "raw_title": f"#{num}: Episode {num}",
        "pub_date_converted": "Дата не указана",
        "tags": tags,
    }
    defaults.update(kwargs)
    return Episode(**defaults)


@pytest.fixture
def episode_factory():
    """Factory for standalone episodes."""
    return make_episode


@pytest.fixture
def site_dir(tmp_path: Path) -> Path:
    """A site directory with feed, analysis, one article and one asset."""
    (tmp_path / "public" / "stylesheets").mkdir(parents=True)
    (tmp_path / "public" / "podcast-feed.xml").write_text(SAMPLE_FEED, encoding="utf-8")
    (tmp_path / "public" / "stylesheets" / "styles.css").write_text("body{}", encoding="utf-8")

    (tmp_path / "data").mkdir()
    (tmp_path / "data" / "podcast-analysis-progress.json").write_text(
        json.dumps(SAMPLE_ANALYSIS), encoding="utf-8"
    )

    articles = tmp_path / "content" / "articles"
    articles.mkdir(parents=True)
    (articles / "first-post.md").write_text(
        "---\ntitle: Первый пост\ndescription: Про Raspberry Pi\n"
        "author: Дмитрий\ndate: 2024-03-01\n---\nТекст статьи.\n",
        encoding="utf-8",
    )
    return tmp_path


@pytest.fixture
def site_config(site_dir: Path) -> SiteConfig:
    """SiteConfig pointing at ``site_dir``."""
    return SiteConfig(
        log_level="WARNING",
        paths=PathsConfig(
            feed_xml=site_dir / "public" / "podcast-feed.xml",
            analysis_json=site_dir / "data" / "podcast-analysis-progress.json",
            articles_dir=site_dir / "content" / "articles",
            questions_json=site_dir / "content" / "listener-questions.json",
            public_dir=site_dir / "public",
        ),
    )


@pytest.fixture
def config_dir(tmp_path: Path, site_config: SiteConfig) -> Path:
    """Config directory holding a config.yaml for ``site_config``."""
    directory = tmp_path / "config"
    directory.mkdir()
    (directory / "config.yaml").write_text(
        yaml.safe_dump(site_config.model_dump(mode="json"), allow_unicode=True),
        encoding="utf-8",
    )
    return directory


@pytest.fixture
def catalog(site_config: SiteConfig) -> EpisodeCatalog:
    return load_catalog(site_config.paths.feed_xml, site_config.paths.analysis_json)


@pytest.fixture
def sample_config_dict() -> dict:
    return {
        "version": "1",
        "environment": "production",
        "log_level": "INFO",
        "base_url": "https://example.com",
        "questions": {"max_submissions": 5},
    }


@pytest.fixture
def sample_feed() -> str:
    return SAMPLE_FEED
