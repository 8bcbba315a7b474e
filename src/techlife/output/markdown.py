"""Plain markdown archive of all episodes.

Episode descriptions are HTML; they are flattened to paragraphs and a
links list so the archive reads well as text (and for LLM crawlers).
"""

from collections.abc import Sequence

from bs4 import BeautifulSoup

from techlife.config.schema import ExportConfig
from techlife.feeds.models import Episode, Podcast


class EpisodesMarkdownExporter:
    """Render the episode collection as one markdown document.

    Example:
        >>> exporter = EpisodesMarkdownExporter()
        >>> text = exporter.render(catalog.podcast, catalog.episodes)
    """

    def __init__(self, config: ExportConfig | None = None) -> None:
        self.config = config or ExportConfig()

    def render(self, podcast: Podcast, episodes: Sequence[Episode]) -> str:
        lines = [f'# Подкаст "{podcast.title}"', ""]
        for episode in episodes:
            lines.extend(self.render_episode(episode))
        return "\n".join(lines)

    def render_episode(self, episode: Episode) -> list[str]:
        lines = [
            f"## №{episode.episode_num} {episode.title}",
            f"### {episode.pub_date_converted}",
            "",
        ]

        if episode.subtitle:
            lines.append(f"**Краткое описание:** {episode.subtitle}")
            lines.append("")

        if episode.description:
            lines.extend(self._render_description(episode.description))

        lines.append("---")
        lines.append("")
        return lines

    def _render_description(self, html: str) -> list[str]:
        soup = BeautifulSoup(html, "html.parser")

        for img in soup.find_all("img"):
            img.decompose()

        for link in soup.find_all("a"):
            href = link.get("href")
            text = link.get_text().strip()
            if href and text and not self._is_excluded_link(href):
                link.replace_with(f"{text} ({href})")
            else:
                link.replace_with(text)

        lines: list[str] = []

        paragraphs = soup.find_all("p")
        if paragraphs:
            lines.extend(["### Описание", ""])
            for paragraph in paragraphs:
                text = paragraph.get_text().strip()
                if text and not self._is_skipped_paragraph(text):
                    lines.extend([text, ""])

        items = soup.find_all("li")
        if items:
            lines.extend(["### Ссылки", ""])
            for item in items:
                text = item.get_text().strip()
                if text:
                    lines.append(f"- {text}")
            lines.append("")

        return lines

    def _is_excluded_link(self, href: str) -> bool:
        return any(part in href for part in self.config.excluded_link_substrings)

    def _is_skipped_paragraph(self, text: str) -> bool:
        if any(text.startswith(prefix) for prefix in self.config.skipped_paragraph_prefixes):
            return True
        return any(part in text for part in self.config.skipped_paragraph_substrings)
