"""CLI entry point for Techlife."""

import asyncio
import json
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from techlife.assets.cache_buster import CacheBuster
from techlife.blog.articles import ArticleIndex
from techlife.config.logging import setup_logging
from techlife.config.manager import ConfigManager
from techlife.config.schema import SiteConfig
from techlife.feeds.facets import get_all_tags, get_episodes_by_tag
from techlife.feeds.service import EpisodeCatalog, load_catalog
from techlife.output.markdown import EpisodesMarkdownExporter
from techlife.output.sitemap import build_sitemap
from techlife.questions.store import QuestionStore
from techlife.utils.errors import TechlifeError

app = typer.Typer(
    name="techlife",
    help="Serve and export the Технологии и жизнь podcast site",
    no_args_is_help=True,
)
console = Console()


def _config(ctx: typer.Context) -> SiteConfig:
    config: SiteConfig = ctx.obj["config"]
    return config


def _catalog(config: SiteConfig) -> EpisodeCatalog:
    return load_catalog(config.paths.feed_xml, config.paths.analysis_json)


def _fail(message: str) -> None:
    console.print(f"[red]✗[/red] {escape(message)}")
    sys.exit(1)


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose (DEBUG) logging"
    ),
    log_file: Path | None = typer.Option(
        None, "--log-file", help="Write logs to file"
    ),
    config_dir: Path | None = typer.Option(
        None, "--config-dir", help="Directory holding config.yaml"
    ),
) -> None:
    """Techlife - backend for the Технологии и жизнь podcast website."""
    try:
        config = ConfigManager(config_dir).load_config()
    except TechlifeError as e:
        _fail(str(e))

    # Initialize logging before any command runs
    setup_logging(verbose=verbose, log_file=log_file, level=config.log_level)
    ctx.obj = {"config": config}


@app.command("version")
def show_version() -> None:
    """Show version information."""
    from techlife import __version__

    console.print(f"[bold cyan]Techlife[/bold cyan] v{__version__}")


@app.command("serve")
def serve(
    ctx: typer.Context,
    host: str | None = typer.Option(None, "--host", help="Bind address"),
    port: int | None = typer.Option(None, "--port", "-p", help="Port to listen on"),
) -> None:
    """Run the web server."""
    import uvicorn

    from techlife.web.app import create_app

    config = _config(ctx)
    uvicorn.run(
        create_app(config),
        host=host or config.server.host,
        port=port or config.server.port,
        log_config=None,
    )


@app.command("episodes")
def list_episodes(
    ctx: typer.Context,
    tag: str | None = typer.Option(None, "--tag", "-t", help="Only episodes with this tag"),
    limit: int = typer.Option(20, "--limit", "-n", help="Maximum rows to show"),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """List episodes, newest first.

    Examples:
        techlife episodes --limit 5

        techlife episodes --tag Технологии
    """
    catalog = _catalog(_config(ctx))
    episodes = list(catalog.episodes)
    if tag is not None:
        episodes = get_episodes_by_tag(episodes, tag)
    episodes = episodes[:limit]

    if json_output:
        data = [episode.model_dump(mode="json", by_alias=True) for episode in episodes]
        typer.echo(json.dumps(data, ensure_ascii=False, indent=2))
        return

    if not episodes:
        console.print("[yellow]No episodes found.[/yellow]")
        return

    table = Table(title=f"[bold]{catalog.podcast.title or 'Episodes'}[/bold]")
    table.add_column("№", style="cyan", justify="right", no_wrap=True)
    table.add_column("Title", style="white")
    table.add_column("Date", style="blue", no_wrap=True)
    table.add_column("Tags", style="green")

    for episode in episodes:
        table.add_row(
            episode.episode_num,
            episode.title,
            episode.pub_date_converted,
            ", ".join(episode.tags) or "—",
        )

    console.print(table)
    console.print(f"\n[dim]Total: {len(episodes)} episode(s)[/dim]")


@app.command("tags")
def list_tags(
    ctx: typer.Context,
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """List episode tags with counts."""
    facets = get_all_tags(_catalog(_config(ctx)).episodes)

    if json_output:
        typer.echo(
            json.dumps([facet.model_dump() for facet in facets], ensure_ascii=False, indent=2)
        )
        return

    if not facets:
        console.print("[yellow]No tags yet.[/yellow] Is the analysis file in place?")
        return

    table = Table(title="[bold]Episode Tags[/bold]")
    table.add_column("Tag", style="cyan")
    table.add_column("Episodes", justify="right", style="green")
    for facet in facets:
        table.add_row(facet.name, str(facet.count))
    console.print(table)


@app.command("export")
def export(
    ctx: typer.Context,
    kind: str = typer.Argument(..., help="What to export: markdown or sitemap"),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Output file path (default: print to stdout)"
    ),
) -> None:
    """Export the episode archive as markdown or the sitemap as XML.

    Examples:
        techlife export markdown -o episodes.md

        techlife export sitemap
    """
    config = _config(ctx)
    catalog = _catalog(config)

    if kind == "markdown":
        text = EpisodesMarkdownExporter(config.export).render(catalog.podcast, catalog.episodes)
    elif kind == "sitemap":
        articles = ArticleIndex.load(config.paths.articles_dir)
        text = build_sitemap(
            config.base_url,
            catalog.episodes,
            get_all_tags(catalog.episodes),
            articles.articles,
        )
    else:
        _fail(f"Unknown export: {kind}. Valid exports: markdown, sitemap")
        return

    if output is None:
        typer.echo(text)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    console.print(f"[green]✓[/green] Wrote {kind} to [bold]{output}[/bold]")


@app.command("manifest")
def manifest(
    ctx: typer.Context,
    clear: bool = typer.Option(False, "--clear", help="Delete the manifest instead"),
) -> None:
    """Generate the static asset hash manifest."""
    config = _config(ctx)
    buster = CacheBuster(
        config.paths.public_dir,
        manifest_path=config.paths.manifest_path,
        hash_length=config.assets.hash_length,
        dev_mode=False,
    )

    if clear:
        buster.clear_manifest()
        console.print("[green]✓[/green] Asset manifest cleared")
        return

    hashes = buster.generate_manifest(config.assets.asset_paths)
    for asset_path in config.assets.asset_paths:
        normalized = asset_path.lstrip("/")
        if normalized in hashes:
            console.print(f"[green]✓[/green] {normalized} -> {hashes[normalized]}")
        else:
            console.print(f"[yellow]⚠[/yellow] Asset not found: {normalized}")
    console.print(f"\n[dim]Asset manifest saved to: {buster.manifest_path}[/dim]")


@app.command("questions")
def list_questions(
    ctx: typer.Context,
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """Show submitted listener questions, newest first."""
    store = QuestionStore(_config(ctx).paths.questions_json)
    listings = asyncio.run(store.list_for_admin())

    if json_output:
        data = [item.model_dump(mode="json", by_alias=True) for item in listings]
        typer.echo(json.dumps(data, ensure_ascii=False, indent=2))
        return

    if not listings:
        console.print("[yellow]No questions yet.[/yellow]")
        return

    table = Table(title="[bold]Вопросы слушателей[/bold]")
    table.add_column("Date", style="blue", no_wrap=True)
    table.add_column("Name", style="cyan")
    table.add_column("Category", style="green")
    table.add_column("Question", style="white")

    for item in listings:
        table.add_row(
            f"{item.formatted_date} {item.formatted_time}",
            item.name,
            item.category_name,
            item.question_preview,
        )

    console.print(table)
    console.print(f"\n[dim]Total: {len(listings)} question(s)[/dim]")


@app.command("config")
def show_config(ctx: typer.Context) -> None:
    """Display the current configuration."""
    config = _config(ctx)

    console.print("\n[bold]Techlife Configuration[/bold]\n")

    table = Table(show_header=False, box=None)
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Environment", config.environment)
    table.add_row("Log level", config.log_level)
    table.add_row("Base URL", config.base_url)
    table.add_row("Feed", str(config.paths.feed_xml))
    table.add_row("Analysis", str(config.paths.analysis_json))
    table.add_row("Articles", str(config.paths.articles_dir))
    table.add_row("Questions log", str(config.paths.questions_json))
    table.add_row("Public dir", str(config.paths.public_dir))
    table.add_row("Listen on", f"{config.server.host}:{config.server.port}")

    console.print(table)


if __name__ == "__main__":
    app()
