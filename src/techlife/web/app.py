"""FastAPI application: episode, tag, blog and question endpoints."""

import logging
from contextlib import asynccontextmanager
from datetime import date, datetime
from typing import Annotated, Any

from fastapi import Depends, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from pydantic import ValidationError as PydanticValidationError

from techlife import __version__
from techlife.blog.articles import Article
from techlife.config.manager import ConfigManager
from techlife.config.schema import SiteConfig
from techlife.feeds.facets import (
    Page,
    episode_neighbours,
    find_episode,
    get_episodes_by_tag,
    paginate,
    search_episodes,
)
from techlife.feeds.models import Episode, Podcast, TagFacet, WireModel
from techlife.feeds.stats import PodcastStats, compute_stats
from techlife.output.sitemap import build_sitemap
from techlife.questions.gate import QUESTION_REQUIRED_MESSAGE, SUCCESS_MESSAGE
from techlife.questions.models import ClientInfo, QuestionForm, QuestionListing
from techlife.utils.errors import NotFoundError, SubmissionError
from techlife.web.state import AppState, get_state

logger = logging.getLogger(__name__)

QUESTION_ROUTES = ("/voprosy", "/ask", "/contact", "/question")

StateDep = Annotated[AppState, Depends(get_state)]


class EpisodeDetail(WireModel):
    episode: Episode
    next_episode: Episode | None = None
    prev_episode: Episode | None = None


class SiteInfo(WireModel):
    title: str
    base_url: str
    current_year: int


class HomePage(WireModel):
    site: SiteInfo
    podcast: Podcast
    episodes: Page
    articles: list[Article]
    assets: dict[str, str]


class ArticleDetail(WireModel):
    article: Article
    content: str


async def _read_form(request: Request) -> dict[str, Any]:
    """Decode a JSON or form-encoded body into a plain dict."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            data = await request.json()
        except ValueError:  # Bad JSON or bad UTF-8
            return {}
        return data if isinstance(data, dict) else {}
    form = await request.form()
    return dict(form)


def _client_info(request: Request) -> ClientInfo:
    return ClientInfo(
        ip=request.client.host if request.client else "unknown",
        user_agent=request.headers.get("user-agent"),
    )


def create_app(config: SiteConfig | None = None, state: AppState | None = None) -> FastAPI:
    """Build the web application.

    Args:
        config: Site configuration (loaded via ConfigManager if None)
        state: Prebuilt state; skips loading at startup when given

    Returns:
        Configured FastAPI app
    """
    if state is not None:
        config = state.config
    elif config is None:
        config = ConfigManager().load_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.site = state or AppState.build(config)
        yield

    app = FastAPI(title=config.site_title, version=__version__, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_methods=["GET", "POST"],
    )

    @app.exception_handler(SubmissionError)
    async def submission_error_handler(request: Request, exc: SubmissionError) -> JSONResponse:
        return JSONResponse({"error": str(exc)}, status_code=exc.status_code)

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(
            {"error": str(exc) or "Запрашиваемая страница не найдена"}, status_code=404
        )

    @app.get("/health")
    async def health(site: StateDep) -> dict[str, Any]:
        return {
            "status": "ok",
            "version": __version__,
            "episodes": len(site.catalog),
            "startedAt": site.started_at.isoformat(),
        }

    @app.get("/api/home", response_model=HomePage)
    async def home(site: StateDep, page: int = Query(1, ge=1)) -> HomePage:
        return HomePage(
            site=SiteInfo(
                title=site.config.site_title,
                base_url=site.config.base_url,
                current_year=datetime.now().year,
            ),
            podcast=site.catalog.podcast,
            episodes=paginate(
                site.catalog.episodes, page, site.config.server.episodes_per_page
            ),
            articles=site.articles.articles,
            assets=site.asset_urls(),
        )

    @app.get("/api/episode/{episode_id}", response_model=Episode | None)
    async def episode_by_id(episode_id: str, site: StateDep) -> Episode | None:
        return find_episode(site.catalog.episodes, episode_id)

    @app.get("/api/episodes", response_model=Page[Episode])
    async def list_episodes(
        site: StateDep,
        page: int = Query(1, ge=1),
        per_page: int | None = Query(None, ge=1, le=100),
    ) -> Page[Episode]:
        return paginate(
            site.catalog.episodes, page, per_page or site.config.server.episodes_per_page
        )

    @app.get("/api/episodes/{episode_id}", response_model=EpisodeDetail)
    async def episode_detail(episode_id: str, site: StateDep) -> EpisodeDetail:
        found = episode_neighbours(site.catalog.episodes, episode_id)
        if found is None:
            raise NotFoundError(f"Эпизод {episode_id} не найден")
        episode, next_episode, prev_episode = found
        return EpisodeDetail(episode=episode, next_episode=next_episode, prev_episode=prev_episode)

    @app.get("/api/episodes-search", response_model=list[Episode])
    async def episodes_search(site: StateDep, q: str = "") -> list[Episode]:
        return search_episodes(site.catalog.episodes, q)

    @app.get("/api/tags", response_model=list[TagFacet])
    async def tags(site: StateDep) -> list[TagFacet]:
        return site.tags

    @app.get("/api/tags/{tag}", response_model=list[Episode])
    async def episodes_by_tag(tag: str, site: StateDep) -> list[Episode]:
        tagged = get_episodes_by_tag(site.catalog.episodes, tag)
        if not tagged:
            raise NotFoundError(f'Эпизоды с тегом "{tag}" не найдены')
        return tagged

    @app.get("/api/search", response_model=list[Article])
    async def search_articles(site: StateDep, name: str = "") -> list[Article]:
        return site.articles.search(name)

    @app.get("/api/blog", response_model=list[Article])
    async def blog(site: StateDep) -> list[Article]:
        return site.articles.articles

    @app.get("/api/blog/{slug}", response_model=ArticleDetail)
    async def blog_article(slug: str, site: StateDep) -> ArticleDetail:
        article = site.articles.get_metadata(slug)
        content = site.articles.read_body(slug) if article else None
        if article is None or content is None:
            raise NotFoundError(f"Статья {slug} не найдена")
        return ArticleDetail(article=article, content=content)

    @app.get("/api/stats", response_model=PodcastStats)
    async def stats(site: StateDep) -> PodcastStats:
        return compute_stats(site.catalog.episodes, site.config.stats)

    async def submit_question(request: Request, site: StateDep) -> JSONResponse:
        data = await _read_form(request)
        try:
            form = QuestionForm.model_validate(data)
        except PydanticValidationError as e:
            logger.info("Rejected malformed question form: %s", e)
            return JSONResponse({"error": QUESTION_REQUIRED_MESSAGE}, status_code=400)

        await site.gate.submit(form, _client_info(request))
        return JSONResponse({"success": True, "message": SUCCESS_MESSAGE})

    for path in QUESTION_ROUTES:
        app.add_api_route(path, submit_question, methods=["POST"])

    @app.get("/api/admin/questions", response_model=list[QuestionListing])
    async def admin_questions(site: StateDep) -> list[QuestionListing]:
        return await site.store.list_for_admin()

    @app.get("/sitemap.xml")
    async def sitemap(site: StateDep) -> Response:
        xml = build_sitemap(
            site.config.base_url,
            site.catalog.episodes,
            site.tags,
            site.articles.articles,
            today=date.today(),
        )
        return Response(content=xml, media_type="application/xml")

    @app.get("/episodes.md")
    async def episodes_markdown(site: StateDep) -> PlainTextResponse:
        text = site.exporter.render(site.catalog.podcast, site.catalog.episodes)
        return PlainTextResponse(text)

    return app
