"""
HTTP Server
===========

aiohttp application exposing the feed pipeline as a single GET endpoint.
The endpoint is mounted both at ``/generate-rss`` and at the legacy
serverless function path so existing feed URLs keep working.
"""

from typing import Optional

from aiohttp import web

from ..config.settings import PageFeedSettings, get_settings
from ..processing.pipeline import FeedPipeline
from ..storage.feed_cache import FeedCache
from ..utils.logging import get_logger_for_component


FEED_ROUTES = ("/generate-rss", "/.netlify/functions/generate-rss")

PIPELINE_KEY = web.AppKey("pipeline", FeedPipeline)

logger = get_logger_for_component("server")


async def generate_rss(request: web.Request) -> web.Response:
    """Handle one feed request."""
    if request.method != "GET":
        return web.Response(status=405, text="Method Not Allowed", headers={"Allow": "GET"})

    pipeline = request.app[PIPELINE_KEY]
    # request.query has already decoded the percent-encoding once
    result = await pipeline.generate(request.query.get("url"))

    logger.info(
        f"{request.method} {request.path} -> {result.status_code} "
        f"(cache={result.cache_disposition.value})"
    )

    return web.Response(
        status=result.status_code,
        body=result.body.encode("utf-8"),
        headers=result.headers,
    )


def _http_session_ctx(pipeline: FeedPipeline):
    """cleanup_ctx opening one shared fetch session for the app lifetime."""

    async def ctx(app: web.Application):
        session = pipeline.fetcher.create_session()
        pipeline.fetcher.session = session
        logger.debug("Opened shared HTTP session")
        yield
        pipeline.fetcher.session = None
        await session.close()
        logger.debug("Closed shared HTTP session")

    return ctx


def create_app(
    settings: Optional[PageFeedSettings] = None,
    pipeline: Optional[FeedPipeline] = None,
    cache: Optional[FeedCache] = None,
) -> web.Application:
    """Application factory.

    Args:
        settings: Settings used to build the pipeline (global settings if None)
        pipeline: Prebuilt pipeline; when given, no fetch session is managed here
        cache: Cache for a pipeline built from settings

    Returns:
        Configured aiohttp application
    """
    app = web.Application()

    if pipeline is None:
        pipeline = FeedPipeline.from_settings(settings, cache=cache)
        app.cleanup_ctx.append(_http_session_ctx(pipeline))

    app[PIPELINE_KEY] = pipeline

    for path in FEED_ROUTES:
        app.router.add_route("*", path, generate_rss)

    return app


def run_server(settings: Optional[PageFeedSettings] = None) -> None:
    """Run the server until interrupted."""
    settings = settings or get_settings()

    for warning in settings.configuration_warnings():
        logger.warning(warning)

    app = create_app(settings)
    logger.info(f"Starting {settings.app_name} on {settings.server.host}:{settings.server.port}")
    web.run_app(
        app,
        host=settings.server.host,
        port=settings.server.port,
        print=None,
    )
