"""
Tests for the PageFeed HTTP client.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from pagefeed.ai.model_invoker import ModelInvoker
from pagefeed.client import FeedClient
from pagefeed.ingestion.page_fetcher import PageFetcher
from pagefeed.processing.pipeline import FeedPipeline
from pagefeed.server.app import create_app
from pagefeed.storage.feed_cache import FeedCache
from pagefeed.utils.exceptions import (
    ErrorCode,
    FeedClientError,
    FeedDomainError,
    ValidationError,
)


REQUESTS_KEY = web.AppKey("requests", list)


def canned_app(status=200, body=""):
    """App whose feed endpoint always returns the same response."""
    requests = []

    async def handler(request):
        requests.append(request.query.get("url"))
        return web.Response(status=status, text=body)

    app = web.Application()
    app.router.add_get("/generate-rss", handler)
    app[REQUESTS_KEY] = requests
    return app


class TestFeedClient:
    """Test the consumer contract of the feed endpoint."""

    def test_build_feed_url(self):
        client = FeedClient("http://localhost:8080/")

        url = client.build_feed_url("https://example.com/news?page=2")

        assert url == "http://localhost:8080/generate-rss?url=https%3A%2F%2Fexample.com%2Fnews%3Fpage%3D2"

    @pytest.mark.asyncio
    async def test_returns_feed(self, sample_feed_xml):
        app = canned_app(body=f"\n{sample_feed_xml}\n")

        async with TestServer(app) as server:
            client = FeedClient(str(server.make_url("/")))
            feed = await client.generate_rss_from_url("https://example.com/news?page=2")

        assert feed == sample_feed_xml
        assert app[REQUESTS_KEY] == ["https://example.com/news?page=2"]

    @pytest.mark.asyncio
    async def test_error_payload_raises_domain_error(self, no_articles_xml):
        async with TestServer(canned_app(body=no_articles_xml)) as server:
            client = FeedClient(str(server.make_url("/")))

            with pytest.raises(FeedDomainError) as exc_info:
                await client.generate_rss_from_url("https://example.com")

        assert exc_info.value.message == "No articles found."
        assert exc_info.value.error_code == ErrorCode.CLIENT_DOMAIN_ERROR

    @pytest.mark.asyncio
    async def test_error_payload_without_message(self):
        async with TestServer(canned_app(body="<error></error>")) as server:
            client = FeedClient(str(server.make_url("/")))

            with pytest.raises(FeedDomainError) as exc_info:
                await client.generate_rss_from_url("https://example.com")

        assert exc_info.value.message == "Unknown error"

    @pytest.mark.asyncio
    async def test_server_error(self):
        body = "<error><message>Server configuration error.</message></error>"

        async with TestServer(canned_app(status=500, body=body)) as server:
            client = FeedClient(str(server.make_url("/")))

            with pytest.raises(FeedClientError) as exc_info:
                await client.generate_rss_from_url("https://example.com")

        assert exc_info.value.status == 500
        assert str(exc_info.value.message) == f"Server error: 500 - {body}"

    @pytest.mark.asyncio
    async def test_unexpected_body(self):
        async with TestServer(canned_app(body="<html>oops</html>")) as server:
            client = FeedClient(str(server.make_url("/")))

            with pytest.raises(FeedClientError) as exc_info:
                await client.generate_rss_from_url("https://example.com")

        assert exc_info.value.message == "invalid XML response"
        assert exc_info.value.error_code == ErrorCode.CLIENT_INVALID_RESPONSE

    @pytest.mark.asyncio
    async def test_empty_url(self):
        client = FeedClient("http://localhost:8080")

        with pytest.raises(ValidationError):
            await client.generate_rss_from_url("")

    @pytest.mark.asyncio
    async def test_unreachable_server(self):
        async with TestServer(canned_app()) as server:
            base_url = str(server.make_url("/"))

        client = FeedClient(base_url, timeout=2.0)

        with pytest.raises(FeedClientError) as exc_info:
            await client.generate_rss_from_url("https://example.com")

        assert exc_info.value.message.startswith("Could not reach feed server")

    @pytest.mark.asyncio
    async def test_slow_server_times_out(self):
        async def slow(request):
            await asyncio.sleep(1.0)
            return web.Response(text="<?xml version=\"1.0\"?><rss/>")

        app = web.Application()
        app.router.add_get("/generate-rss", slow)

        async with TestServer(app) as server:
            client = FeedClient(str(server.make_url("/")), timeout=0.05)

            with pytest.raises(FeedClientError) as exc_info:
                await client.generate_rss_from_url("https://example.com")

        assert exc_info.value.message == "Feed server did not respond within 0.05s"
        assert exc_info.value.error_code == ErrorCode.CLIENT_SERVER_ERROR

    @pytest.mark.asyncio
    async def test_against_feed_server(self, stub_provider, sample_feed_xml):
        fetcher = MagicMock(spec=PageFetcher)
        fetcher.fetch = AsyncMock(return_value="<html></html>")
        pipeline = FeedPipeline(fetcher, ModelInvoker(lambda: stub_provider), FeedCache())

        async with TestServer(create_app(pipeline=pipeline)) as server:
            client = FeedClient(str(server.make_url("/")))
            feed = await client.generate_rss_from_url("https://example.com/blog")

        assert feed == sample_feed_xml
        fetcher.fetch.assert_awaited_once_with("https://example.com/blog", timeout=None)
