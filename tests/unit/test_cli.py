"""
Tests for the command line interface.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from click.testing import CliRunner

import main
from pagefeed.ai.model_invoker import ModelInvoker
from pagefeed.client import FeedClient
from pagefeed.config.settings import PageFeedSettings
from pagefeed.ingestion.page_fetcher import PageFetcher
from pagefeed.processing.pipeline import FeedPipeline
from pagefeed.storage.feed_cache import FeedCache
from pagefeed.utils.exceptions import FeedClientError


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    monkeypatch.setattr(main, "_configure_logging", lambda settings, debug: None)


def stub_pipeline(provider):
    fetcher = MagicMock(spec=PageFetcher)
    fetcher.fetch = AsyncMock(return_value="<html></html>")
    return FeedPipeline(fetcher, ModelInvoker(lambda: provider), FeedCache())


class TestCheckConfig:
    """Test the check-config command."""

    def test_valid_configuration(self, runner, monkeypatch):
        monkeypatch.setattr(main, "get_settings", lambda: PageFeedSettings())

        result = runner.invoke(main.cli, ["check-config"])

        assert result.exit_code == 0
        assert "All configuration checks passed" in result.output

    def test_missing_api_key(self, runner, monkeypatch):
        settings = PageFeedSettings()
        settings.ai.gemini_api_key = None
        monkeypatch.setattr(main, "get_settings", lambda: settings)

        result = runner.invoke(main.cli, ["check-config"])

        assert result.exit_code == 1
        assert "Configuration validation failed" in result.output


class TestGenerate:
    """Test in-process feed generation."""

    def test_prints_feed(self, runner, monkeypatch, stub_provider, sample_feed_xml):
        monkeypatch.setattr(FeedPipeline, "from_settings", classmethod(lambda cls, settings: stub_pipeline(stub_provider)))

        result = runner.invoke(main.cli, ["generate", "https://example.com/news", "--raw"])

        assert result.exit_code == 0
        assert sample_feed_xml in result.output

    def test_writes_output_file(self, runner, monkeypatch, tmp_path, stub_provider, sample_feed_xml):
        monkeypatch.setattr(FeedPipeline, "from_settings", classmethod(lambda cls, settings: stub_pipeline(stub_provider)))
        output = tmp_path / "feed.xml"

        result = runner.invoke(main.cli, ["generate", "https://example.com/news", "-o", str(output)])

        assert result.exit_code == 0
        assert output.read_text(encoding="utf-8") == sample_feed_xml
        assert "First Story" in result.output

    def test_failure_exits_non_zero(self, runner, monkeypatch, stub_provider):
        monkeypatch.setattr(FeedPipeline, "from_settings", classmethod(lambda cls, settings: stub_pipeline(stub_provider)))

        result = runner.invoke(main.cli, ["generate", "not a url"])

        assert result.exit_code == 1
        assert "400" in result.output

    def test_no_articles_is_reported_as_failure(self, runner, monkeypatch, make_provider, no_articles_xml):
        provider = make_provider(response=no_articles_xml)
        monkeypatch.setattr(FeedPipeline, "from_settings", classmethod(lambda cls, settings: stub_pipeline(provider)))

        result = runner.invoke(main.cli, ["generate", "https://example.com/news", "--raw"])

        assert result.exit_code == 1
        assert "No articles found." in result.output
        assert "<error>" not in result.output
        assert "Untitled feed" not in result.output


class TestRequest:
    """Test the request command."""

    def test_invalid_url(self, runner):
        result = runner.invoke(main.cli, ["request", "example.com"])

        assert result.exit_code == 2
        assert "Invalid URL" in result.output

    def test_client_failure_exits_cleanly(self, runner, monkeypatch):
        async def timed_out(self, url):
            raise FeedClientError("Feed server did not respond within 0.05s")

        monkeypatch.setattr(FeedClient, "generate_rss_from_url", timed_out)

        result = runner.invoke(main.cli, ["request", "https://example.com", "--timeout", "0.05"])

        assert result.exit_code == 1
        assert "did not respond" in result.output
        assert result.exception is None or isinstance(result.exception, SystemExit)
