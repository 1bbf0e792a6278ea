"""
PyTest Configuration and Fixtures
=================================

Shared fixtures and configuration for PageFeed tests.
"""

import asyncio
import os
import sys
from pathlib import Path
from typing import List, Optional

import pytest

# Add project root to Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Set test environment variables before any imports
os.environ["PAGEFEED_AI__GEMINI_API_KEY"] = "test-gemini-key-for-unit-testing"
os.environ["PAGEFEED_LOGGING__FILE_PATH"] = ""
os.environ["PAGEFEED_DEBUG"] = "false"

from pagefeed.ai.providers.base import AIProvider, AIProviderType  # noqa: E402


SAMPLE_FEED_XML = '''<?xml version="1.0" encoding="UTF-8" ?>
<rss version="2.0">
    <channel>
        <title>Example News</title>
        <link>https://example.com/news</link>
        <description>Latest stories from Example News</description>
        <language>en-us</language>
        <lastBuildDate>Mon, 19 Oct 2026 08:00:00 GMT</lastBuildDate>
        <item>
            <title>First Story</title>
            <link>https://example.com/news/first-story</link>
            <description>The first story of the day</description>
            <pubDate>Mon, 19 Oct 2026 07:00:00 GMT</pubDate>
        </item>
        <item>
            <title>Second Story</title>
            <link>https://example.com/news/second-story</link>
            <description>Another story</description>
        </item>
    </channel>
</rss>'''

SAMPLE_HTML = '''<!DOCTYPE html>
<html>
<head><title>Example News</title></head>
<body>
    <article><a href="/news/first-story">First Story</a><p>The first story of the day</p></article>
    <article><a href="/news/second-story">Second Story</a><p>Another story</p></article>
</body>
</html>'''

NO_ARTICLES_XML = "<error><message>No articles found.</message></error>"


class FakeClock:
    """Manually advanced clock for cache tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class StubProvider(AIProvider):
    """Provider returning canned text and recording prompts."""

    def __init__(self, response: str = SAMPLE_FEED_XML, error: Optional[Exception] = None, delay: float = 0.0):
        super().__init__("stub-key", "stub-model", AIProviderType.GEMINI)
        self.response = response
        self.error = error
        self.delay = delay
        self.prompts: List[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def sample_feed_xml():
    return SAMPLE_FEED_XML


@pytest.fixture
def sample_html():
    return SAMPLE_HTML


@pytest.fixture
def no_articles_xml():
    return NO_ARTICLES_XML


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def stub_provider():
    return StubProvider()


@pytest.fixture
def make_provider():
    """Factory for StubProvider instances with custom behaviour."""
    return StubProvider
