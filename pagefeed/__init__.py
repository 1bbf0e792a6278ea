"""
PageFeed - RSS Feeds for Any Webpage
====================================

Turns an arbitrary news or blog page into an RSS 2.0 feed by letting a
generative model read the page HTML.

Main Components:
- Ingestion: page fetching with a bounded timeout
- AI: prompt construction, Gemini invocation, response classification
- Storage: in-process feed cache with a 10 minute TTL
- Processing: the request pipeline tying the stages together
- Server: aiohttp endpoint exposing the pipeline over HTTP
"""

__version__ = "1.0.0"
__author__ = "PageFeed Development Team"
__description__ = "AI-generated RSS feeds for arbitrary webpages"

from .config.settings import get_settings
from .processing.pipeline import FeedPipeline, PipelineResult, CacheDisposition
from .storage.feed_cache import FeedCache
from .utils.logging import configure_application_logging, get_logger_for_component
from .utils.exceptions import PageFeedError

__all__ = [
    "get_settings",
    "FeedPipeline",
    "PipelineResult",
    "CacheDisposition",
    "FeedCache",
    "configure_application_logging",
    "get_logger_for_component",
    "PageFeedError",
]
