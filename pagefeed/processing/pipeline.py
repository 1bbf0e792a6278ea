"""
Feed Generation Pipeline
========================

Orchestrates one URL-to-feed request: validation, cache check, page fetch,
prompt construction, model invocation, response classification and
response shaping. Every failure is caught here and mapped to a status code
plus a sanitised ``<error>`` body; only valid feeds are ever cached.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional
from xml.sax.saxutils import escape

import aiohttp

from ..ai.classifier import Malformed, StructuredError, ValidFeed, classify_response
from ..ai.model_invoker import ModelInvoker
from ..ai.prompts import PromptBuilder
from ..config.settings import PageFeedSettings, get_settings
from ..ingestion.page_fetcher import PageFetcher
from ..storage.feed_cache import FeedCache
from ..utils.exceptions import (
    AIError,
    FetchError,
    ModelConfigurationError,
    ValidationError,
    get_user_friendly_message,
    handle_exception,
)
from ..utils.logging import PerformanceLogger, get_logger_for_component
from ..utils.validators import URLValidator


XML_CONTENT_TYPE = "application/xml; charset=utf-8"

MALFORMED_RESPONSE_MESSAGE = "The AI returned a response in an unexpected format."


class PipelineStage(str, Enum):
    """Stages of one pipeline run, in order."""
    VALIDATING = "validating"
    CACHE_CHECK = "cache_check"
    FETCHING = "fetching"
    PROMPTING = "prompting"
    INVOKING = "invoking"
    CLASSIFYING = "classifying"
    RESPONDING = "responding"


class CacheDisposition(str, Enum):
    """How the cache took part in a response."""
    HIT = "HIT"
    MISS = "MISS"
    NONE = "NONE"


@dataclass(frozen=True)
class PipelineResult:
    """Externally observable outcome of one pipeline run."""
    status_code: int
    body: str
    cache_disposition: CacheDisposition = CacheDisposition.NONE
    content_type: str = XML_CONTENT_TYPE
    stage: Optional[PipelineStage] = field(default=None, compare=False)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def headers(self) -> Dict[str, str]:
        headers = {"Content-Type": self.content_type}
        if self.cache_disposition is not CacheDisposition.NONE:
            headers["X-Cache"] = self.cache_disposition.value
        return headers


def error_body(message: str) -> str:
    """Render the generic ``<error>`` document."""
    return f"<error><message>{escape(message)}</message></error>"


class FeedPipeline:
    """URL-to-feed pipeline orchestrator."""

    def __init__(
        self,
        fetcher: PageFetcher,
        invoker: ModelInvoker,
        cache: FeedCache,
        prompt_builder: Optional[PromptBuilder] = None,
    ):
        """Initialize feed pipeline.

        Args:
            fetcher: Page fetcher
            invoker: Model invoker
            cache: Process-wide feed cache shared across requests
            prompt_builder: Prompt renderer (default template if None)
        """
        self.fetcher = fetcher
        self.invoker = invoker
        self.cache = cache
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.logger = get_logger_for_component("pipeline")

    @classmethod
    def from_settings(
        cls,
        settings: Optional[PageFeedSettings] = None,
        cache: Optional[FeedCache] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> "FeedPipeline":
        """Build a pipeline wired from configuration.

        Args:
            settings: Settings (global settings if None)
            cache: Cache to share; a new one is created if None
            session: Shared HTTP session for page fetches
        """
        settings = settings or get_settings()

        fetcher = PageFetcher(
            timeout=settings.fetch.timeout_seconds,
            user_agent=settings.fetch.user_agent,
            session=session,
        )
        invoker = ModelInvoker.from_settings(settings.ai)
        if cache is None:
            cache = FeedCache(ttl_seconds=settings.cache.ttl_seconds)

        return cls(fetcher=fetcher, invoker=invoker, cache=cache)

    async def generate(
        self,
        raw_url: Optional[str],
        fetch_timeout: Optional[float] = None,
        model_timeout: Optional[float] = None,
    ) -> PipelineResult:
        """Run the pipeline for one requested URL.

        Args:
            raw_url: URL as received, decoded once from the query string
            fetch_timeout: Fetch deadline override in seconds
            model_timeout: Model deadline override in seconds

        Returns:
            PipelineResult ready to be written to the HTTP response
        """
        stage = PipelineStage.VALIDATING
        try:
            page = URLValidator.validate_page_url(raw_url)
        except ValidationError as e:
            self.logger.info(f"Rejected request: {e.message}")
            return self._error(get_user_friendly_message(e), 400, stage)

        stage = PipelineStage.CACHE_CHECK
        cached = self.cache.lookup(page.url)
        if cached is not None:
            self.logger.info(f"Serving cached feed for {page.url}")
            return PipelineResult(
                status_code=200,
                body=cached,
                cache_disposition=CacheDisposition.HIT,
                stage=PipelineStage.RESPONDING,
            )

        try:
            stage = PipelineStage.FETCHING
            with PerformanceLogger(self.logger, "page fetch", page_url=page.url):
                html = await self.fetcher.fetch(page.url, timeout=fetch_timeout)

            stage = PipelineStage.PROMPTING
            prompt = self.prompt_builder.build(page.url, page.origin, html)

            stage = PipelineStage.INVOKING
            with PerformanceLogger(self.logger, "model call", page_url=page.url):
                raw_text = await self.invoker.invoke(prompt, timeout=model_timeout)

            stage = PipelineStage.CLASSIFYING
            classified = classify_response(raw_text)

        except FetchError as e:
            self.logger.warning(
                f"Fetch failed for {page.url}: {e}", extra={"stage": stage.value}
            )
            return self._error(get_user_friendly_message(e), 502, stage)

        except ModelConfigurationError as e:
            # The cause is logged only; callers get the generic message
            self.logger.error(
                f"Model configuration error: {e}", extra={"stage": stage.value}
            )
            return self._error(get_user_friendly_message(e), 500, stage)

        except AIError as e:
            self.logger.error(
                f"Model failure for {page.url}: {e}", extra={"stage": stage.value}
            )
            return self._error(get_user_friendly_message(e), 500, stage)

        except Exception as e:
            error = handle_exception(
                e, self.logger, "generate_feed", {"stage": stage.value, "url": page.url}
            )
            return self._error(get_user_friendly_message(error), 500, stage)

        stage = PipelineStage.RESPONDING

        if isinstance(classified, ValidFeed):
            self.cache.store(page.url, classified.xml)
            self.logger.info(f"Generated feed for {page.url} ({len(classified.xml)} chars)")
            return PipelineResult(
                status_code=200,
                body=classified.xml,
                cache_disposition=CacheDisposition.MISS,
                stage=stage,
            )

        if isinstance(classified, StructuredError):
            self.logger.info(
                f"Model found no articles on {page.url}: {classified.message}"
            )
            return PipelineResult(status_code=200, body=classified.xml, stage=stage)

        if isinstance(classified, Malformed):
            self.logger.error(
                f"AI response did not conform to the expected XML format. "
                f"Response: {classified.raw_text}"
            )
            return self._error(MALFORMED_RESPONSE_MESSAGE, 500, stage)

        raise TypeError(f"Unhandled classification: {classified!r}")

    @staticmethod
    def _error(message: str, status_code: int, stage: PipelineStage) -> PipelineResult:
        return PipelineResult(status_code=status_code, body=error_body(message), stage=stage)
