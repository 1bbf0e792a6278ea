"""
PageFeed Client
===============

Async client for a running PageFeed server. It applies the consumer
contract of the endpoint: a body starting with ``<error>`` is a domain
failure, a body starting with ``<?xml`` is a feed, and anything else is a
protocol violation.
"""

import asyncio
from typing import Optional
from urllib.parse import quote

import aiohttp

from .ai.classifier import ERROR_PREFIX, FEED_PREFIX, extract_error_message
from .utils.exceptions import (
    ErrorCode,
    FeedClientError,
    FeedDomainError,
    ValidationError,
)
from .utils.logging import get_logger_for_component


DEFAULT_ENDPOINT_PATH = "/generate-rss"


class FeedClient:
    """Client for the feed generation endpoint."""

    def __init__(
        self,
        base_url: str,
        endpoint_path: str = DEFAULT_ENDPOINT_PATH,
        timeout: Optional[float] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        """Initialize feed client.

        Args:
            base_url: Server origin, e.g. ``http://localhost:8080``
            endpoint_path: Path of the feed endpoint
            timeout: Total request timeout in seconds (None for no limit)
            session: Optional session to reuse
        """
        self.base_url = base_url.rstrip("/")
        self.endpoint_path = endpoint_path
        self.timeout = timeout
        self.session = session
        self.logger = get_logger_for_component("client")

    def build_feed_url(self, url: str) -> str:
        """Shareable feed URL for a page, suitable for an RSS reader."""
        return f"{self.base_url}{self.endpoint_path}?url={quote(url, safe='')}"

    async def generate_rss_from_url(self, url: str) -> str:
        """Request a feed for a page URL.

        Args:
            url: Page URL

        Returns:
            Feed XML

        Raises:
            ValidationError: If url is empty
            FeedClientError: On transport failures, timeouts, non-2xx responses
                or bodies that are not XML
            FeedDomainError: If the server reports that no articles were found
        """
        if not url:
            raise ValidationError(
                "URL is required.",
                error_code=ErrorCode.VALIDATION_REQUIRED_FIELD,
                field_name="url",
            )

        endpoint = self.build_feed_url(url)
        timeout = aiohttp.ClientTimeout(total=self.timeout)

        try:
            if self.session is not None:
                status, body = await self._get(self.session, endpoint, timeout)
            else:
                async with aiohttp.ClientSession() as session:
                    status, body = await self._get(session, endpoint, timeout)
        except asyncio.TimeoutError as e:
            self.logger.error(f"Feed server did not respond within {self.timeout}s")
            raise FeedClientError(
                f"Feed server did not respond within {self.timeout}s"
            ) from e
        except aiohttp.ClientError as e:
            self.logger.error(f"Error calling feed endpoint: {e}")
            raise FeedClientError(f"Could not reach feed server: {e}") from e

        if not 200 <= status < 300:
            raise FeedClientError(f"Server error: {status} - {body}", status=status)

        body = body.strip()

        if body.startswith(ERROR_PREFIX):
            message = extract_error_message(body) or "Unknown error"
            raise FeedDomainError(message)

        if not body.startswith(FEED_PREFIX):
            raise FeedClientError(
                "invalid XML response",
                status=status,
                error_code=ErrorCode.CLIENT_INVALID_RESPONSE,
            )

        return body

    @staticmethod
    async def _get(session: aiohttp.ClientSession, endpoint: str, timeout) -> tuple:
        async with session.get(endpoint, timeout=timeout) as response:
            return response.status, await response.text()
