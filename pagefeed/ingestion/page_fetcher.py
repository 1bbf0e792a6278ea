"""
Page Fetcher
============

Retrieves the raw HTML of a source page with a bounded timeout and a
browser-like User-Agent. A single attempt is made; there are no retries.
"""

import asyncio
import ssl
from contextlib import asynccontextmanager
from typing import Optional

import aiohttp
import certifi

from ..config.settings import DEFAULT_USER_AGENT
from ..utils.logging import get_logger_for_component
from ..utils.exceptions import (
    FetchHTTPError,
    FetchNetworkError,
    FetchTimeoutError,
)


class PageFetcher:
    """Fetches page HTML over aiohttp."""

    DEFAULT_TIMEOUT = 15.0

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        """Initialize page fetcher.

        Args:
            timeout: Total request timeout in seconds
            user_agent: User-Agent header sent with every request
            session: Shared session; a short-lived one is opened per call if None
        """
        self.timeout = timeout
        self.user_agent = user_agent
        self.session = session
        self.logger = get_logger_for_component("page_fetcher")

        self.ssl_context = ssl.create_default_context(cafile=certifi.where())

    @property
    def headers(self) -> dict:
        return {
            "User-Agent": self.user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        }

    def create_session(self) -> aiohttp.ClientSession:
        """Create a session configured for page fetching."""
        connector = aiohttp.TCPConnector(ssl=self.ssl_context)
        return aiohttp.ClientSession(connector=connector)

    @asynccontextmanager
    async def get_session(self):
        """Yield the shared session, or a temporary one."""
        if self.session is not None:
            yield self.session
            return

        async with self.create_session() as session:
            yield session

    async def fetch(self, url: str, timeout: Optional[float] = None) -> str:
        """Fetch a page and return its body text.

        Args:
            url: Absolute page URL
            timeout: Deadline in seconds, overriding the fetcher default

        Returns:
            Response body decoded as text

        Raises:
            FetchTimeoutError: If the deadline elapses
            FetchHTTPError: If the server answers with a non-2xx status
            FetchNetworkError: For any other transport failure
        """
        deadline = timeout if timeout is not None else self.timeout
        client_timeout = aiohttp.ClientTimeout(total=deadline)

        self.logger.debug(f"Fetching page: {url}")

        try:
            async with self.get_session() as session:
                async with session.get(
                    url, headers=self.headers, timeout=client_timeout
                ) as response:
                    if not 200 <= response.status < 300:
                        self.logger.warning(
                            f"Page fetch failed for {url}: HTTP {response.status}"
                        )
                        raise FetchHTTPError(
                            f"HTTP {response.status}: {response.reason}",
                            status=response.status,
                            url=url,
                        )

                    html = await response.text(errors="replace")

        except asyncio.TimeoutError as e:
            self.logger.warning(f"Page fetch timeout for {url} after {deadline}s")
            raise FetchTimeoutError(
                f"Request timeout after {deadline}s", url=url, timeout=deadline
            ) from e

        except aiohttp.ClientError as e:
            self.logger.warning(f"Page fetch failed for {url}: {e}")
            raise FetchNetworkError(f"Fetch error: {e}", url=url) from e

        self.logger.info(f"Fetched {len(html)} characters from {url}")
        return html
