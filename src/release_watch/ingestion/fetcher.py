"""Async feed fetcher."""

import asyncio
import time
from typing import Optional

import aiohttp
import structlog

from .interfaces import FetcherInterface
from ..config.settings import settings
from ..errors import FetchError

logger = structlog.get_logger()


class FeedFetcher(FetcherInterface):
    """Fetch the raw feed body over HTTP.

    One request per call and no retries; the pipeline decides what a
    failure means for the run.
    """

    def __init__(
        self,
        url: str = None,
        session: Optional[aiohttp.ClientSession] = None,
        timeout_seconds: int = None,
        user_agent: str = None,
    ):
        self.url = url or settings.feed_url
        self.session = session
        self._owns_session = session is None
        self.timeout_seconds = timeout_seconds or settings.fetch_timeout_seconds
        self.user_agent = user_agent or settings.user_agent

    async def __aenter__(self):
        if self.session is None:
            self.session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
                headers={"User-Agent": self.user_agent}
            )
            self._owns_session = True
        return self

    async def __aexit__(self, *args):
        await self.close()

    async def close(self):
        if self.session and self._owns_session:
            await self.session.close()
            self.session = None

    async def fetch(self, url: Optional[str] = None) -> str:
        """Fetch the feed and return its body as text."""
        url = url or self.url
        if self.session is None:
            async with self:
                return await self.fetch(url)

        start_time = time.time()
        try:
            async with self.session.get(url) as response:
                if response.status < 200 or response.status >= 300:
                    raise FetchError(url, status=response.status, cause=response.reason or "")
                content = await response.text()
        except UnicodeDecodeError as e:
            logger.error("feed_decode_failed", url=url, encoding=e.encoding)
            raise FetchError(url, cause=f"undecodable body ({e.encoding}): {e.reason}") from e
        except FetchError as e:
            logger.error("feed_fetch_failed", url=url, status=e.status)
            raise
        except asyncio.TimeoutError as e:
            logger.error("feed_fetch_timeout", url=url, timeout=self.timeout_seconds)
            raise FetchError(url, cause=f"timed out after {self.timeout_seconds}s") from e
        except aiohttp.ClientError as e:
            logger.error("feed_fetch_failed", url=url, error=str(e))
            raise FetchError(url, cause=str(e) or type(e).__name__) from e

        elapsed_ms = int((time.time() - start_time) * 1000)
        logger.info("feed_fetched", url=url, bytes=len(content), time_ms=elapsed_ms)
        return content
