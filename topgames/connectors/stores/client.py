"""TopGames — App Store Feed Client.

Fetches the Android and iOS top-chart JSON documents. No retries: a failed
fetch aborts the caller's operation.
"""

import asyncio
from typing import Any, Dict, Optional

import httpx

from topgames.config import Settings, settings as default_settings
from topgames.core.logging import get_logger

logger = get_logger("stores.client")


class StoreFeedError(Exception):
    """Raised when a store feed cannot be fetched or parsed."""

    def __init__(self, message: str, url: str = "", status_code: int = 0):
        self.url = url
        self.status_code = status_code
        super().__init__(message)


class StoreFeedClient:
    """Async HTTP client for the two store chart feeds."""

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.settings = settings or default_settings
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def feed_urls(self) -> Dict[str, str]:
        return {
            "android": self.settings.android_feed_url,
            "ios": self.settings.ios_feed_url,
        }

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.settings.fetch_timeout, transport=self._transport
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def fetch_json(self, url: str) -> Any:
        """GET a JSON document, raising StoreFeedError on any failure."""
        client = await self._get_client()
        try:
            resp = await client.get(url)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise StoreFeedError(
                f"Feed returned HTTP {e.response.status_code}",
                url,
                e.response.status_code,
            ) from e
        except httpx.RequestError as e:
            raise StoreFeedError(f"Connection failed: {e}", url) from e

        try:
            data = resp.json()
        except ValueError as e:
            raise StoreFeedError(
                f"Malformed JSON in feed: {e}", url, resp.status_code
            ) from e

        logger.info(f"Fetched feed {url}", extra={"url": url})
        return data

    async def fetch_top_charts(self) -> Dict[str, Any]:
        """Fetch both platform documents concurrently.

        Both requests are in flight together. The first failure cancels the
        other fetch and propagates; nothing is returned for either platform.
        """
        tasks = {
            platform: asyncio.create_task(self.fetch_json(url))
            for platform, url in self.feed_urls.items()
        }
        try:
            done, _ = await asyncio.wait(
                tasks.values(), return_when=asyncio.FIRST_EXCEPTION
            )
        finally:
            for task in tasks.values():
                if not task.done():
                    task.cancel()
            # Nothing may outlive this call, including a cancelled fetch
            await asyncio.gather(*tasks.values(), return_exceptions=True)

        for platform, task in tasks.items():
            error = task.exception() if task in done else None
            if error is not None:
                logger.error(
                    f"Fetching the {platform} feed failed, aborting",
                    extra={"platform": platform},
                )
                raise error
        return {platform: task.result() for platform, task in tasks.items()}
