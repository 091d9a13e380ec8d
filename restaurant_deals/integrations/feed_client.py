"""
Remote deal feed client with retries, plus the loader that maps it to domain data.
"""

import asyncio
import logging
import time
from typing import Optional

import httpx
from pydantic import ValidationError

from ..domain import ChallengeData
from ..mapper import to_challenge_data
from ..schemas import AppConfig, ChallengeDataDTO


logger = logging.getLogger(__name__)


class FeedError(Exception):
    """The feed could not be fetched or decoded."""


class FeedClient:
    """HTTP client for the restaurant/deal JSON feed."""

    def __init__(self, config: AppConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        """Initialize feed client; transport is injectable for tests."""
        self.config = config
        self.client = httpx.AsyncClient(
            timeout=config.feed.timeout_seconds,
            transport=transport,
        )

    @property
    def url(self) -> str:
        return self.config.feed.url

    async def fetch(self) -> Optional[ChallengeDataDTO]:
        """Fetch and decode the feed document, retrying transient failures."""
        max_retries = self.config.feed.max_retries

        for attempt in range(max_retries):
            try:
                response = await self.client.get(self.url)
                response.raise_for_status()
                payload = response.json()
                if payload is None:
                    logger.warning(f"Feed {self.url} returned an empty body")
                    return None
                return ChallengeDataDTO.model_validate(payload)

            except (ValidationError, ValueError) as e:
                # Bad document: retrying will not help
                raise FeedError(f"Feed {self.url} returned an invalid document: {e}")
            except httpx.HTTPError as e:
                logger.warning(f"Feed request attempt {attempt + 1} failed: {e}")
                if attempt < max_retries - 1:
                    await asyncio.sleep(self.config.feed.retry_delay_seconds * (2 ** attempt))
                else:
                    raise FeedError(f"Feed {self.url} unavailable after {max_retries} attempts: {e}")

    async def close(self) -> None:
        await self.client.aclose()


class DataLoader:
    """Loads ChallengeData from the feed, optionally caching it for a TTL."""

    def __init__(self, client: FeedClient, cache_ttl_seconds: float = 0.0):
        self.client = client
        self.cache_ttl_seconds = cache_ttl_seconds
        self._cached: Optional[ChallengeData] = None
        self._cached_at = 0.0

    async def load(self) -> ChallengeData:
        """Fetch, map and return the current feed."""
        if self._cached is not None and self.cache_ttl_seconds > 0:
            if time.monotonic() - self._cached_at < self.cache_ttl_seconds:
                return self._cached

        dto = await self.client.fetch()
        data = to_challenge_data(dto)
        logger.info(f"Loaded {len(data.restaurants)} restaurants, {data.deal_count} deals from feed")

        if self.cache_ttl_seconds > 0:
            self._cached = data
            self._cached_at = time.monotonic()
        return data

    def invalidate(self) -> None:
        self._cached = None

    async def close(self) -> None:
        await self.client.close()
