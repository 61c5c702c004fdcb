"""
Key-value cache for per-day outfit suggestions
Uses Upstash Redis REST API when configured, an in-memory TTL store otherwise
Reference: https://upstash.com/docs/redis/overall/getstarted
"""
import httpx
import logging
import time
from typing import Optional, Union
from functools import lru_cache

from closet.core.config import settings

logger = logging.getLogger(__name__)


@lru_cache()
def get_cache() -> Union['RedisClient', 'InMemoryCache']:
    """
    Get a singleton cache instance.

    Returns an InMemoryCache if Redis is not configured (not shared between instances).

    Reference: https://docs.python.org/3/library/functools.html#functools.lru_cache
    """
    if not settings.UPSTASH_REDIS_REST_URL or not settings.UPSTASH_REDIS_REST_TOKEN:
        logger.warning("Redis not configured - outfit cache will use in-memory storage (not suitable for multi-instance)")
        return InMemoryCache()
    return RedisClient()


class InMemoryCache:
    """
    Process-local fallback with the same interface as RedisClient.

    Entries are stored as {key: (value, expiry_timestamp)}. Expired entries
    are swept on every write, so keys of past days do not pile up.
    """

    def __init__(self, clock=time.time):
        self._store: dict[str, tuple[str, float]] = {}
        self._clock = clock

    def _sweep(self, now: float) -> None:
        expired = [key for key, (_, expiry) in self._store.items() if now >= expiry]
        for key in expired:
            del self._store[key]

    async def setex(self, key: str, seconds: int, value: str) -> bool:
        now = self._clock()
        self._sweep(now)
        self._store[key] = (value, now + seconds)
        return True

    async def get(self, key: str) -> Optional[str]:
        entry = self._store.get(key)
        if entry is None:
            return None
        value, expiry = entry
        if self._clock() >= expiry:
            del self._store[key]
            return None
        return value


class RedisClient:
    """
    Redis client using Upstash REST API.

    Uses HTTP requests to interact with Upstash Redis, making it suitable
    for serverless environments where persistent connections aren't available.
    Failures are logged and reported as a miss/False, never raised.

    Reference: https://upstash.com/docs/redis/overall/getstarted
    """

    def __init__(
        self,
        url: Optional[str] = None,
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        url = url or settings.UPSTASH_REDIS_REST_URL
        token = token or settings.UPSTASH_REDIS_REST_TOKEN
        if not url or not token:
            raise ValueError("UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set")

        self.base_url = url.rstrip('/')
        self.token = token
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=5.0,
            transport=self._transport,
            headers={"Authorization": f"Bearer {self.token}"},
        )

    async def setex(self, key: str, seconds: int, value: str) -> bool:
        """
        Set a key with expiration time.

        Upstash REST API format: POST /setex/{key}/{seconds} with value in body

        Returns:
            True if successful, False otherwise
        """
        try:
            async with self._client() as client:
                response = await client.post(
                    f"{self.base_url}/setex/{key}/{seconds}",
                    content=value,
                )
                response.raise_for_status()
                result = response.json()
                # Upstash returns {"result": "OK"} on success
                return result.get("result") == "OK"
        except Exception as e:
            logger.error(f"Failed to set Redis key {key}: {type(e).__name__}: {e}", exc_info=True)
            return False

    async def get(self, key: str) -> Optional[str]:
        """
        Get a value by key.

        Returns:
            Value if found, None otherwise
        """
        try:
            async with self._client() as client:
                response = await client.get(f"{self.base_url}/get/{key}")
                response.raise_for_status()
                result = response.json()
                # Upstash REST API returns {"result": "value"} or {"result": null}
                return result.get("result") if result else None
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                return None
            logger.error(f"Failed to get Redis key {key}: {e}", exc_info=True)
            return None
        except Exception as e:
            logger.error(f"Failed to get Redis key {key}: {type(e).__name__}: {e}", exc_info=True)
            return None
