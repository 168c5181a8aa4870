"""
Redis caching layer for the Client Queries service.
"""

from typing import Optional

import redis.asyncio as redis
from pydantic import ValidationError as PydanticValidationError

from shared.logging import get_logger
from shared.errors import CacheError
from ..models import ClientRecord


class RedisClientCache:
    """Redis mirror of client records keyed by document."""

    def __init__(self, redis_url: str, cache_name: str = "CLIENT-LIST", socket_timeout: float = 5.0):
        self.redis_url = redis_url
        self.cache_name = cache_name
        self.socket_timeout = socket_timeout
        self.logger = get_logger("client-queries.cache.redis")
        self.redis: Optional[redis.Redis] = None

    async def start(self):
        """Start the Redis cache."""
        try:
            self.redis = redis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=self.socket_timeout,
                socket_timeout=self.socket_timeout,
                health_check_interval=30
            )

            await self.redis.ping()

            self.logger.info("Redis cache started", cache_name=self.cache_name)

        except Exception as e:
            self.logger.error("Failed to start Redis cache", error=str(e))
            raise CacheError("Failed to start Redis cache", {"error": str(e)}) from e

    async def stop(self):
        """Stop the Redis cache."""
        if self.redis:
            await self.redis.aclose()
            self.redis = None
            self.logger.info("Redis cache stopped")

    async def get(self, key: str) -> Optional[ClientRecord]:
        """Get a cached client, or None on a miss."""
        self.logger.info("Querying cache", document=key)
        client = self._require_client()

        try:
            payload = await client.get(self._cache_key(key))
        except Exception as e:
            raise CacheError("Failed to read from cache", {"document": key, "error": str(e)}) from e

        if not payload:
            return None

        try:
            return ClientRecord.from_cache_payload(payload)
        except PydanticValidationError as e:
            raise CacheError("Corrupt cache entry", {"document": key, "error": str(e)}) from e

    async def put(self, key: str, record: ClientRecord) -> ClientRecord:
        """Cache a client with no expiry."""
        self.logger.info("Storing client in cache", document=key)
        client = self._require_client()

        try:
            await client.set(self._cache_key(key), record.to_cache_payload())
        except Exception as e:
            raise CacheError("Failed to write to cache", {"document": key, "error": str(e)}) from e

        return record

    async def health_check(self) -> bool:
        """Check Redis health."""
        if not self.redis:
            return False
        try:
            await self.redis.ping()
            return True
        except Exception:
            return False

    def _cache_key(self, key: str) -> str:
        return f"{self.cache_name}:{key}"

    def _require_client(self) -> redis.Redis:
        if self.redis is None:
            raise CacheError("Redis cache not started")
        return self.redis
