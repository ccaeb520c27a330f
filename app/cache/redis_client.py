"""
Redis client configuration and connection management.
Provides key-value storage for the product lookup service.
"""

import json
from typing import Any, List, Optional, Union
from datetime import timedelta
import redis.asyncio as redis
from redis.asyncio import ConnectionPool
import structlog

from app.core.config import settings

logger = structlog.get_logger(__name__)


class RedisClient:
    """Async Redis client with connection pooling and error handling."""

    def __init__(self, url: Optional[str] = None):
        self.url = url or settings.redis_url
        self.pool: Optional[ConnectionPool] = None
        self.client: Optional[redis.Redis] = None

    async def connect(self):
        """Initialize Redis connection pool."""
        try:
            self.pool = ConnectionPool.from_url(
                self.url,
                max_connections=20,
                retry_on_timeout=True,
                socket_keepalive=True,
                health_check_interval=30,
            )

            self.client = redis.Redis(
                connection_pool=self.pool,
                decode_responses=False,  # We'll handle encoding manually
            )

            # Test connection
            await self.client.ping()
            logger.info("Redis connection established successfully")

        except Exception as e:
            logger.error(f"Failed to connect to Redis: {e}")
            raise

    async def disconnect(self):
        """Close Redis connections gracefully."""
        if self.client:
            await self.client.aclose()
        if self.pool:
            await self.pool.disconnect()
        logger.info("Redis connections closed")

    async def get_json(self, key: str) -> Optional[Any]:
        """Get a JSON value from Redis."""
        if not self.client:
            await self.connect()

        value = await self.client.get(key)
        if value is None:
            return None
        return json.loads(value.decode("utf-8"))

    async def set_json(self, key: str, value: Any, ttl: Optional[Union[int, timedelta]] = None):
        """Set a JSON value in Redis, with optional TTL."""
        if not self.client:
            await self.connect()

        serialized_value = json.dumps(value, default=str)

        if ttl:
            if isinstance(ttl, timedelta):
                ttl = int(ttl.total_seconds())
            await self.client.setex(key, ttl, serialized_value)
        else:
            await self.client.set(key, serialized_value)

    async def scan_json(self, pattern: str) -> List[Any]:
        """Get every JSON value whose key matches `pattern`, using SCAN."""
        if not self.client:
            await self.connect()

        values = []
        async for key in self.client.scan_iter(match=pattern, count=500):
            value = await self.client.get(key)
            if value is not None:
                values.append(json.loads(value.decode("utf-8")))
        return values

    async def ping(self) -> bool:
        """Test the connection to the Redis server."""
        try:
            if not self.client:
                await self.connect()
            response = await self.client.ping()
            return response is True
        except Exception as e:
            logger.error(f"Redis PING error: {e}")
            return False


# Global Redis client instance
redis_client = RedisClient()


# Cache key generators
class CacheKeys:
    """Cache key generators for different data types."""

    @staticmethod
    def product(barcode: str) -> str:
        return f"product:barcode:{barcode}"

    @staticmethod
    def product_pattern() -> str:
        return "product:barcode:*"


# Cache TTL constants (in seconds)
class CacheTTL:
    """Cache TTL constants for different data types."""

    PRODUCT_DATA = 604800  # 1 week
