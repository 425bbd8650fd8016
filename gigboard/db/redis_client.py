"""
Redis client for Gigboard Service.
Used as the pub/sub bus for domain events.
"""

import logging
from typing import Optional
import redis.asyncio as redis
from redis.asyncio import Redis

logger = logging.getLogger(__name__)


class RedisConnection:
    """
    Redis connection manager for Gigboard Service.
    """

    def __init__(self):
        self.redis_client: Optional[Redis] = None
        self._initialized = False

    def initialize(self, redis_url: str):
        """
        Initialize Redis connection.

        Args:
            redis_url: Redis connection URL
        """
        try:
            self.redis_client = redis.from_url(
                redis_url,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
                retry_on_timeout=True,
                health_check_interval=30
            )
            self._initialized = True
            logger.info("Redis connection initialized successfully")

        except Exception as e:
            logger.error(f"Failed to initialize Redis connection: {e}")
            raise

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    async def health_check(self) -> bool:
        """
        Check Redis health.

        Returns:
            True if Redis answers PING
        """
        if not self._initialized:
            return False
        try:
            return bool(await self.redis_client.ping())
        except Exception as e:
            logger.error(f"Redis health check failed: {e}")
            return False

    async def close(self):
        """Close Redis connection."""
        if self.redis_client:
            await self.redis_client.close()
            logger.info("Redis connection closed")
