"""
Redis Cache Service
===================

Redis caching layer for read-heavy aggregates (dashboard, catalogs,
profile) with connection management, cache operations, and invalidation
utilities.

Cache failures are logged and treated as misses; they never fail a request.
"""

import json
import logging
from typing import Any, Optional

import redis.asyncio as redis
from redis.asyncio import Redis

from deskflow.config import settings

logger = logging.getLogger(__name__)

# Global Redis client instance
_redis_client: Optional[Redis] = None


async def init_redis() -> Redis:
    """
    Initialize Redis connection pool and verify the connection.

    Returns:
        Redis client instance
    """
    global _redis_client

    if _redis_client is None:
        _redis_client = redis.from_url(
            settings.REDIS_URL,
            encoding="utf-8",
            decode_responses=True,
            max_connections=20,
            socket_keepalive=True,
            socket_connect_timeout=5,
            socket_timeout=5,
            health_check_interval=30,
        )
        await _redis_client.ping()
        logger.info("Redis connection established")

    return _redis_client


async def get_redis() -> Redis:
    """Get Redis client, initializing if necessary."""
    if _redis_client is None:
        return await init_redis()

    return _redis_client


async def close_redis() -> None:
    """Close Redis connection."""
    global _redis_client

    if _redis_client is not None:
        await _redis_client.aclose()
        _redis_client = None
        logger.info("Redis connection closed")


class CacheManager:
    """
    Redis cache manager with common operations.

    Key naming convention:
        cache:{module}:{resource}:{identifier}

    TTL Guidelines:
        - Dashboard overview: 5 minutes (300s)
        - Profile: 5 minutes (300s)
        - Catalogs (statuses, currencies, types, themes): 1 hour (3600s)
    """

    # Default TTLs in seconds
    TTL_SHORT = 300  # 5 minutes
    TTL_HOUR = 3600  # 1 hour

    @staticmethod
    async def get(key: str) -> Optional[Any]:
        """
        Get value from cache.

        Args:
            key: Cache key

        Returns:
            Cached value if exists and valid, None otherwise
        """
        try:
            client = await get_redis()
            value = await client.get(key)

            if value is None:
                return None

            return json.loads(value)
        except Exception as e:
            logger.warning("Cache get error for key %s: %s", key, e)
            return None

    @staticmethod
    async def set(
        key: str,
        value: Any,
        ttl: int = TTL_SHORT,
    ) -> bool:
        """
        Set value in cache with TTL.

        Args:
            key: Cache key
            value: Value to cache (will be JSON serialized)
            ttl: Time to live in seconds (default 5 minutes)

        Returns:
            True if successful, False otherwise
        """
        try:
            client = await get_redis()
            serialized = json.dumps(value, default=str)
            await client.setex(key, ttl, serialized)
            return True
        except Exception as e:
            logger.warning("Cache set error for key %s: %s", key, e)
            return False

    @staticmethod
    async def delete(*keys: str) -> int:
        """
        Delete keys from cache.

        Args:
            keys: Cache keys to delete

        Returns:
            Number of keys deleted (0 on error)
        """
        if not keys:
            return 0
        try:
            client = await get_redis()
            return await client.delete(*keys)
        except Exception as e:
            logger.warning("Cache delete error for keys %s: %s", keys, e)
            return 0


# =============================================================================
# Cache Key Builders
# =============================================================================

class CacheKeys:
    """Cache key builders for consistent naming."""

    @staticmethod
    def dashboard(profile_id: str) -> str:
        """Dashboard overview for a profile."""
        return f"cache:dashboard:{profile_id}"

    @staticmethod
    def profile(profile_id: str) -> str:
        """Profile settings with profession and theme."""
        return f"cache:profile:{profile_id}"

    @staticmethod
    def client_stats(profile_id: str) -> str:
        """Client counters for a profile."""
        return f"cache:clients:stats:{profile_id}"

    @staticmethod
    def catalog(name: str) -> str:
        """Seeded lookup table (statuses, currencies, ...)."""
        return f"cache:catalog:{name}"


# =============================================================================
# Cache Invalidation Helpers
# =============================================================================

class CacheInvalidator:
    """Helpers for invalidating related cache entries."""

    @staticmethod
    async def _drop_portfolio(profile_id: str) -> None:
        # Dashboard counts clients; client stats count projects
        await CacheManager.delete(
            CacheKeys.dashboard(profile_id),
            CacheKeys.client_stats(profile_id),
        )

    @staticmethod
    async def on_project_change(profile_id: str) -> None:
        """Invalidate caches when a project or one of its tasks changes."""
        await CacheInvalidator._drop_portfolio(profile_id)

    @staticmethod
    async def on_client_change(profile_id: str) -> None:
        """Invalidate caches when a client is created, edited or (de)activated."""
        await CacheInvalidator._drop_portfolio(profile_id)

    @staticmethod
    async def on_finance_change(profile_id: str) -> None:
        """Invalidate caches when an expense or income changes."""
        await CacheManager.delete(CacheKeys.dashboard(profile_id))

    @staticmethod
    async def on_profile_update(profile_id: str) -> None:
        """Invalidate caches when profile is updated."""
        await CacheManager.delete(CacheKeys.profile(profile_id))
