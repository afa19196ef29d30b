"""
Redis caching service for public reference listings.

CACHING STRATEGY
================

What we cache:
  - Public category pages:    "categories:list:from={from}&size={size}"
  - Public compilation pages: "compilations:list:pinned={pinned}&from={from}&size={size}"

Why only these:
  - They change only through admin writes, which invalidate them
  - Event listings and details are never cached: showing an event refreshes
    its view count from the stats service, so a cached copy would be stale
    the moment it is written

Invalidation strategy:
  - Admin category writes delete every "categories:list:*" key
  - Admin compilation writes, any event update and any change of an event's
    confirmed request count delete "compilations:list:*" (compilations embed
    event summaries)
  - Public event views do not invalidate; view counts inside cached
    compilation pages catch up when the TTL expires
  - TTL-based expiry as safety net

Failures are logged and treated as cache misses; the database stays the
source of truth.
"""

import json
from typing import Optional

import redis.asyncio as redis
from ewm.core.config import get_settings
from ewm.core.logging import get_logger

logger = get_logger(__name__)
settings = get_settings()

CATEGORIES_PREFIX = "categories:list:"
COMPILATIONS_PREFIX = "compilations:list:"

_redis_client: Optional[redis.Redis] = None


async def get_redis() -> Optional[redis.Redis]:
    """Get or create Redis connection. Returns None if Redis is disabled."""
    global _redis_client

    if not settings.REDIS_ENABLED:
        return None

    if _redis_client is None:
        try:
            _redis_client = redis.from_url(
                settings.REDIS_URL,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
                retry_on_timeout=True,
            )
            # Test connection
            await _redis_client.ping()
            logger.info("redis_connected", url=settings.REDIS_URL)
        except Exception as e:
            logger.error("redis_connection_failed", error=str(e))
            _redis_client = None
            return None

    return _redis_client


async def close_redis() -> None:
    """Close Redis connection on shutdown."""
    global _redis_client
    if _redis_client:
        await _redis_client.aclose()
        _redis_client = None


def category_page_key(offset: int, limit: int) -> str:
    return f"{CATEGORIES_PREFIX}from={offset}&size={limit}"


def compilation_page_key(pinned: Optional[bool], offset: int, limit: int) -> str:
    return f"{COMPILATIONS_PREFIX}pinned={pinned}&from={offset}&size={limit}"


async def get_cached(key: str) -> Optional[list]:
    """Retrieve a cached listing."""
    client = await get_redis()
    if not client:
        return None

    try:
        data = await client.get(key)
        if data:
            logger.debug("cache_hit", key=key)
            return json.loads(data)
        logger.debug("cache_miss", key=key)
    except Exception as e:
        logger.error("cache_get_error", key=key, error=str(e))

    return None


async def set_cached(key: str, data: list) -> None:
    """Cache a listing with TTL."""
    client = await get_redis()
    if not client:
        return

    try:
        await client.setex(key, settings.REDIS_CACHE_TTL, json.dumps(data, default=str))
        logger.debug("cache_set", key=key, ttl=settings.REDIS_CACHE_TTL)
    except Exception as e:
        logger.error("cache_set_error", key=key, error=str(e))


async def invalidate(prefix: str) -> None:
    """
    Invalidate every cached listing under `prefix`.
    Uses SCAN to find and delete all keys matching the prefix.
    """
    client = await get_redis()
    if not client:
        return

    try:
        deleted = 0
        async for key in client.scan_iter(match=f"{prefix}*", count=100):
            await client.delete(key)
            deleted += 1
        logger.info("cache_invalidated", prefix=prefix, keys_deleted=deleted)
    except Exception as e:
        logger.error("cache_invalidation_error", prefix=prefix, error=str(e))


async def invalidate_categories() -> None:
    await invalidate(CATEGORIES_PREFIX)


async def invalidate_compilations() -> None:
    await invalidate(COMPILATIONS_PREFIX)


async def get_cache_stats() -> dict:
    """Get Redis cache statistics for monitoring."""
    client = await get_redis()
    if not client:
        return {"status": "disabled"}

    try:
        info = await client.info("stats")
        keyspace = await client.info("keyspace")
        return {
            "status": "connected",
            "hits": info.get("keyspace_hits", 0),
            "misses": info.get("keyspace_misses", 0),
            "hit_rate": (
                round(
                    info.get("keyspace_hits", 0)
                    / max(info.get("keyspace_hits", 0) + info.get("keyspace_misses", 0), 1)
                    * 100,
                    2,
                )
            ),
            "keys": keyspace,
        }
    except Exception as e:
        return {"status": "error", "error": str(e)}
