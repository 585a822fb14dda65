"""
Redis-backed caching and rate-limit counters.

CACHING STRATEGY
================

What we cache:
  - The public airport listing (JSON-serialised), keyed by its filters:
    "airports:list:country={country}&search={search}"

Not cached:
  - Flight search and seat maps; availability is always read live

Invalidation:
  - Every admin airport create/update/delete deletes all "airports:list:*"
    keys (SCAN + DELETE); the TTL is a safety net

RATE LIMIT COUNTERS
===================
Fixed window per client IP: INCR "ratelimit:{scope}:{ip}:{window}" and set
EXPIRE on the first hit. The window index is floor(now / window_seconds),
so every client's window resets at the same wall-clock boundary.

Redis is optional. When it is disabled or unreachable every function here
degrades to a no-op (cache miss, request allowed).
"""

import json
import time
from typing import Optional

import redis.asyncio as redis

from airline.core.config import get_settings
from airline.core.logging import get_logger
from airline.core.metrics import record_cache_operation

logger = get_logger(__name__)
settings = get_settings()

AIRPORT_LIST_PREFIX = "airports:list:"

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


def _airport_list_key(country: Optional[str], search: Optional[str]) -> str:
    return f"{AIRPORT_LIST_PREFIX}country={(country or '').lower()}&search={(search or '').lower()}"


async def get_cached_airports(country: Optional[str], search: Optional[str]) -> Optional[list[dict]]:
    client = await get_redis()
    if not client:
        return None

    key = _airport_list_key(country, search)
    try:
        data = await client.get(key)
        record_cache_operation("get", hit=data is not None)
        if data:
            logger.debug("cache_hit", key=key)
            return json.loads(data)
        logger.debug("cache_miss", key=key)
    except Exception as e:
        logger.error("cache_get_error", key=key, error=str(e))

    return None


async def set_cached_airports(country: Optional[str], search: Optional[str], data: list[dict]) -> None:
    client = await get_redis()
    if not client:
        return

    key = _airport_list_key(country, search)
    try:
        await client.setex(key, settings.REDIS_CACHE_TTL, json.dumps(data, default=str))
        logger.debug("cache_set", key=key, ttl=settings.REDIS_CACHE_TTL)
    except Exception as e:
        logger.error("cache_set_error", key=key, error=str(e))


async def invalidate_airport_cache() -> None:
    client = await get_redis()
    if not client:
        return

    try:
        deleted = 0
        async for key in client.scan_iter(match=f"{AIRPORT_LIST_PREFIX}*", count=100):
            await client.delete(key)
            deleted += 1
        logger.info("cache_invalidated", prefix=AIRPORT_LIST_PREFIX, keys_deleted=deleted)
    except Exception as e:
        logger.error("cache_invalidation_error", error=str(e))


async def hit_rate_limit(scope: str, client_ip: str, window_seconds: int) -> Optional[tuple[int, int]]:
    """
    Count one request in the caller's current window.
    Returns (count, seconds_until_reset), or None when Redis is unavailable.
    """
    client = await get_redis()
    if not client:
        return None

    now = int(time.time())
    window = now // window_seconds
    key = f"ratelimit:{scope}:{client_ip}:{window}"
    try:
        count = await client.incr(key)
        if count == 1:
            await client.expire(key, window_seconds)
    except Exception as e:
        logger.error("rate_limit_counter_error", key=key, error=str(e))
        return None

    reset_in = (window + 1) * window_seconds - now
    return count, reset_in


async def get_cache_stats() -> dict:
    """Get Redis cache statistics for monitoring."""
    client = await get_redis()
    if not client:
        return {"status": "disabled"}

    try:
        info = await client.info("stats")
        hits = info.get("keyspace_hits", 0)
        misses = info.get("keyspace_misses", 0)
        return {
            "status": "connected",
            "hits": hits,
            "misses": misses,
            "hit_rate": round(hits / max(hits + misses, 1) * 100, 2),
        }
    except Exception as e:
        return {"status": "error", "error": str(e)}
