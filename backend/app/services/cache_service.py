"""
Redis caching service for tenant reference data.

CACHING STRATEGY
================

What we cache:
  - The tenant's base currency code
  - Cache key pattern: "tenant:{organization_id}:base_currency"

Why:
  - Every booking with an initial payment needs it
  - It changes only through administrative screens outside this engine

Why NOT cache availability:
  - Availability must reflect the latest committed bookings; a stale
    "available" answer only defers the conflict to insert time

Invalidation:
  - TTL-based expiry (REDIS_CACHE_TTL)
"""

from typing import Optional

from app.core.config import get_settings
from app.core.logging import get_logger
from app.core.metrics import record_cache_operation
from app.infrastructure.redis_client import get_redis

logger = get_logger(__name__)
settings = get_settings()


def _make_currency_key(organization_id: int) -> str:
    return f"tenant:{organization_id}:base_currency"


async def get_cached_base_currency(organization_id: int) -> Optional[str]:
    client = await get_redis()
    if not client:
        return None

    key = _make_currency_key(organization_id)
    try:
        value = await client.get(key)
        record_cache_operation("get", hit=value is not None)
        if value:
            logger.debug("cache_hit", key=key)
        return value
    except Exception as e:
        logger.error("cache_get_error", key=key, error=str(e))
    return None


async def set_cached_base_currency(organization_id: int, code: str) -> None:
    client = await get_redis()
    if not client:
        return

    key = _make_currency_key(organization_id)
    try:
        await client.setex(key, settings.REDIS_CACHE_TTL, code)
        record_cache_operation("set", hit=False)
        logger.debug("cache_set", key=key, ttl=settings.REDIS_CACHE_TTL)
    except Exception as e:
        logger.error("cache_set_error", key=key, error=str(e))


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
