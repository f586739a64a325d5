"""
Redis-backed per-resource write lock.
Implements ResourceLockStrategy interface using Redis.

Circuit Breaker Pattern:
  On Redis failure, the lock "fails open" (grants the lock).
  Database remains authoritative - Redis only serializes writers early.

  Tradeoff: During a Redis outage, concurrent writers fall back to racing
  on the resource_nights unique constraint, which still rejects overlaps.
"""

import asyncio
import time
import uuid
from typing import Iterable, Optional

from app.core.config import get_settings
from app.core.logging import get_logger
from app.core.metrics import redis_connection_errors, redis_circuit_breaker_open
from app.infrastructure.redis_client import get_redis
from app.services.interfaces.resource_lock import ResourceLockStrategy

logger = get_logger(__name__)
settings = get_settings()

# Delete the key only if we still own it
RELEASE_SCRIPT = """
if redis.call('get', KEYS[1]) == ARGV[1] then
    return redis.call('del', KEYS[1])
end
return 0
"""

RETRY_INTERVAL_SECONDS = 0.05


def _lock_key(resource_id: int) -> str:
    return f"lock:resource:{resource_id}"


class RedisResourceLock(ResourceLockStrategy):
    """
    Redis-based per-resource lock.

    Locks are taken in ascending resource id order so two multi-resource
    bookings can never wait on each other in a cycle.
    """

    def __init__(self, ttl_ms: Optional[int] = None, wait_ms: Optional[int] = None):
        self.ttl_ms = ttl_ms or settings.RESOURCE_LOCK_TTL_MS
        self.wait_ms = wait_ms if wait_ms is not None else settings.RESOURCE_LOCK_WAIT_MS

    async def acquire(self, resource_ids: Iterable[int]) -> Optional[str]:
        token = uuid.uuid4().hex
        client = await get_redis()
        if client is None:
            return token

        deadline = time.monotonic() + self.wait_ms / 1000
        held: list[int] = []
        try:
            for resource_id in sorted(set(resource_ids)):
                while not await client.set(_lock_key(resource_id), token, nx=True, px=self.ttl_ms):
                    if time.monotonic() >= deadline:
                        logger.info("resource_lock_timeout", resource_id=resource_id)
                        await self.release(held, token)
                        return None
                    await asyncio.sleep(RETRY_INTERVAL_SECONDS)
                held.append(resource_id)
        except Exception as e:
            # Circuit breaker: On Redis failure, fail open
            redis_connection_errors.inc()
            redis_circuit_breaker_open.set(1)
            logger.warning("resource_lock_fail_open", error=str(e))
            await self.release(held, token)
            return token

        redis_circuit_breaker_open.set(0)
        return token

    async def release(self, resource_ids: Iterable[int], token: str) -> None:
        client = await get_redis()
        if client is None:
            return
        for resource_id in resource_ids:
            try:
                await client.eval(RELEASE_SCRIPT, 1, _lock_key(resource_id), token)
            except Exception as e:
                # Best effort; the TTL frees it anyway
                redis_connection_errors.inc()
                logger.warning("resource_lock_release_failed", resource_id=resource_id, error=str(e))
