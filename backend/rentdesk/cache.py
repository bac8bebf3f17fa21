"""Redis-backed cache invalidation for views that writes make stale.

Readers cache under ``{prefix}:{scope}:...`` keys; writers drop whole scopes.
Invalidation is best effort: a Redis outage is logged and never fails the
write that triggered it.
"""

import logging

from redis.asyncio import Redis
from redis.exceptions import RedisError

from rentdesk.config import settings

logger = logging.getLogger(__name__)


class CacheInvalidator:
    """Drop cached entries by scope name."""

    def __init__(self, client: Redis | None = None, prefix: str | None = None):
        self._client = client
        self.prefix = prefix or settings.cache_key_prefix

    @property
    def client(self) -> Redis:
        if self._client is None:
            self._client = Redis.from_url(settings.redis_url, decode_responses=True)
        return self._client

    def pattern(self, scope: str) -> str:
        return f"{self.prefix}:{scope}:*"

    async def delete_pattern(self, pattern: str) -> int:
        """Delete keys matching pattern, returning how many were removed."""
        deleted = 0
        async for key in self.client.scan_iter(match=pattern, count=500):
            deleted += await self.client.delete(key)
        return deleted

    async def invalidate(self, *scopes: str) -> int:
        """Invalidate every given scope; errors are logged per scope."""
        total = 0
        for scope in scopes:
            try:
                total += await self.delete_pattern(self.pattern(scope))
            except (RedisError, OSError) as exc:
                logger.warning("Cache invalidation for scope %r failed: %s", scope, exc)
        logger.debug("Invalidated %d cached keys across scopes %s", total, ", ".join(scopes))
        return total

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


_invalidator = CacheInvalidator()


async def get_cache() -> CacheInvalidator:
    """FastAPI dependency returning the process-wide invalidator."""
    return _invalidator


async def close_cache() -> None:
    await _invalidator.close()
