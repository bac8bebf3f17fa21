"""Tests for Redis cache invalidation."""

from unittest.mock import AsyncMock, MagicMock

from redis.exceptions import ConnectionError as RedisConnectionError

from rentdesk.cache import CacheInvalidator


def _fake_redis(keys_by_pattern: dict[str, list[str]]) -> MagicMock:
    client = MagicMock()

    def scan_iter(match: str, count: int):
        async def gen():
            for key in keys_by_pattern.get(match, []):
                yield key

        return gen()

    client.scan_iter = MagicMock(side_effect=scan_iter)
    client.delete = AsyncMock(return_value=1)
    return client


class TestCacheInvalidator:
    """Scopes map to key patterns; Redis errors never escape."""

    async def test_deletes_matching_keys_per_scope(self) -> None:
        client = _fake_redis(
            {
                "rentdesk:checkout:*": ["rentdesk:checkout:list"],
                "rentdesk:inventory:*": ["rentdesk:inventory:a", "rentdesk:inventory:b"],
            }
        )
        cache = CacheInvalidator(client=client, prefix="rentdesk")

        deleted = await cache.invalidate("checkout", "inventory", "guests")

        assert deleted == 3
        client.delete.assert_any_await("rentdesk:inventory:b")
        assert client.scan_iter.call_count == 3

    async def test_redis_down_is_logged_not_raised(self, caplog) -> None:
        client = MagicMock()
        client.scan_iter = MagicMock(side_effect=RedisConnectionError("Connection refused"))
        cache = CacheInvalidator(client=client, prefix="rentdesk")

        deleted = await cache.invalidate("bookings", "dashboard")

        assert deleted == 0
        assert "Cache invalidation for scope 'bookings' failed" in caplog.text
        assert "Cache invalidation for scope 'dashboard' failed" in caplog.text

    def test_pattern(self) -> None:
        assert CacheInvalidator(client=MagicMock(), prefix="rd").pattern("properties") == "rd:properties:*"
