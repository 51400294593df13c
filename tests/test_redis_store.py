from unittest.mock import AsyncMock, MagicMock

import pytest

from sentinel_trade.cache import RedisStore
from sentinel_trade.cache.remote import escape_glob


async def _aiter(items):
    for item in items:
        yield item


def test_escape_glob():
    assert escape_glob("alert:1:") == "alert:1:"
    assert escape_glob("a*b?[c]\\") == "a\\*b\\?\\[c\\]\\\\"


@pytest.mark.asyncio
async def test_set_passes_expiry():
    client = AsyncMock()
    store = RedisStore(client)

    await store.set("price:DOT", "{}", 300)

    client.set.assert_awaited_once_with(name="price:DOT", value="{}", ex=300)


@pytest.mark.asyncio
async def test_delete_without_keys_skips_round_trip():
    client = AsyncMock()
    store = RedisStore(client)

    assert await store.delete() == 0
    client.delete.assert_not_awaited()

    client.delete.return_value = 2
    assert await store.delete("a", "b") == 2
    client.delete.assert_awaited_once_with("a", "b")


@pytest.mark.asyncio
async def test_keys_with_prefix_scans_escaped_pattern():
    client = MagicMock()
    client.scan_iter = MagicMock(return_value=_aiter(["alert:1:DOT", "alert:1:BTC"]))
    store = RedisStore(client)

    keys = await store.keys_with_prefix("alert:1:")

    assert keys == {"alert:1:DOT", "alert:1:BTC"}
    client.scan_iter.assert_called_once_with(match="alert:1:*")


@pytest.mark.asyncio
async def test_ping_and_close():
    client = AsyncMock()
    client.ping.return_value = True
    store = RedisStore(client)

    assert await store.ping() is True
    await store.close()
    client.aclose.assert_awaited_once()
