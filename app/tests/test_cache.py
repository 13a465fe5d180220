import pytest


@pytest.fixture
def clock(cache):
    now = [0.0]
    original = cache.clock
    cache.clock = lambda: now[0]
    yield now
    cache.clock = original


@pytest.mark.asyncio
async def test_set_get_and_expire(cache, clock):
    await cache.set("k", "v", ttl=10)

    assert await cache.get("k") == "v"
    clock[0] = 9.9
    assert await cache.get("k") == "v"
    clock[0] = 10
    assert await cache.get("k") is None


@pytest.mark.asyncio
async def test_entries_without_ttl_never_expire(cache, clock):
    await cache.set("k", 1)
    clock[0] = 10 ** 9

    assert await cache.get("k") == 1


@pytest.mark.asyncio
async def test_set_replaces_value_and_ttl(cache, clock):
    await cache.set("k", "old", ttl=5)
    clock[0] = 4
    await cache.set("k", "new", ttl=5)
    clock[0] = 8

    assert await cache.get("k") == "new"


@pytest.mark.asyncio
async def test_disconnected_cache_refuses_reads(cache):
    await cache.disconnect()
    try:
        with pytest.raises(RuntimeError):
            await cache.get("k")
    finally:
        cache.flush()
