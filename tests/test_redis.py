import httpx

from closet.core.redis import InMemoryCache, RedisClient


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


async def test_in_memory_entries_expire():
    clock = FakeClock()
    cache = InMemoryCache(clock=clock)

    assert await cache.setex("key", 60, "value") is True
    clock.now += 59
    assert await cache.get("key") == "value"
    clock.now += 1
    assert await cache.get("key") is None


async def test_in_memory_write_sweeps_expired_entries():
    clock = FakeClock()
    cache = InMemoryCache(clock=clock)
    await cache.setex("outfit_cache:u:2026-03-14", 60, "monday")
    await cache.setex("outfit_cache:u:2026-03-15", 600, "tuesday")

    clock.now += 120
    await cache.setex("outfit_cache:v:2026-03-15", 60, "other")

    assert set(cache._store) == {"outfit_cache:u:2026-03-15", "outfit_cache:v:2026-03-15"}


def make_redis(handler) -> tuple[RedisClient, list[httpx.Request]]:
    requests = []

    def recording_handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return handler(request)

    client = RedisClient(
        url="https://redis.test/",
        token="token",
        transport=httpx.MockTransport(recording_handler),
    )
    return client, requests


async def test_upstash_setex_and_get():
    store = {}

    def handler(request: httpx.Request) -> httpx.Response:
        parts = request.url.path.strip("/").split("/")
        if parts[0] == "setex":
            store[parts[1]] = request.content.decode()
            return httpx.Response(200, json={"result": "OK"})
        return httpx.Response(200, json={"result": store.get(parts[1])})

    client, requests = make_redis(handler)

    assert await client.setex("outfit_cache:u:2026-03-14", 120, '{"id": "x"}') is True
    assert await client.get("outfit_cache:u:2026-03-14") == '{"id": "x"}'
    assert await client.get("missing") is None
    assert requests[0].url.path == "/setex/outfit_cache:u:2026-03-14/120"
    assert requests[0].headers["Authorization"] == "Bearer token"


async def test_upstash_failures_are_soft():
    client, _ = make_redis(lambda request: httpx.Response(500, json={"error": "down"}))

    assert await client.setex("key", 10, "value") is False
    assert await client.get("key") is None
