"""
Tests for HOSStatusCache and the cached /hos-status path.
"""
import uuid

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from fleetfusion.core.config import settings
from fleetfusion.services.hos_cache import HOSStatusCache
from tests.conftest import auth_headers

ORG_ID = uuid.UUID("00000000-0000-0000-0000-00000000000a")
DRIVER_ID = uuid.UUID("00000000-0000-0000-0000-00000000000b")


class FakeRedis:
    """Minimal stand-in for redis.asyncio.Redis with decode_responses=True."""

    def __init__(self):
        self.store: dict[str, str] = {}
        self.ttls: dict[str, int] = {}

    async def get(self, key):
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        self.store[key] = value
        self.ttls[key] = ex

    async def delete(self, key):
        self.store.pop(key, None)
        self.ttls.pop(key, None)


class BrokenRedis:
    async def get(self, key):
        raise RedisConnectionError("connection refused")

    async def set(self, key, value, ex=None):
        raise RedisConnectionError("connection refused")

    async def delete(self, key):
        raise RedisConnectionError("connection refused")


# ── Cache object ──────────────────────────────────────────────────────────────

def test_key_is_scoped_by_organization_and_driver():
    assert HOSStatusCache.key(ORG_ID, DRIVER_ID) == f"hos:status:{ORG_ID}:{DRIVER_ID}"


@pytest.mark.parametrize("ttl", [0, -1])
def test_ttl_must_be_positive(ttl):
    with pytest.raises(ValueError):
        HOSStatusCache(FakeRedis(), ttl)


@pytest.mark.asyncio
async def test_set_get_invalidate():
    client = FakeRedis()
    cache = HOSStatusCache(client, 45)

    assert await cache.get(ORG_ID, DRIVER_ID) is None
    await cache.set(ORG_ID, DRIVER_ID, {"compliance_status": "compliant", "used_drive_time": 120.0})

    assert client.ttls[HOSStatusCache.key(ORG_ID, DRIVER_ID)] == 45
    assert await cache.get(ORG_ID, DRIVER_ID) == {"compliance_status": "compliant", "used_drive_time": 120.0}

    await cache.invalidate(ORG_ID, DRIVER_ID)
    assert await cache.get(ORG_ID, DRIVER_ID) is None


@pytest.mark.asyncio
async def test_redis_failures_are_not_raised():
    cache = HOSStatusCache(BrokenRedis(), 60)
    assert await cache.get(ORG_ID, DRIVER_ID) is None
    await cache.set(ORG_ID, DRIVER_ID, {"x": 1})
    await cache.invalidate(ORG_ID, DRIVER_ID)


# ── Cached endpoint ───────────────────────────────────────────────────────────

@pytest.fixture
def fake_redis(monkeypatch):
    client = FakeRedis()

    async def get_fake_redis():
        return client

    monkeypatch.setattr(settings, "HOS_CACHE_ENABLED", True)
    monkeypatch.setattr("fleetfusion.api.v1.hos.get_redis", get_fake_redis)
    return client


@pytest.mark.asyncio
async def test_status_is_served_from_cache_until_a_log_is_written(client, fake_redis, dispatcher_token, driver):
    url = f"/api/v1/drivers/{driver.id}/hos-status"

    first = await client.get(url, headers=auth_headers(dispatcher_token))
    assert first.json()["cached"] is False
    assert len(fake_redis.store) == 1

    second = await client.get(url, headers=auth_headers(dispatcher_token))
    assert second.json()["cached"] is True
    assert second.json()["compliance_status"] == first.json()["compliance_status"]

    resp = await client.post(
        f"/api/v1/drivers/{driver.id}/hos-logs",
        json={"log_date": "2026-03-10"},
        headers=auth_headers(dispatcher_token),
    )
    assert resp.status_code == 201
    assert fake_redis.store == {}

    third = await client.get(url, headers=auth_headers(dispatcher_token))
    assert third.json()["cached"] is False


@pytest.mark.asyncio
async def test_point_in_time_status_bypasses_cache(client, fake_redis, dispatcher_token, driver):
    resp = await client.get(
        f"/api/v1/drivers/{driver.id}/hos-status",
        params={"at": "2026-03-10T18:00:00Z"},
        headers=auth_headers(dispatcher_token),
    )
    assert resp.json()["cached"] is False
    assert fake_redis.store == {}
