"""RedisClient against fakeredis: NX + EX on acquire, Lua compare-and-delete on release, error translation."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

pytest.importorskip("fakeredis", reason="fakeredis is required for Redis backend unit tests")
pytest.importorskip("lupa", reason="lupa is required for fakeredis Lua scripting")
import fakeredis

from redislock.domain.exceptions import StoreCommunicationError
from redislock.infrastructure.cache.redis_client import RedisClient
from redislock.locking.lock_manager import LockManager


@pytest.fixture
def fake():
    return fakeredis.aioredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)


@pytest.fixture
def client(fake):
    return RedisClient(client=fake)


@pytest.mark.asyncio
async def test_set_nx_ex_sets_value_and_ttl(client, fake):
    assert await client.set_nx_ex("redislock:r", "tok", 60) is True
    assert await fake.get("redislock:r") == "tok"
    assert 0 < await fake.ttl("redislock:r") <= 60


@pytest.mark.asyncio
async def test_set_nx_ex_refuses_existing_key(client, fake):
    await fake.set("redislock:r", "someone-else")
    assert await client.set_nx_ex("redislock:r", "tok", 60) is False
    assert await fake.get("redislock:r") == "someone-else"


@pytest.mark.asyncio
async def test_delete_if_value_matching(client, fake):
    await client.set_nx_ex("redislock:r", "tok", 60)
    assert await client.delete_if_value("redislock:r", "tok") is True
    assert await fake.exists("redislock:r") == 0


@pytest.mark.asyncio
async def test_delete_if_value_mismatch_keeps_key(client, fake):
    await fake.set("redislock:r", "new-holder")
    assert await client.delete_if_value("redislock:r", "old-token") is False
    assert await fake.get("redislock:r") == "new-holder"


@pytest.mark.asyncio
async def test_delete_if_value_absent_key(client):
    assert await client.delete_if_value("redislock:missing", "tok") is False


@pytest.mark.asyncio
async def test_get_and_ping(client):
    await client.set_nx_ex("redislock:r", "tok", 60)
    assert await client.get("redislock:r") == "tok"
    assert await client.get("redislock:missing") is None
    assert await client.ping() is True


@pytest.mark.asyncio
async def test_manager_over_redis_stale_release(client, fake):
    manager = LockManager(backend=client, lease_ttl=60)
    lock_a = await manager.try_acquire("user:123")
    await fake.delete(lock_a.key)  # lease lapsed

    lock_b = await manager.try_acquire("user:123")
    assert lock_b is not None

    assert await manager.release(lock_a) is False
    assert await fake.get(lock_b.key) == lock_b.token
    assert await manager.try_acquire("user:123") is None

    assert await manager.release(lock_b) is True
    assert await manager.try_acquire("user:123") is not None


def _broken_redis(exc: Exception) -> MagicMock:
    broken = MagicMock()
    broken.set = AsyncMock(side_effect=exc)
    broken.get = AsyncMock(side_effect=exc)
    broken.ping = AsyncMock(side_effect=exc)
    broken.register_script.return_value = AsyncMock(side_effect=exc)
    return broken


@pytest.mark.asyncio
async def test_connection_error_translated_on_acquire():
    client = RedisClient(client=_broken_redis(RedisConnectionError("connection refused")))
    with pytest.raises(StoreCommunicationError) as info:
        await client.set_nx_ex("redislock:r", "tok", 60)
    assert isinstance(info.value.__cause__, RedisConnectionError)


@pytest.mark.asyncio
async def test_timeout_translated_on_release():
    client = RedisClient(client=_broken_redis(RedisTimeoutError("timed out")))
    with pytest.raises(StoreCommunicationError, match="Compare-and-delete"):
        await client.delete_if_value("redislock:r", "tok")


@pytest.mark.asyncio
async def test_errors_translated_on_get_and_ping():
    client = RedisClient(client=_broken_redis(RedisConnectionError("connection refused")))
    with pytest.raises(StoreCommunicationError):
        await client.get("redislock:r")
    with pytest.raises(StoreCommunicationError):
        await client.ping()


def test_script_registered_once():
    redis_client = _broken_redis(RedisConnectionError("unused"))
    RedisClient(client=redis_client)
    redis_client.register_script.assert_called_once()
