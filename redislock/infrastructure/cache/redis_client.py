# redislock/infrastructure/cache/redis_client.py

import redis.asyncio as redis
from redis.exceptions import RedisError

from redislock.config.settings import get_settings
from redislock.domain.exceptions import StoreCommunicationError

# Compare-and-delete, evaluated atomically on the server.
UNLOCK_SCRIPT = """
if redis.call("get", KEYS[1]) == ARGV[1]
then
    return redis.call("del", KEYS[1])
else
    return 0
end
"""


class RedisClient:
    """
    Lock backend over redis-py asyncio. Implements set_nx_ex / delete_if_value.
    Pass `client` to reuse a caller-owned connection pool; otherwise one is built from settings.
    """

    def __init__(self, client: redis.Redis | None = None, url: str | None = None):
        if client is None:
            settings = get_settings()
            client = redis.from_url(
                url or settings.redis_url,
                decode_responses=True,
                socket_timeout=settings.socket_timeout_seconds,
            )
        self.client = client
        self._unlock = self.client.register_script(UNLOCK_SCRIPT)

    async def set_nx_ex(self, key: str, value: str, ttl: int) -> bool:
        """Set key to value only if not exists, with TTL. Returns True if key was set."""
        try:
            return bool(await self.client.set(key, value, nx=True, ex=ttl))
        except RedisError as exc:
            raise StoreCommunicationError(f"SET NX EX failed for {key}: {exc}") from exc

    async def delete_if_value(self, key: str, value: str) -> bool:
        """Delete key only if its value equals value (atomic). Returns True if deleted."""
        try:
            result = await self._unlock(keys=[key], args=[value])
        except RedisError as exc:
            raise StoreCommunicationError(f"Compare-and-delete failed for {key}: {exc}") from exc
        return bool(result)

    async def get(self, key: str) -> str | None:
        """Get value for key. Returns None if key does not exist."""
        try:
            return await self.client.get(key)
        except RedisError as exc:
            raise StoreCommunicationError(f"GET failed for {key}: {exc}") from exc

    async def ping(self) -> bool:
        try:
            return bool(await self.client.ping())
        except RedisError as exc:
            raise StoreCommunicationError(f"PING failed: {exc}") from exc

    async def close(self) -> None:
        await self.client.aclose()
