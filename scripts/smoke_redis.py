# scripts/smoke_redis.py

import sys
from pathlib import Path

# Ensure project root is on the path when running this script directly
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import asyncio

from redislock.config.logging import configure_logging
from redislock.config.settings import get_settings
from redislock.infrastructure.cache.redis_client import RedisClient
from redislock.locking.lock_manager import LockManager


async def smoke():
    configure_logging(get_settings().log_level)
    r = RedisClient()
    manager = LockManager(r, lease_ttl=30)

    try:
        first = await manager.try_acquire("user:123")
        second = await manager.try_acquire("user:123")

        print("First acquire:", first)
        print("Second acquire:", second)

        if first is not None:
            print("Release:", await first.release())
            print("Release again:", await first.release())
    finally:
        await r.close()

asyncio.run(smoke())
