"""Pessimistic, lease-based Redis lock.

    manager = LockManager(RedisClient())
    lock = await manager.try_acquire("user:123")
    if lock is None:
        return  # user is in use elsewhere
    async with lock:
        ...  # do something with the user
"""

from redislock.domain.exceptions import (
    InvalidLeaseError,
    InvalidResourceError,
    LockError,
    StoreCommunicationError,
)
from redislock.domain.models.lock import Lock, LockState
from redislock.infrastructure.cache.redis_client import RedisClient
from redislock.locking.lock_manager import LockBackend, LockManager
from redislock.locking.memory_backend import InMemoryLockBackend

__all__ = [
    "InMemoryLockBackend",
    "InvalidLeaseError",
    "InvalidResourceError",
    "Lock",
    "LockBackend",
    "LockError",
    "LockManager",
    "LockState",
    "RedisClient",
    "StoreCommunicationError",
]
