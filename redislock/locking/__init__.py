"""Locking layer: LockManager over an injected store backend. No Redis imports."""

from redislock.locking.lock_manager import LockBackend, LockManager
from redislock.locking.memory_backend import InMemoryLockBackend

__all__ = [
    "InMemoryLockBackend",
    "LockBackend",
    "LockManager",
]
