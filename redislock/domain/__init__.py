"""Domain layer: lock value object and exception hierarchy. No Redis imports."""

from redislock.domain.exceptions import (
    InvalidLeaseError,
    InvalidResourceError,
    LockError,
    StoreCommunicationError,
)
from redislock.domain.models.lock import Lock, LockState

__all__ = [
    "InvalidLeaseError",
    "InvalidResourceError",
    "Lock",
    "LockError",
    "LockState",
    "StoreCommunicationError",
]
