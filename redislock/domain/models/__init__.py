from redislock.domain.models.lock import Lock, LockReleaser, LockState

__all__ = ["Lock", "LockReleaser", "LockState"]
