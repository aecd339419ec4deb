"""Lock value object: one held lease on a resource. Pure domain; the store is reached through the manager."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Protocol

from redislock.domain.exceptions import LockError

logger = logging.getLogger(__name__)


class LockState(str, Enum):
    """Lifecycle of a Lock instance. A Lock only exists once acquired, so it starts HELD."""

    HELD = "held"
    RELEASED = "released"  # Explicit release returned without error; store-side expiry is not tracked


class LockReleaser(Protocol):
    """Anything that can release a lock it minted (the LockManager)."""

    async def release(self, lock: "Lock") -> bool: ...


@dataclass
class Lock:
    """
    A held lease. Created only by a successful acquisition.
    The store key holds `token` for as long as this Lock is the current holder.
    """

    resource: str
    key: str
    token: str
    lease_ttl: int
    acquired_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    state: LockState = LockState.HELD
    _releaser: LockReleaser | None = field(default=None, repr=False, compare=False)

    @property
    def is_released(self) -> bool:
        return self.state == LockState.RELEASED

    def mark_released(self) -> None:
        """HELD -> RELEASED. Repeated calls are no-ops; there is no way back to HELD."""
        self.state = LockState.RELEASED

    async def release(self) -> bool:
        """Release through the manager that minted this lock. See LockManager.release."""
        if self._releaser is None:
            raise LockError(f"Lock on {self.resource!r} is not bound to a manager")
        return await self._releaser.release(self)

    async def __aenter__(self) -> "Lock":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        try:
            await self.release()
        except LockError as release_exc:
            if exc_type is None:
                raise
            # The block's own exception wins; the lease still lapses on its own.
            logger.warning(
                "lock_release_failed_during_unwind",
                extra={"resource": self.resource, "key": self.key, "error": release_exc.message},
            )
        return False
