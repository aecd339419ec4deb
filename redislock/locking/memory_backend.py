"""In-memory lock backend with TTL expiry. For tests or single-process use; not shared across processes."""

import time


class InMemoryLockBackend:
    """key -> (value, expires_at on the monotonic clock).

    Expired keys are dropped when read, and every set_nx_ex sweeps all expired keys,
    so leases abandoned by crashed holders do not accumulate.
    """

    def __init__(self) -> None:
        self._store: dict[str, tuple[str, float]] = {}

    def _live(self, key: str) -> str | None:
        entry = self._store.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if time.monotonic() >= expires_at:
            del self._store[key]
            return None
        return value

    async def set_nx_ex(self, key: str, value: str, ttl: int) -> bool:
        # No await between check and write, so this is atomic on one event loop.
        self._sweep()
        if self._live(key) is not None:
            return False
        self._store[key] = (value, time.monotonic() + ttl)
        return True

    def _sweep(self) -> None:
        now = time.monotonic()
        expired = [k for k, (_, expires_at) in self._store.items() if now >= expires_at]
        for k in expired:
            del self._store[k]

    async def delete_if_value(self, key: str, value: str) -> bool:
        if self._live(key) != value:
            return False
        del self._store[key]
        return True

    async def get(self, key: str) -> str | None:
        return self._live(key)

    def ttl(self, key: str) -> float | None:
        """Seconds left on key, or None if absent."""
        if self._live(key) is None:
            return None
        return self._store[key][1] - time.monotonic()

    def force_expire(self, key: str) -> None:
        """Expire key now, as if its lease elapsed."""
        self._store.pop(key, None)
