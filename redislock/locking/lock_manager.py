"""Redis-based pessimistic lock. SET NX EX to acquire, atomic compare-and-delete to release.

One store round trip per operation; no retry, no polling, no renewal. Callers build
blocking or backoff behaviour on top of try_acquire.
"""

import asyncio
import logging
import time
import uuid
from typing import Any, Protocol

from redislock.config.settings import get_settings
from redislock.domain.exceptions import (
    InvalidLeaseError,
    InvalidResourceError,
    StoreCommunicationError,
)
from redislock.domain.models.lock import Lock

logger = logging.getLogger(__name__)

# Raised by non-Redis backends on transport failure; RedisClient translates its own errors.
_TRANSPORT_ERRORS = (OSError, asyncio.TimeoutError)


class LockBackend(Protocol):
    """Minimal store operations for the lock. Injected; both must be atomic at the store."""

    async def set_nx_ex(self, key: str, value: str, ttl: int) -> bool: ...
    async def delete_if_value(self, key: str, value: str) -> bool: ...


class LockManager:
    """
    Mints, acquires and releases Locks against a shared store.
    Holds no per-resource state, so one manager can be shared by many concurrent tasks.
    """

    def __init__(
        self,
        backend: LockBackend,
        key_prefix: str | None = None,
        lease_ttl: int | None = None,
        metrics_callback: Any = None,
    ) -> None:
        # Settings are only read for what the caller left out.
        if not key_prefix or lease_ttl is None:
            settings = get_settings()
            key_prefix = key_prefix or settings.key_prefix
            if lease_ttl is None:
                lease_ttl = settings.lease_ttl_seconds
        if isinstance(lease_ttl, bool) or not isinstance(lease_ttl, int) or lease_ttl <= 0:
            raise InvalidLeaseError(f"lease_ttl must be a positive integer, got {lease_ttl!r}")
        self._backend = backend
        self._prefix = key_prefix
        self._lease_ttl = lease_ttl
        self._metrics = metrics_callback

    @property
    def lease_ttl(self) -> int:
        return self._lease_ttl

    @property
    def key_prefix(self) -> str:
        return self._prefix

    def key_for(self, resource: str) -> str:
        return f"{self._prefix}:{resource}"

    def _record(self, name: str, resource: str) -> None:
        if self._metrics and hasattr(self._metrics, "increment"):
            self._metrics.increment(name, 1, resource=resource)

    def _observe(self, operation: str, started: float) -> float:
        elapsed_ms = (time.monotonic() - started) * 1000
        if self._metrics and hasattr(self._metrics, "observe_latency"):
            self._metrics.observe_latency("lock_store_latency", elapsed_ms, operation=operation)
        return elapsed_ms

    def _store_failure(self, exc: Exception, operation: str, resource: str, key: str) -> None:
        self._record("lock_store_error", resource)
        logger.warning(
            "lock_store_error",
            extra={"resource": resource, "key": key, "error": f"{operation}: {exc!r}"},
        )

    async def try_acquire(self, resource: str) -> Lock | None:
        """
        Try once to acquire the lock on resource. Returns the held Lock, or None if
        another holder has it. Raises StoreCommunicationError if the store call failed;
        in that case ownership is unknown and must not be assumed.
        """
        if not isinstance(resource, str) or not resource:
            raise InvalidResourceError(f"resource must be a non-empty string, got {resource!r}")

        key = self.key_for(resource)
        token = str(uuid.uuid4())
        started = time.monotonic()
        try:
            acquired = await self._backend.set_nx_ex(key, token, self._lease_ttl)
        except StoreCommunicationError as exc:
            self._store_failure(exc, "acquire", resource, key)
            raise
        except _TRANSPORT_ERRORS as exc:
            self._store_failure(exc, "acquire", resource, key)
            raise StoreCommunicationError(f"acquire failed for {key}: {exc!r}") from exc
        elapsed_ms = self._observe("acquire", started)

        if not acquired:
            self._record("lock_busy", resource)
            logger.debug("lock_busy", extra={"resource": resource, "key": key})
            return None

        self._record("lock_acquired", resource)
        logger.debug(
            "lock_acquired",
            extra={"resource": resource, "key": key, "lease_ttl": self._lease_ttl, "elapsed_ms": elapsed_ms},
        )
        return Lock(
            resource=resource,
            key=key,
            token=token,
            lease_ttl=self._lease_ttl,
            _releaser=self,
        )

    async def release(self, lock: Lock) -> bool:
        """
        Release lock if it is still the current holder (atomic compare-and-delete).
        Returns True if the key was deleted, False if the lease had already lapsed.
        The boolean is informational: no exception means this token no longer holds the lock.
        Raises StoreCommunicationError only if the store call itself failed.
        """
        started = time.monotonic()
        try:
            deleted = await self._backend.delete_if_value(lock.key, lock.token)
        except StoreCommunicationError as exc:
            self._store_failure(exc, "release", lock.resource, lock.key)
            raise
        except _TRANSPORT_ERRORS as exc:
            self._store_failure(exc, "release", lock.resource, lock.key)
            raise StoreCommunicationError(f"release failed for {lock.key}: {exc!r}") from exc
        elapsed_ms = self._observe("release", started)

        lock.mark_released()
        if deleted:
            self._record("lock_released", lock.resource)
            logger.debug(
                "lock_released",
                extra={"resource": lock.resource, "key": lock.key, "elapsed_ms": elapsed_ms},
            )
        else:
            self._record("lock_release_lapsed", lock.resource)
            logger.debug("lock_release_lapsed", extra={"resource": lock.resource, "key": lock.key})
        return bool(deleted)
