"""Lock exceptions. "Resource busy" and "lease lapsed" are outcomes, not errors, and have no class here."""


class LockError(Exception):
    """Base for all redislock errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidResourceError(LockError):
    """Raised when the resource identifier is empty or not a string."""


class InvalidLeaseError(LockError):
    """Raised when the lease TTL is not a positive whole number of seconds."""


class StoreCommunicationError(LockError):
    """Raised when the store call itself failed (connection, timeout, protocol, auth, script).

    After this error the lock state is unknown: the caller must not assume ownership.
    """
