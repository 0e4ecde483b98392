"""
Endb exception hierarchy.

Every error raised by endb itself inherits from EndbError.
Driver failures are wrapped by adapters into StorageError with the
original exception chained as __cause__.

Usage:
    try:
        await db.get("foo")
    except StorageError as e:
        # Backend failure (connection refused, bad query, ...)
    except EndbError as e:
        # Any endb error
"""


class EndbError(Exception):
    """Base exception for all endb errors."""

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ConfigError(EndbError):
    """Configuration is invalid, missing, or malformed."""

    pass


class AdapterError(EndbError):
    """Adapter resolution or lifecycle failure."""

    def __init__(
        self,
        message: str,
        adapter: str = "",
        details: dict | None = None,
    ):
        self.adapter = adapter
        super().__init__(message, details)


class AdapterNotFoundError(AdapterError):
    """Requested adapter name is not registered (strict mode only)."""

    pass


class StorageError(AdapterError):
    """Backend failure — connection errors, query errors, etc."""

    pass
