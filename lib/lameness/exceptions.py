"""
Exception hierarchy for the lameness detection library, dood!

Storage implementations living outside this package should subclass these
so that callers can catch a single ``StorageError`` regardless of backend.
"""


class LamenessError(Exception):
    """Base exception for all lameness library errors."""

    pass


class StorageError(LamenessError):
    """
    Base exception for classifier storage errors.

    Raised when a classifier snapshot cannot be loaded or persisted. Reporter
    and query operations propagate it instead of returning a lameness verdict.
    """

    pass


class StorageIOError(StorageError):
    """
    Exception raised when an I/O operation on the storage fails.

    This category is considered transient and is retried by ClassifierStore
    a bounded number of times before being propagated.

    Args:
        message: Description of the I/O error
        originalError: The original exception that caused this error (optional)
    """

    def __init__(self, message: str, originalError: Exception | None = None):
        super().__init__(message)
        self.originalError = originalError


class SnapshotFormatError(StorageError):
    """
    Exception raised when a persisted snapshot can't be decoded.

    Covers malformed JSON, unsupported versions and snapshots trained with
    a category set other than lame/unlame.
    """

    pass
