"""
Storage service exceptions

This module defines the exception hierarchy for the snapshot storage service.
All storage-related errors inherit from the lameness library StorageError, so
ClassifierStore callers can handle any backend failure generically.
"""

from lib.lameness.exceptions import StorageError, StorageIOError


class StorageKeyError(StorageError):
    """
    Exception raised when a storage key is invalid.

    This exception is raised when a key fails validation, such as:
    - Contains invalid characters
    - Exceeds maximum length
    - Contains path traversal sequences
    - Is empty or only whitespace

    Args:
        message: Description of why the key is invalid
    """

    pass


class StorageConfigError(StorageError):
    """
    Exception raised when storage configuration is invalid.

    This exception is raised during backend creation when:
    - Required configuration parameters are missing
    - Configuration values are invalid
    - Backend type is not recognized

    Args:
        message: Description of the configuration error
    """

    pass


class StorageBackendError(StorageIOError):
    """
    Exception raised when a storage backend operation fails.

    This exception wraps backend-specific errors such as:
    - File system I/O errors
    - Permission errors
    - Lock acquisition failures

    It is an I/O error, so ClassifierStore retries it before giving up.

    Args:
        message: Description of the backend error
        originalError: The original exception that caused this error (optional)
    """

    pass


__all__ = ["StorageError", "StorageKeyError", "StorageConfigError", "StorageBackendError"]
