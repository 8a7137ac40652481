"""
Null snapshot storage backend implementation

This module provides a no-op storage backend. Classifiers opened over it are
always empty, so every lameness query answers "unknown" and nothing is persisted.
"""

from contextlib import contextmanager
from typing import Iterator, List

from lib.lameness.storage_interface import SnapshotStorageInterface

from ..utils import sanitizePath


class NullSnapshotStorage(SnapshotStorageInterface):
    """
    No-op snapshot storage.

    This backend validates paths but performs no actual storage operations:
    - save() does nothing and returns immediately
    - load() always returns None
    - exists() always returns False
    - list() always returns an empty list
    - lock() validates the path and holds nothing

    Use cases:
    - Disabling lameness learning
    - Unit testing without actual storage
    """

    def load(self, path: str) -> bytes | None:
        # Validate path by sanitizing it (will raise StorageKeyError if invalid)
        sanitizePath(path)
        return None

    def save(self, path: str, data: bytes) -> None:
        sanitizePath(path)

    def exists(self, path: str) -> bool:
        sanitizePath(path)
        return False

    def list(self, prefix: str = "") -> List[str]:
        return []

    @contextmanager
    def lock(self, path: str) -> Iterator[None]:
        sanitizePath(path)
        yield
