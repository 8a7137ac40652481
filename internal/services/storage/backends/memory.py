"""
In-memory snapshot storage backend implementation

This module provides a storage backend keeping snapshots in a dict. It is used
in tests and for short-lived processes that don't need persistence across
restarts.
"""

import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List

from lib.lameness.storage_interface import SnapshotStorageInterface

from ..utils import sanitizePath


class MemorySnapshotStorage(SnapshotStorageInterface):
    """
    Dict-based snapshot storage.

    Paths are sanitized the same way as in FSSnapshotStorage, so a path valid
    here is valid there too. Stored bytes are copied, mimicking a real store.

    Example:
        >>> storage = MemorySnapshotStorage()
        >>> storage.save("Comment/body", b"{}")
        >>> storage.load("Comment/body")
        b'{}'
    """

    def __init__(self):
        self.snapshots: Dict[str, bytes] = {}
        self._locks: Dict[str, threading.RLock] = {}
        self._guard = threading.Lock()

    def _normalize(self, path: str) -> str:
        return "/".join(sanitizePath(path))

    def load(self, path: str) -> bytes | None:
        key = self._normalize(path)
        with self._guard:
            data = self.snapshots.get(key)
        return bytes(data) if data is not None else None

    def save(self, path: str, data: bytes) -> None:
        key = self._normalize(path)
        with self._guard:
            self.snapshots[key] = bytes(data)

    def exists(self, path: str) -> bool:
        key = self._normalize(path)
        with self._guard:
            return key in self.snapshots

    def list(self, prefix: str = "") -> List[str]:
        with self._guard:
            return sorted(key for key in self.snapshots if key.startswith(prefix))

    @contextmanager
    def lock(self, path: str) -> Iterator[None]:
        key = self._normalize(path)
        with self._guard:
            pathLock = self._locks.setdefault(key, threading.RLock())

        with pathLock:
            yield
