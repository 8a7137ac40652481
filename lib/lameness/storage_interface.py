"""
Abstract storage interface for classifier snapshots, dood!

This module defines the abstract interface that snapshot storage implementations
must follow. This allows for easy testing and future storage backend changes.
"""

from abc import ABC, abstractmethod
from typing import ContextManager, List


class SnapshotStorageInterface(ABC):
    """
    Abstract interface for classifier snapshot storage

    Snapshots are opaque bytes addressed by a relative path such as
    "Comment/body". Implementations can use different backends (filesystem,
    memory, etc.) and should wrap backend errors into StorageError subclasses.
    """

    @abstractmethod
    def load(self, path: str) -> bytes | None:
        """
        Load the last committed snapshot

        Args:
            path: Relative snapshot path

        Returns:
            Snapshot bytes, or None if nothing was stored yet

        Raises:
            StorageError: If the snapshot exists but can't be read
        """
        pass

    @abstractmethod
    def save(self, path: str, data: bytes) -> None:
        """
        Durably replace the snapshot

        An interrupted save must leave the previously committed snapshot intact.

        Args:
            path: Relative snapshot path
            data: Snapshot bytes

        Raises:
            StorageError: If the snapshot can't be written
        """
        pass

    @abstractmethod
    def exists(self, path: str) -> bool:
        """
        Check if a snapshot exists

        Args:
            path: Relative snapshot path

        Returns:
            True if a snapshot was saved for the path
        """
        pass

    @abstractmethod
    def list(self, prefix: str = "") -> List[str]:
        """
        List snapshot paths

        Args:
            prefix: Optional path prefix to filter by

        Returns:
            Sorted list of snapshot paths
        """
        pass

    @abstractmethod
    def lock(self, path: str) -> ContextManager[None]:
        """
        Get exclusive lock for the snapshot path

        Holding the lock guarantees that no other writer runs a
        load-mutate-save cycle on the same path. Must be reentrant within
        one thread.

        Args:
            path: Relative snapshot path

        Returns:
            Context manager holding the lock while active
        """
        pass
