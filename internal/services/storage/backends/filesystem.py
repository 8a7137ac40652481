"""
Filesystem snapshot storage backend implementation

This module provides a storage backend that keeps every classifier snapshot
as a file in its own directory under a base directory, with atomic replace
on write and per-path exclusive locking.
"""

import fcntl
import logging
import os
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, List, Optional

from lib.lameness.storage_interface import SnapshotStorageInterface

from ..exceptions import StorageBackendError, StorageKeyError
from ..utils import sanitizePath

logger = logging.getLogger(__name__)

# Snapshot file inside the snapshot path directory
SNAPSHOT_FILENAME = "snapshot.json"

# Lock file next to the snapshot
LOCK_FILENAME = "snapshot.lock"


class _PathLock:
    """
    Reentrant lock of one snapshot path

    Combines a thread lock (in-process writers) with flock() on the lock
    file (other processes). The file lock is taken on the outermost acquire
    only, since flock() on a second descriptor would deadlock.
    """

    def __init__(self, lockPath: Path):
        self.lockPath = lockPath
        self.threadLock = threading.RLock()
        self.depth = 0
        self.fd: Optional[int] = None

    def acquire(self) -> None:
        self.threadLock.acquire()
        try:
            if self.depth == 0:
                self.lockPath.parent.mkdir(parents=True, exist_ok=True)
                fd = os.open(self.lockPath, os.O_RDWR | os.O_CREAT, 0o644)
                try:
                    fcntl.flock(fd, fcntl.LOCK_EX)
                except OSError:
                    os.close(fd)
                    raise
                self.fd = fd
            self.depth += 1
        except Exception:
            self.threadLock.release()
            raise

    def release(self) -> None:
        try:
            self.depth -= 1
            if self.depth == 0 and self.fd is not None:
                try:
                    fcntl.flock(self.fd, fcntl.LOCK_UN)
                finally:
                    os.close(self.fd)
                    self.fd = None
        finally:
            self.threadLock.release()


class FSSnapshotStorage(SnapshotStorageInterface):
    """
    Filesystem-based snapshot storage.

    Snapshot path "Comment/body" is stored as <baseDir>/Comment/body/snapshot.json,
    every path segment being sanitized.

    Features:
    - Automatic directory creation if baseDir doesn't exist
    - Atomic write: temp file is fsync'ed, then renamed over the snapshot
    - File permissions set to 0o644 (readable by all, writable by owner)
    - Per-path exclusive lock, safe across threads and processes
    - Proper error handling with StorageBackendError wrapping

    Args:
        baseDir: Base directory path for storage (will be created if needed)

    Raises:
        StorageBackendError: If baseDir cannot be created or accessed

    Example:
        >>> storage = FSSnapshotStorage("/tmp/lameness_data")
        >>> with storage.lock("Comment/body"):
        ...     storage.save("Comment/body", b"{}")
        >>> storage.load("Comment/body")
        b'{}'
    """

    def __init__(self, baseDir: str):
        """
        Initialize filesystem snapshot storage.

        Args:
            baseDir: Base directory path for storage

        Raises:
            StorageBackendError: If baseDir cannot be created or is not a directory
        """
        self.baseDir = Path(baseDir)

        # Create base directory if it doesn't exist
        try:
            self.baseDir.mkdir(parents=True, exist_ok=True)
        except Exception as e:
            raise StorageBackendError(f"Failed to create base directory '{baseDir}': {e}", originalError=e)

        # Verify it's actually a directory
        if not self.baseDir.is_dir():
            raise StorageBackendError(f"Base path '{baseDir}' exists but is not a directory")

        self._locks: Dict[Path, _PathLock] = {}
        self._locksGuard = threading.Lock()

    def _getDirPath(self, path: str) -> Path:
        """
        Get the directory of a snapshot path.

        Raises:
            StorageKeyError: If the path is invalid
        """
        return self.baseDir.joinpath(*sanitizePath(path))

    def _getSnapshotPath(self, path: str) -> Path:
        return self._getDirPath(path) / SNAPSHOT_FILENAME

    def load(self, path: str) -> bytes | None:
        """
        Read the snapshot file.

        Args:
            path: Snapshot path (will be sanitized)

        Returns:
            The snapshot bytes if the file exists, None if not found

        Raises:
            StorageKeyError: If the path is invalid
            StorageBackendError: If the read operation fails (not for missing files)
        """
        filePath = self._getSnapshotPath(path)

        # Return None if file doesn't exist
        if not filePath.exists():
            return None

        try:
            with open(filePath, "rb") as f:
                return f.read()
        except FileNotFoundError:
            # File was deleted between exists check and read
            return None
        except Exception as e:
            raise StorageBackendError(f"Failed to read snapshot '{path}': {e}", originalError=e)

    def save(self, path: str, data: bytes) -> None:
        """
        Write the snapshot file.

        Uses atomic write operation by writing to a temporary file first,
        then renaming it to the snapshot filename. An interrupted write
        leaves the previous snapshot untouched.

        Args:
            path: Snapshot path (will be sanitized)
            data: The snapshot bytes

        Raises:
            StorageKeyError: If the path is invalid
            StorageBackendError: If the write operation fails
        """
        filePath = self._getSnapshotPath(path)
        tempPath = filePath.with_suffix(filePath.suffix + ".tmp")

        try:
            filePath.parent.mkdir(parents=True, exist_ok=True)

            # Write to temporary file first
            with open(tempPath, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())

            # Set file permissions to 0o644
            os.chmod(tempPath, 0o644)

            # Atomic rename to target file
            tempPath.replace(filePath)

            # Persist the rename itself
            dirFd = os.open(filePath.parent, os.O_RDONLY)
            try:
                os.fsync(dirFd)
            finally:
                os.close(dirFd)

        except Exception as e:
            # Clean up temporary file if it exists
            if tempPath.exists():
                try:
                    tempPath.unlink()
                except OSError as cleanupError:
                    logger.warning(f"Failed to remove temporary file {tempPath}: {cleanupError}")

            raise StorageBackendError(f"Failed to save snapshot '{path}': {e}", originalError=e)

    def exists(self, path: str) -> bool:
        """
        Check if a snapshot file exists for the path.

        Raises:
            StorageKeyError: If the path is invalid
            StorageBackendError: If the existence check fails
        """
        try:
            filePath = self._getSnapshotPath(path)
            return filePath.exists() and filePath.is_file()
        except (StorageKeyError, StorageBackendError):
            raise
        except Exception as e:
            raise StorageBackendError(f"Failed to check existence of snapshot '{path}': {e}", originalError=e)

    def list(self, prefix: str = "") -> List[str]:
        """
        List all snapshot paths matching the prefix.

        Args:
            prefix: Optional prefix to filter snapshot paths (default: "" for all)

        Returns:
            Sorted list of "/"-separated snapshot paths

        Raises:
            StorageBackendError: If the list operation fails
        """
        try:
            paths = [
                snapshotFile.parent.relative_to(self.baseDir).as_posix()
                for snapshotFile in self.baseDir.rglob(SNAPSHOT_FILENAME)
                if snapshotFile.is_file() and snapshotFile.parent != self.baseDir
            ]
        except Exception as e:
            raise StorageBackendError(f"Failed to list snapshots with prefix '{prefix}': {e}", originalError=e)

        return sorted(p for p in paths if p.startswith(prefix))

    @contextmanager
    def lock(self, path: str) -> Iterator[None]:
        """
        Hold exclusive lock of the snapshot path.

        Raises:
            StorageKeyError: If the path is invalid
            StorageBackendError: If the lock file can't be created or locked
        """
        dirPath = self._getDirPath(path)
        with self._locksGuard:
            pathLock = self._locks.get(dirPath)
            if pathLock is None:
                pathLock = _PathLock(dirPath / LOCK_FILENAME)
                self._locks[dirPath] = pathLock

        try:
            pathLock.acquire()
        except OSError as e:
            raise StorageBackendError(f"Failed to lock snapshot '{path}': {e}", originalError=e)

        try:
            yield
        finally:
            pathLock.release()
