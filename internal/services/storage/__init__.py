"""
Storage service package

This package provides snapshot storage backends (Null, Memory, Filesystem) for
the lameness classifier store, and a factory creating them from configuration.
"""

from .backends.filesystem import FSSnapshotStorage
from .backends.memory import MemorySnapshotStorage
from .backends.null import NullSnapshotStorage
from .service import createSnapshotStorage

__all__ = ["createSnapshotStorage", "FSSnapshotStorage", "MemorySnapshotStorage", "NullSnapshotStorage"]
