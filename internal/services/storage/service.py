"""
Storage service: snapshot storage backend factory

This module creates the snapshot storage backend (filesystem, memory, null)
configured in the [storage] section of the configuration.
"""

import logging
from typing import Any, Dict

from lib.lameness.storage_interface import SnapshotStorageInterface

from .backends.filesystem import FSSnapshotStorage
from .backends.memory import MemorySnapshotStorage
from .backends.null import NullSnapshotStorage
from .exceptions import StorageConfigError

logger = logging.getLogger(__name__)

# Used when [storage.fs] has no base-dir, should persist across deployments
DEFAULT_BASE_DIR = "tmp/lameness_data"


def createSnapshotStorage(config: Dict[str, Any]) -> SnapshotStorageInterface:
    """
    Create snapshot storage backend from configuration.

    Args:
        config: Storage configuration dictionary

    Returns:
        Configured snapshot storage backend

    Raises:
        StorageConfigError: If configuration is invalid or backend creation fails

    Configuration format:
        {
            "type": "fs",  # or "memory" or "null"
            "fs": {"base-dir": "./tmp/lameness_data"},
        }
    """
    try:
        if not config:
            raise StorageConfigError("Storage configuration is missing")

        storageType = config.get("type")
        if not storageType:
            raise StorageConfigError("Storage type is not specified in configuration")

        backend: SnapshotStorageInterface
        if storageType == "null":
            backend = NullSnapshotStorage()
            logger.info("Initialized NullSnapshotStorage, lameness learning is disabled, dood!")

        elif storageType == "memory":
            backend = MemorySnapshotStorage()
            logger.info("Initialized MemorySnapshotStorage, snapshots won't survive restart, dood!")

        elif storageType == "fs":
            fsConfig = config.get("fs", {})
            baseDir = fsConfig.get("base-dir", DEFAULT_BASE_DIR)
            if not baseDir:
                raise StorageConfigError("Filesystem base-dir is empty")

            backend = FSSnapshotStorage(baseDir)
            logger.info(f"Initialized FSSnapshotStorage with base-dir: {baseDir}, dood!")

        else:
            raise StorageConfigError(f"Unknown storage type: {storageType}")

        return backend

    except StorageConfigError:
        raise
    except Exception as e:
        raise StorageConfigError(f"Failed to initialize snapshot storage: {e}") from e
