"""
Pytest configuration and common fixtures for lameness tests.

This module provides shared fixtures for testing the classifier store,
reporter, validator and service. All fixtures follow camelCase naming convention.
"""

import shutil
import tempfile
from typing import Generator

import pytest

from internal.services.storage import MemorySnapshotStorage
from lib.lameness import ClassifierKey, ClassifierStore, LamenessReporter, StoreConfig

# ============================================================================
# Filesystem Fixtures
# ============================================================================


@pytest.fixture
def tempDir() -> Generator[str, None, None]:
    """
    Create a temporary directory, removed after the test.

    Yields:
        str: Temporary directory path
    """
    tmpDir = tempfile.mkdtemp()
    yield tmpDir
    shutil.rmtree(tmpDir, ignore_errors=True)


# ============================================================================
# Lameness Fixtures
# ============================================================================


@pytest.fixture
def memoryStorage() -> MemorySnapshotStorage:
    """
    Provide empty in-memory snapshot storage.

    Returns:
        MemorySnapshotStorage: Fresh storage
    """
    return MemorySnapshotStorage()


@pytest.fixture
def classifierStore(memoryStorage) -> ClassifierStore:
    """
    Provide classifier store over in-memory storage, without retry delays.

    Returns:
        ClassifierStore: Store instance
    """
    return ClassifierStore(memoryStorage, StoreConfig(retryBackoffFactor=0))


@pytest.fixture
def reporter(classifierStore) -> LamenessReporter:
    """
    Provide reporter with self-training disabled.

    Returns:
        LamenessReporter: Reporter instance
    """
    return LamenessReporter(classifierStore)


@pytest.fixture
def commentKey() -> ClassifierKey:
    """
    Provide classifier key of Comment.body.

    Returns:
        ClassifierKey: Key instance
    """
    return ClassifierKey("Comment", "body")
