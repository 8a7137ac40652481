"""
Persistent classifier store, dood!

ClassifierStore maps a ClassifierKey to a snapshot in the injected storage and
exposes open/train/classify/snapshot over it. There is no in-memory cache:
every open() reads the last committed snapshot, and callers snapshot after
every mutation.
"""

import json
import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List, Optional, TypeVar

import lib.utils as utils

from .bayes_classifier import BayesClassifier, BayesConfig
from .exceptions import SnapshotFormatError, StorageIOError
from .models import (
    LAME_CATEGORY,
    UNLAME_CATEGORY,
    ClassifierKey,
    LamenessClassification,
    ModelStats,
)
from .storage_interface import SnapshotStorageInterface

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class StoreConfig:
    """Configuration for classifier store"""

    # How many times to retry a failed storage read/write
    maxRetries: int = 3

    # Delay before retry N is retryBackoffFactor * 2**N seconds
    retryBackoffFactor: float = 0.1

    # Classifier configuration
    bayesConfig: Optional[BayesConfig] = None

    def __post_init__(self):
        """Validate configuration parameters"""
        if self.maxRetries < 0:
            raise ValueError("maxRetries must not be negative.")
        if self.retryBackoffFactor < 0:
            raise ValueError("retryBackoffFactor must not be negative.")
        if self.bayesConfig is None:
            self.bayesConfig = BayesConfig()


@dataclass
class ClassifierHandle:
    """Opened classifier: the key and its in-memory state"""

    key: ClassifierKey
    classifier: BayesClassifier
    isNew: bool = False  # Nothing was persisted for the key yet
    isDirty: bool = False  # Trained since last snapshot


class ClassifierStore:
    """
    Store of per-key lameness classifiers

    Usage:
        store = ClassifierStore(storage)
        with store.session(ClassifierKey("Comment", "body")) as handle:
            store.train(handle, "lame", "BUY NOW!!!")
            store.snapshot(handle)
    """

    def __init__(self, storage: SnapshotStorageInterface, config: Optional[StoreConfig] = None):
        """
        Initialize classifier store

        Args:
            storage: Snapshot storage implementation
            config: Store configuration
        """
        self.storage = storage
        self.config = config or StoreConfig()

    def _withRetries(self, operation: Callable[[], T], description: str) -> T:
        """Run storage operation, retrying on StorageIOError"""
        attempt = 0
        while True:
            try:
                return operation()
            except StorageIOError as e:
                if attempt >= self.config.maxRetries:
                    logger.error(f"Failed to {description} after {attempt + 1} attempts: {e}")
                    raise
                delay = self.config.retryBackoffFactor * (2**attempt)
                logger.warning(f"Failed to {description} on attempt {attempt + 1}: {e}, retrying in {delay}s")
                time.sleep(delay)
                attempt += 1

    @contextmanager
    def session(self, key: ClassifierKey) -> Iterator[ClassifierHandle]:
        """
        Open classifier under exclusive per-key lock

        The lock is held for the whole with-block, so a load-mutate-snapshot
        cycle inside it can't lose updates to a concurrent writer.

        Args:
            key: Classifier key

        Yields:
            Opened ClassifierHandle
        """
        with self.storage.lock(key.storagePath):
            yield self.open(key)

    def open(self, key: ClassifierKey) -> ClassifierHandle:
        """
        Load persisted classifier for the key, or create an empty one

        Args:
            key: Classifier key

        Returns:
            ClassifierHandle with the loaded state

        Raises:
            StorageError: If the snapshot can't be read or decoded
        """
        data = self._withRetries(lambda: self.storage.load(key.storagePath), f"load classifier {key}")

        if data is None:
            logger.debug(f"No snapshot for {key}, creating empty lame/unlame classifier.")
            return ClassifierHandle(key=key, classifier=BayesClassifier(self.config.bayesConfig), isNew=True)

        try:
            decoded = json.loads(data.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise SnapshotFormatError(f"Snapshot of {key} is not valid JSON: {e}") from e

        classifier = BayesClassifier.fromDict(decoded, self.config.bayesConfig)
        logger.debug(f"Loaded classifier {key}.")
        return ClassifierHandle(key=key, classifier=classifier)

    def train(self, handle: ClassifierHandle, category: str, text: str) -> int:
        """
        Train the classifier with text of the category

        Changes are in-memory only until snapshot() is called.

        Args:
            handle: Opened classifier
            category: "lame" or "unlame"
            text: Training text

        Returns:
            Number of tokens learned

        Raises:
            ValueError: If category is unknown
        """
        learned = handle.classifier.train(category, text)
        handle.isDirty = True
        return learned

    def scores(self, handle: ClassifierHandle, text: str) -> Dict[str, float]:
        """Get per-category log scores, -inf for categories without training data"""
        return handle.classifier.scores(text)

    def classify(self, handle: ClassifierHandle, text: str) -> LamenessClassification:
        """
        Classify text with the opened classifier

        Returns:
            LAME or UNLAME, or UNKNOWN if a category has no training data yet
        """
        return handle.classifier.classify(text)

    def snapshot(self, handle: ClassifierHandle) -> None:
        """
        Durably persist the classifier state

        Raises:
            StorageError: If the snapshot can't be written
        """
        data = utils.jsonDumps(handle.classifier.toDict()).encode("utf-8")
        self._withRetries(lambda: self.storage.save(handle.key.storagePath, data), f"snapshot classifier {handle.key}")
        if handle.isNew:
            logger.info(f"Created classifier {handle.key}.")
        elif not handle.isDirty:
            logger.debug(f"Saved unchanged snapshot of {handle.key}.")
        handle.isNew = False
        handle.isDirty = False
        logger.debug(f"Saved snapshot of {handle.key} ({len(data)} bytes).")

    def hasClassifier(self, key: ClassifierKey) -> bool:
        """Check whether a snapshot was ever persisted for the key"""
        return self._withRetries(lambda: self.storage.exists(key.storagePath), f"check classifier {key}")

    def getModelStats(self, key: ClassifierKey) -> ModelStats:
        """
        Get statistics of the persisted classifier

        Args:
            key: Classifier key

        Returns:
            ModelStats with document counts and vocabulary size
        """
        classifier = self.open(key).classifier
        return ModelStats(
            key=key,
            lameDocuments=classifier.categoryStats[LAME_CATEGORY].documentCount,
            unlameDocuments=classifier.categoryStats[UNLAME_CATEGORY].documentCount,
            totalTokens=sum(stats.tokenCount for stats in classifier.categoryStats.values()),
            vocabularySize=classifier.getVocabularySize(),
        )

    def listKeys(self, entityType: Optional[str] = None) -> List[ClassifierKey]:
        """
        List keys of persisted classifiers

        Args:
            entityType: Optional entity type to filter by

        Returns:
            List of ClassifierKey
        """
        keys = []
        for path in self._withRetries(lambda: self.storage.list(entityType or ""), "list classifiers"):
            entity, _, field = path.partition("/")
            if entityType and entity != entityType:
                continue
            keys.append(ClassifierKey(entity, field or None))
        return keys
