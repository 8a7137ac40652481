"""
Lameness Detection Library

This library flags lame free-text input (shouting, exclamation mark spam) with
deterministic heuristics, and learns per-field Naive Bayes classifiers from
validation decisions, dood!

Main Components:
- analyzeCapitalization, analyzeExclamationMarks: Heuristic analyzers
- BayesClassifier: Two-category (lame/unlame) Naive Bayes model
- ClassifierStore: Per-key persistent classifiers over a snapshot storage
- LamenessReporter: Reports lame/unlame text and answers isLame queries
- FieldValidator: Runs analyzers as record validation rules

Usage:
    from lib.lameness import ClassifierKey, ClassifierStore, LamenessReporter

    reporter = LamenessReporter(ClassifierStore(storage))
    key = ClassifierKey("Comment", "body")

    reporter.reportLame("BUY CHEAP PILLS NOW!!!", key)
    reporter.reportUnlame("Thanks for the detailed write-up.", key)
    print(reporter.isLame("CHEAP PILLS!!!", key))
"""

from .analyzers import ANALYZERS, analyzeCapitalization, analyzeExclamationMarks, getAnalyzer
from .bayes_classifier import BayesClassifier, BayesConfig
from .exceptions import LamenessError, SnapshotFormatError, StorageError, StorageIOError
from .models import (
    CATEGORIES,
    LAME_CATEGORY,
    UNLAME_CATEGORY,
    CapitalizationOptions,
    CapitalizationProfile,
    CategoryStats,
    ClassifierKey,
    ExclamationOptions,
    LamenessClassification,
    ModelStats,
)
from .reporter import LamenessReporter
from .storage_interface import SnapshotStorageInterface
from .store import ClassifierHandle, ClassifierStore, StoreConfig
from .tokenizer import TextTokenizer, TokenizerConfig
from .validation import (
    FieldValidator,
    LamenessListener,
    NullLamenessListener,
    ValidationEvent,
    ValidationResult,
    ValidationRule,
)

__all__ = [
    # Analyzers
    "ANALYZERS",
    "analyzeCapitalization",
    "analyzeExclamationMarks",
    "getAnalyzer",
    "CapitalizationOptions",
    "CapitalizationProfile",
    "ExclamationOptions",
    # Classifier
    "BayesClassifier",
    "BayesConfig",
    "TextTokenizer",
    "TokenizerConfig",
    "CATEGORIES",
    "LAME_CATEGORY",
    "UNLAME_CATEGORY",
    "LamenessClassification",
    "CategoryStats",
    "ModelStats",
    # Storage
    "ClassifierKey",
    "ClassifierHandle",
    "ClassifierStore",
    "StoreConfig",
    "SnapshotStorageInterface",
    # Reporting and validation
    "LamenessReporter",
    "FieldValidator",
    "LamenessListener",
    "NullLamenessListener",
    "ValidationEvent",
    "ValidationResult",
    "ValidationRule",
    # Exceptions
    "LamenessError",
    "StorageError",
    "StorageIOError",
    "SnapshotFormatError",
]
