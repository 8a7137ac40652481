"""
Lameness service: builds the lameness stack from configuration

This module creates the snapshot storage backend, the classifier store and the
reporter from the [storage] and [lameness] configuration sections, and exposes
analyzers, validators and classifier queries over them.
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Sequence

from internal.services.storage import createSnapshotStorage
from lib.lameness import (
    BayesConfig,
    ClassifierKey,
    ClassifierStore,
    FieldValidator,
    LamenessListener,
    LamenessReporter,
    ModelStats,
    StoreConfig,
    TokenizerConfig,
    ValidationRule,
    getAnalyzer,
)
from lib.lameness.storage_interface import SnapshotStorageInterface

if TYPE_CHECKING:
    from internal.config.manager import ConfigManager

logger = logging.getLogger(__name__)

# [lameness.tokenizer] key => TokenizerConfig field
TOKENIZER_OPTION_KEYS = {
    "min-token-length": "min_token_length",
    "max-token-length": "max_token_length",
    "lowercase": "lowercase",
    "remove-urls": "remove_urls",
    "use-bigrams": "use_bigrams",
}


def createStoreConfig(storageConfig: Mapping[str, Any], lamenessConfig: Mapping[str, Any]) -> StoreConfig:
    """
    Create classifier store configuration

    Args:
        storageConfig: [storage] section, io-retries and retry-delay are used
        lamenessConfig: [lameness] section with optional classifier and tokenizer subsections

    Returns:
        StoreConfig
    """
    tokenizerSection = lamenessConfig.get("tokenizer", {})
    tokenizerKwargs: Dict[str, Any] = {
        field: tokenizerSection[key] for key, field in TOKENIZER_OPTION_KEYS.items() if key in tokenizerSection
    }
    if "stopwords" in tokenizerSection:
        tokenizerKwargs["stopwords"] = set(tokenizerSection["stopwords"])

    classifierSection = lamenessConfig.get("classifier", {})
    bayesConfig = BayesConfig(
        alpha=float(classifierSection.get("alpha", 1.0)),
        maxTokensPerText=int(classifierSection.get("max-tokens-per-text", 2000)),
        tokenizerConfig=TokenizerConfig(**tokenizerKwargs),
    )

    return StoreConfig(
        maxRetries=int(storageConfig.get("io-retries", 3)),
        retryBackoffFactor=float(storageConfig.get("retry-delay", 0.1)),
        bayesConfig=bayesConfig,
    )


class LamenessService:
    """
    Entry point to lameness detection for an application

    Usage:
        service = LamenessService.fromConfigManager(configManager)

        violations = service.analyze("HELLO WORLD!!!", "validate_exclamation_marks_of")
        validator = service.createValidator(
            "Comment",
            [ValidationRule("validate_capitalization_of", ["body"], {"report_lameness": True})],
        )
        result = validator.validate({"body": "Nice post"})
        print(service.isLame("Nice post", "Comment", "body"))
    """

    def __init__(
        self,
        storage: SnapshotStorageInterface,
        storeConfig: Optional[StoreConfig] = None,
        selfTraining: bool = False,
    ):
        """
        Initialize lameness service

        Args:
            storage: Snapshot storage backend
            storeConfig: Classifier store configuration
            selfTraining: Train classifiers with their own isLame() predictions
        """
        self.storage = storage
        self.store = ClassifierStore(storage, storeConfig)
        self.reporter = LamenessReporter(self.store, selfTraining=selfTraining)

    @classmethod
    def fromConfigManager(cls, configManager: "ConfigManager") -> "LamenessService":
        """
        Create service from configuration

        Raises:
            StorageConfigError: If [storage] section is invalid
        """
        storageConfig = configManager.getStorageConfig()
        lamenessConfig = configManager.getLamenessConfig()

        service = cls(
            storage=createSnapshotStorage(storageConfig),
            storeConfig=createStoreConfig(storageConfig, lamenessConfig),
            selfTraining=bool(lamenessConfig.get("self-training", False)),
        )
        logger.info("Lameness service initialized, dood!")
        return service

    def analyze(
        self, text: Optional[str], validation: str, options: Optional[Mapping[str, Any]] = None
    ) -> Optional[List[str]]:
        """
        Run analyzer on text

        Args:
            text: Text to analyze
            validation: Analyzer name, e.g. "validate_capitalization_of"
            options: Analyzer options

        Returns:
            None if the text passed, list with violation message otherwise

        Raises:
            KeyError: If analyzer is unknown
        """
        return getAnalyzer(validation)(text, options)

    def createValidator(
        self,
        entityType: str,
        rules: Sequence[ValidationRule],
        listener: Optional[LamenessListener] = None,
    ) -> FieldValidator:
        """Create validator for records of the entity type, reporting lameness to this service"""
        return FieldValidator(entityType, rules, reporter=self.reporter, listener=listener)

    def reportLame(self, text: str, entityType: str, fieldName: Optional[str] = None) -> bool:
        return self.reporter.reportLame(text, ClassifierKey(entityType, fieldName))

    def reportUnlame(self, text: str, entityType: str, fieldName: Optional[str] = None) -> bool:
        return self.reporter.reportUnlame(text, ClassifierKey(entityType, fieldName))

    def isLame(self, text: str, entityType: str, fieldName: Optional[str] = None) -> bool:
        return self.reporter.isLame(text, ClassifierKey(entityType, fieldName))

    def getModelStats(self, entityType: str, fieldName: Optional[str] = None) -> ModelStats:
        return self.store.getModelStats(ClassifierKey(entityType, fieldName))

    def hasClassifier(self, entityType: str, fieldName: Optional[str] = None) -> bool:
        return self.store.hasClassifier(ClassifierKey(entityType, fieldName))

    def listClassifiers(self, entityType: Optional[str] = None) -> List[ClassifierKey]:
        return self.store.listKeys(entityType)
