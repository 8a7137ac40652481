"""
Data models and types for lameness detection, dood!

This module defines the core data structures used throughout the lameness library:
analyzer options, classifier keys, classification results and model statistics.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, ClassVar, Dict, Mapping, Optional

# Fixed category labels of the lameness classifier
LAME_CATEGORY = "lame"
UNLAME_CATEGORY = "unlame"
CATEGORIES = (LAME_CATEGORY, UNLAME_CATEGORY)


class LamenessClassification(Enum):
    """Classification results for lameness detection"""

    LAME = LAME_CATEGORY
    UNLAME = UNLAME_CATEGORY
    UNKNOWN = "unknown"


class CapitalizationProfile(str, Enum):
    """Which set of capitalization checks to run"""

    FULL = "full"
    BASIC = "basic"  # uppercase percentage only


def _normalizeOptionKey(key: Any) -> str:
    return str(key).replace("-", "_")


def _collectOptions(optionKeys: Dict[str, str], options: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Map caller option names to dataclass fields, ignoring unknown keys"""
    kwargs: Dict[str, Any] = {}
    if not options:
        return kwargs

    for key, value in options.items():
        fieldName = optionKeys.get(_normalizeOptionKey(key))
        if fieldName is not None:
            kwargs[fieldName] = value
    return kwargs


def _coerceFields(options: Any, converters: Dict[str, Callable[[Any], Any]]) -> None:
    """Convert numeric fields of a frozen options dataclass, raising ValueError on bad values"""
    optionNames = {fieldName: optionName for optionName, fieldName in options.OPTION_KEYS.items()}
    for fieldName, converter in converters.items():
        value = getattr(options, fieldName)
        try:
            object.__setattr__(options, fieldName, converter(value))
        except (TypeError, ValueError):
            raise ValueError(f"{optionNames[fieldName]} must be a number, got {value!r}") from None


@dataclass(frozen=True)
class CapitalizationOptions:
    """Options for capitalization analysis"""

    message: str = "contains too many capital letters."
    maximumUppercasePercentage: float = 40
    minimumSize: int = 20
    maximumCapitalWords: int = 5
    maximumPercentageOfCapitalWords: float = 100
    profile: CapitalizationProfile = CapitalizationProfile.FULL

    OPTION_KEYS: ClassVar[Dict[str, str]] = {
        "message": "message",
        "maximum_uppercase_percentage": "maximumUppercasePercentage",
        "minimum_size": "minimumSize",
        "maximum_capital_words": "maximumCapitalWords",
        "maximum_percentage_of_capital_words": "maximumPercentageOfCapitalWords",
        "profile": "profile",
    }

    def __post_init__(self):
        """Coerce profile and numbers, validate values"""
        try:
            object.__setattr__(self, "profile", CapitalizationProfile(self.profile))
        except ValueError:
            raise ValueError(f"Unknown capitalization profile: {self.profile!r}") from None

        _coerceFields(
            self,
            {
                "maximumUppercasePercentage": float,
                "minimumSize": int,
                "maximumCapitalWords": int,
                "maximumPercentageOfCapitalWords": float,
            },
        )

        if self.minimumSize < 0:
            raise ValueError("minimum_size must not be negative.")

    @classmethod
    def fromOptions(cls, options: Optional[Mapping[str, Any]] = None) -> "CapitalizationOptions":
        """
        Build options from a caller-supplied mapping

        Args:
            options: Option name => value, unrecognized names are ignored

        Returns:
            CapitalizationOptions with defaults for missing names
        """
        return cls(**_collectOptions(cls.OPTION_KEYS, options))


@dataclass(frozen=True)
class ExclamationOptions:
    """Options for exclamation marks analysis"""

    message: str = "contains too many exclamation marks."
    maximumInComposition: int = 3
    maximumTogether: int = 1

    OPTION_KEYS: ClassVar[Dict[str, str]] = {
        "message": "message",
        "maximum_in_composition": "maximumInComposition",
        "maximum_together": "maximumTogether",
    }

    def __post_init__(self):
        """Coerce numbers and validate values"""
        _coerceFields(self, {"maximumInComposition": int, "maximumTogether": int})
        if self.maximumTogether < 0:
            raise ValueError("maximum_together must not be negative.")

    @classmethod
    def fromOptions(cls, options: Optional[Mapping[str, Any]] = None) -> "ExclamationOptions":
        """Build options from a caller-supplied mapping, ignoring unknown names"""
        return cls(**_collectOptions(cls.OPTION_KEYS, options))


@dataclass(frozen=True)
class ClassifierKey:
    """
    Identity of a persisted classifier

    Two keys with equal entityType and fieldName always address the same
    persisted state. Keys are case-sensitive. fieldName may be omitted to
    use a single classifier per entity type.
    """

    entityType: str
    fieldName: Optional[str] = None

    def __post_init__(self):
        """Validate key parts"""
        if not self.entityType or not self.entityType.strip():
            raise ValueError("Classifier entity type cannot be empty, dood!")
        if self.fieldName is not None and not self.fieldName.strip():
            raise ValueError("Classifier field name cannot be blank, dood!")

    @property
    def storagePath(self) -> str:
        """Relative storage path: <entityType>/<fieldName>"""
        if self.fieldName is None:
            return self.entityType
        return f"{self.entityType}/{self.fieldName}"

    def __str__(self) -> str:
        return self.storagePath


@dataclass
class CategoryStats:
    """Statistics for a classifier category (lame/unlame)"""

    documentCount: int  # Total trained documents in this category
    tokenCount: int  # Total tokens in this category

    def __post_init__(self):
        """Validate category statistics"""
        if self.documentCount < 0:
            self.documentCount = 0
        if self.tokenCount < 0:
            self.tokenCount = 0


@dataclass
class ModelStats:
    """Overall statistics for a persisted classifier"""

    key: ClassifierKey
    lameDocuments: int
    unlameDocuments: int
    totalTokens: int
    vocabularySize: int

    @property
    def totalDocuments(self) -> int:
        """Total number of training documents"""
        return self.lameDocuments + self.unlameDocuments

    @property
    def lameRatio(self) -> float:
        """Ratio of lame documents to total documents"""
        if self.totalDocuments == 0:
            return 0.0
        return self.lameDocuments / self.totalDocuments

    @property
    def isTrained(self) -> bool:
        """True if both categories have training data"""
        return self.lameDocuments > 0 and self.unlameDocuments > 0
