"""
Field validation adapter for lameness analyzers, dood!

This module plugs the analyzers and the reporter into a record validation flow:
it decides whether a rule applies to a field (on/allow_nil/allow_blank/if/unless),
runs the analyzer on the stringified value, collects violations and, for rules
with report_lameness, trains the field classifier with the outcome.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from .analyzers import AnalyzerFunc, getAnalyzer
from .models import ClassifierKey
from .reporter import LamenessReporter

logger = logging.getLogger(__name__)

Condition = Callable[[Mapping[str, Any]], bool] | str

# Options interpreted by the validator itself, all other options go to the analyzer
RULE_OPTION_KEYS = frozenset({"on", "allow_nil", "allow_blank", "report_lameness", "if", "unless"})


class ValidationEvent(str, Enum):
    """When a validation rule is active"""

    SAVE = "save"
    CREATE = "create"
    UPDATE = "update"


def _stringify(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _evaluateCondition(condition: Condition, record: Mapping[str, Any]) -> bool:
    if isinstance(condition, str):
        return bool(record.get(condition))
    return bool(condition(record))


@dataclass
class ValidationRule:
    """
    Lameness validation of one or more fields

    Args:
        validation: Analyzer name, e.g. "validate_capitalization_of"
        fields: Names of validated fields
        options: Rule options (on, allow_nil, allow_blank, report_lameness, if, unless)
            mixed with analyzer options
    """

    validation: str
    fields: Sequence[str]
    options: Dict[str, Any] = field(default_factory=dict)
    analyzer: AnalyzerFunc = field(init=False, repr=False)
    on: ValidationEvent = field(init=False)

    def __post_init__(self):
        """Validate rule"""
        if isinstance(self.fields, str):
            self.fields = [self.fields]
        if not self.fields:
            raise ValueError(f"Validation {self.validation} must have at least one field, dood!")
        # Fail early on unknown validation names
        self.analyzer = getAnalyzer(self.validation)
        self.on = ValidationEvent(self.options.get("on", ValidationEvent.SAVE))

    @property
    def allowNil(self) -> bool:
        return bool(self.options.get("allow_nil", True))

    @property
    def allowBlank(self) -> bool:
        return bool(self.options.get("allow_blank", True))

    @property
    def reportLameness(self) -> bool:
        return bool(self.options.get("report_lameness", False))

    @property
    def analyzerOptions(self) -> Dict[str, Any]:
        return {k: v for k, v in self.options.items() if k not in RULE_OPTION_KEYS}

    def isActive(self, record: Mapping[str, Any], isNewRecord: bool) -> bool:
        """Check on/if/unless options"""
        if self.on == ValidationEvent.CREATE and not isNewRecord:
            return False
        if self.on == ValidationEvent.UPDATE and isNewRecord:
            return False

        ifCondition = self.options.get("if")
        if ifCondition is not None and not _evaluateCondition(ifCondition, record):
            return False

        unlessCondition = self.options.get("unless")
        if unlessCondition is not None and _evaluateCondition(unlessCondition, record):
            return False

        return True

    def skipsValue(self, value: Any) -> bool:
        """Check allow_nil/allow_blank options, None counts as blank too"""
        if value is None:
            return self.allowNil or self.allowBlank
        if self.allowBlank and not str(value).strip():
            return True
        return False


class LamenessListener(ABC):
    """Receives validation outcome of lameness validated fields"""

    @abstractmethod
    def onViolations(self, fieldId: str, messages: List[str]) -> None:
        """
        Called when a field failed a lameness validation

        Args:
            fieldId: "<entityType>.<field>"
            messages: Violation messages
        """
        pass

    @abstractmethod
    def onLamenessDecision(self, fieldId: str, isLame: bool) -> None:
        """
        Called after a report_lameness field was reported to the classifier

        Args:
            fieldId: "<entityType>.<field>"
            isLame: Whether the field was reported as lame
        """
        pass


class NullLamenessListener(LamenessListener):
    """No-op listener"""

    def onViolations(self, fieldId: str, messages: List[str]) -> None:
        pass

    def onLamenessDecision(self, fieldId: str, isLame: bool) -> None:
        pass


@dataclass
class ValidationResult:
    """Outcome of record validation"""

    errors: Dict[str, List[str]] = field(default_factory=dict)
    lameFields: List[str] = field(default_factory=list)
    lamenessFields: List[str] = field(default_factory=list)
    lameness: Dict[str, bool] = field(default_factory=dict)  # Reported decisions

    @property
    def isValid(self) -> bool:
        return not self.errors

    @property
    def unlameFields(self) -> List[str]:
        """Fields validated with report_lameness that had no violations"""
        return [name for name in self.lamenessFields if name not in self.lameFields]

    def addError(self, fieldName: str, message: str) -> None:
        self.errors.setdefault(fieldName, []).append(message)

    def addLameField(self, fieldName: str) -> None:
        if fieldName not in self.lameFields:
            self.lameFields.append(fieldName)

    def addLamenessField(self, fieldName: str) -> None:
        if fieldName not in self.lamenessFields:
            self.lamenessFields.append(fieldName)


class FieldValidator:
    """
    Runs lameness validation rules over records of one entity type

    Usage:
        validator = FieldValidator(
            "Comment",
            [ValidationRule("validate_exclamation_marks_of", ["body"], {"report_lameness": True})],
            reporter=reporter,
        )
        result = validator.validate({"body": "Great post!!!"})
    """

    def __init__(
        self,
        entityType: str,
        rules: Sequence[ValidationRule],
        reporter: Optional[LamenessReporter] = None,
        listener: Optional[LamenessListener] = None,
    ):
        """
        Initialize validator

        Args:
            entityType: Entity type name, used in classifier keys
            rules: Validation rules
            reporter: Reporter to train classifiers with, lameness isn't reported if None
            listener: Receiver of violations and lameness decisions
        """
        self.entityType = entityType
        self.rules = list(rules)
        self.reporter = reporter
        self.listener = listener or NullLamenessListener()

    def getFieldId(self, fieldName: str) -> str:
        return f"{self.entityType}.{fieldName}"

    def getClassifierKey(self, fieldName: str) -> ClassifierKey:
        return ClassifierKey(self.entityType, fieldName)

    def validate(self, record: Mapping[str, Any], isNewRecord: bool = True) -> ValidationResult:
        """
        Validate record and report lameness

        Args:
            record: Field name => value
            isNewRecord: True on create, False on update

        Returns:
            ValidationResult
        """
        result = ValidationResult()

        for rule in self.rules:
            if not rule.isActive(record, isNewRecord):
                continue

            analyzerOptions = rule.analyzerOptions
            for fieldName in rule.fields:
                value = record.get(fieldName)
                if rule.skipsValue(value):
                    continue

                messages = rule.analyzer(_stringify(value), analyzerOptions)
                if messages:
                    for message in messages:
                        result.addError(fieldName, message)
                    if rule.reportLameness:
                        result.addLameField(fieldName)

                if rule.reportLameness:
                    result.addLamenessField(fieldName)

        for fieldName, messages in result.errors.items():
            self.listener.onViolations(self.getFieldId(fieldName), list(messages))

        if self.reporter is not None:
            self.reportLameness(record, result)

        return result

    def reportLameness(self, record: Mapping[str, Any], result: ValidationResult) -> None:
        """
        Train field classifiers with validation outcome

        Args:
            record: Validated record
            result: Result of validation of the record
        """
        if self.reporter is None:
            raise ValueError("No reporter configured, dood!")

        for fieldName in result.lamenessFields:
            isLame = fieldName in result.lameFields
            self.reporter.report(_stringify(record.get(fieldName)) or "", self.getClassifierKey(fieldName), isLame)
            result.lameness[fieldName] = isLame
            self.listener.onLamenessDecision(self.getFieldId(fieldName), isLame)
            logger.debug(f"Reported {self.getFieldId(fieldName)} as {'lame' if isLame else 'unlame'}.")
