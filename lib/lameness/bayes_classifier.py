"""
Naive Bayes lameness classifier implementation, dood!

This module contains the in-memory classifier state and its classification
logic, using the multinomial Naive Bayes algorithm with Laplace smoothing.
Persistence is handled by ClassifierStore, which snapshots the state produced
by toDict() after every mutation.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .exceptions import SnapshotFormatError
from .models import CATEGORIES, LAME_CATEGORY, UNLAME_CATEGORY, CategoryStats, LamenessClassification
from .tokenizer import TextTokenizer, TokenizerConfig

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1


@dataclass
class BayesConfig:
    """Configuration for Bayes classifier"""

    # Laplace smoothing parameter (avoid zero probabilities)
    alpha: float = 1.0

    # Maximum tokens to consider per text (performance)
    maxTokensPerText: int = 2000

    # Tokenizer configuration
    tokenizerConfig: Optional[TokenizerConfig] = None

    def __post_init__(self):
        """Validate configuration parameters"""
        if self.alpha <= 0:
            raise ValueError("Alpha must be positive for Laplace smoothing.")

        if self.maxTokensPerText < 1:
            raise ValueError("maxTokensPerText must be positive.")

        if self.tokenizerConfig is None:
            self.tokenizerConfig = TokenizerConfig()

        errors = TextTokenizer(self.tokenizerConfig).validateConfig()
        if errors:
            raise ValueError(f"Invalid tokenizer configuration: {'; '.join(errors)}")


class BayesClassifier:
    """
    Two-category bag-of-words Naive Bayes classifier

    Keeps per-category token counts, trained document counts and token totals.
    Counts only ever grow: there is no way to untrain a document.
    """

    def __init__(self, config: Optional[BayesConfig] = None):
        """
        Initialize empty lame/unlame classifier

        Args:
            config: Classifier configuration
        """
        self.config = config or BayesConfig()
        self.tokenizer = TextTokenizer(self.config.tokenizerConfig)
        self.categories = CATEGORIES
        self.tokenCounts: Dict[str, Dict[str, int]] = {category: {} for category in self.categories}
        self.categoryStats: Dict[str, CategoryStats] = {
            category: CategoryStats(documentCount=0, tokenCount=0) for category in self.categories
        }

    def _checkCategory(self, category: str) -> None:
        if category not in self.categoryStats:
            raise ValueError(f"Unknown category '{category}', expected one of {self.categories}")

    def _tokenize(self, text: str) -> Dict[str, int]:
        tokens = self.tokenizer.tokenize(text)
        if len(tokens) > self.config.maxTokensPerText:
            logger.warning(f"Text has {len(tokens)} tokens, limiting to {self.config.maxTokensPerText}.")
            tokens = tokens[: self.config.maxTokensPerText]

        counts: Dict[str, int] = {}
        for token in tokens:
            counts[token] = counts.get(token, 0) + 1
        return counts

    def train(self, category: str, text: str) -> int:
        """
        Learn a text as an example of the category

        Args:
            category: Category label
            text: Training text

        Returns:
            Number of tokens learned

        Raises:
            ValueError: If category is unknown
        """
        self._checkCategory(category)
        tokenCounts = self._tokenize(text)
        learned = sum(tokenCounts.values())

        categoryTokens = self.tokenCounts[category]
        for token, count in tokenCounts.items():
            categoryTokens[token] = categoryTokens.get(token, 0) + count

        stats = self.categoryStats[category]
        stats.documentCount += 1
        stats.tokenCount += learned

        if not learned:
            logger.debug(f"No tokens found in {category} training text, counted the document only.")
        else:
            logger.debug(f"Learned {category} text with {learned} tokens.")
        return learned

    def getVocabularySize(self) -> int:
        """Number of unique tokens known to any category"""
        vocabulary = set()
        for categoryTokens in self.tokenCounts.values():
            vocabulary.update(categoryTokens.keys())
        return len(vocabulary)

    def scores(self, text: str) -> Dict[str, float]:
        """
        Compute log likelihood score of the text for each category

        A category without trained documents gets -inf, meaning its score
        is undefined.

        Args:
            text: Text to score

        Returns:
            Dict: category => log score
        """
        totalDocuments = sum(stats.documentCount for stats in self.categoryStats.values())
        # Never zero, so empty categories don't divide by zero
        vocabularySize = max(self.getVocabularySize(), 1)
        tokenCounts = self._tokenize(text)
        alpha = self.config.alpha

        result: Dict[str, float] = {}
        for category in self.categories:
            stats = self.categoryStats[category]
            if stats.documentCount == 0:
                result[category] = -math.inf
                continue

            score = math.log(stats.documentCount / totalDocuments)
            categoryTokens = self.tokenCounts[category]
            denominator = stats.tokenCount + alpha * vocabularySize
            for token, count in tokenCounts.items():
                pToken = (categoryTokens.get(token, 0) + alpha) / denominator
                score += math.log(pToken) * count

            result[category] = score

        logger.debug(f"Scores: {result}.")
        return result

    def classify(self, text: str) -> LamenessClassification:
        """
        Classify text

        Args:
            text: Text to classify

        Returns:
            Category with the higher score, UNKNOWN if any score is undefined.
            Ties are resolved as UNLAME.
        """
        scores = self.scores(text)
        if not all(math.isfinite(score) for score in scores.values()):
            return LamenessClassification.UNKNOWN

        if scores[LAME_CATEGORY] > scores[UNLAME_CATEGORY]:
            return LamenessClassification.LAME
        return LamenessClassification.UNLAME

    def toDict(self) -> Dict[str, Any]:
        """Serialize classifier state to a JSON-compatible dict"""
        return {
            "version": SNAPSHOT_VERSION,
            "categories": {
                category: {
                    "documents": self.categoryStats[category].documentCount,
                    "tokens": self.categoryStats[category].tokenCount,
                    "tokenCounts": dict(self.tokenCounts[category]),
                }
                for category in self.categories
            },
        }

    @classmethod
    def fromDict(cls, data: Any, config: Optional[BayesConfig] = None) -> "BayesClassifier":
        """
        Restore classifier state from toDict() output

        Raises:
            SnapshotFormatError: If data is not a valid lame/unlame snapshot
        """
        if not isinstance(data, dict):
            raise SnapshotFormatError("Snapshot must be a JSON object")
        if data.get("version") != SNAPSHOT_VERSION:
            raise SnapshotFormatError(f"Unsupported snapshot version: {data.get('version')!r}")

        categories = data.get("categories")
        if not isinstance(categories, dict) or set(categories.keys()) != set(CATEGORIES):
            raise SnapshotFormatError(f"Snapshot categories must be exactly {CATEGORIES}")

        classifier = cls(config)
        for category in CATEGORIES:
            entry = categories[category]
            try:
                documents = int(entry["documents"])
                tokens = int(entry["tokens"])
                tokenCounts = {str(token): int(count) for token, count in entry["tokenCounts"].items()}
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                raise SnapshotFormatError(f"Malformed '{category}' category in snapshot: {e}") from e

            if documents < 0 or tokens < 0 or any(count < 0 for count in tokenCounts.values()):
                raise SnapshotFormatError(f"Negative counts in '{category}' category of snapshot")

            classifier.categoryStats[category] = CategoryStats(documentCount=documents, tokenCount=tokens)
            classifier.tokenCounts[category] = tokenCounts

        return classifier
