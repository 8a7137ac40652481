"""
Text tokenization for the lameness classifier, dood!

This module converts raw text into the bag-of-words tokens counted by the
Bayes classifier. Tokenization is case-insensitive and splits on word
boundaries.
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Set


@dataclass
class TokenizerConfig:
    """Configuration for text tokenizer"""

    min_token_length: int = 3
    max_token_length: int = 50
    lowercase: bool = True
    remove_urls: bool = False
    use_bigrams: bool = False  # Include word pairs
    stopwords: Optional[Set[str]] = None  # Words to ignore

    def __post_init__(self):
        """Initialize default stopwords if not provided"""
        if self.stopwords is None:
            self.stopwords = self._getDefaultStopwords()

    def getStopwords(self) -> Set[str]:
        """Get stopwords"""
        if self.stopwords is None:
            self.stopwords = self._getDefaultStopwords()
        return self.stopwords

    def _getDefaultStopwords(self) -> Set[str]:
        """Get default English stopwords"""
        return {
            "the",
            "and",
            "but",
            "for",
            "with",
            "from",
            "are",
            "was",
            "were",
            "been",
            "have",
            "has",
            "had",
            "does",
            "did",
            "will",
            "would",
            "could",
            "should",
            "may",
            "might",
            "can",
            "this",
            "that",
            "these",
            "those",
            "you",
            "she",
            "they",
        }


class TextTokenizer:
    """
    Tokenizes text for the Bayes classifier

    Extracts word tokens, filters them by length and stopwords, and optionally
    adds bigrams.
    """

    def __init__(self, config: Optional[TokenizerConfig] = None):
        """
        Initialize tokenizer with configuration

        Args:
            config: TokenizerConfig object, uses defaults if None
        """
        self.config = config or TokenizerConfig()

        self._urlPattern = re.compile(r"https?://\S+|www\.\S+")
        self._wordPattern = re.compile(r"\b\w+\b")
        self._whitespacePattern = re.compile(r"\s+")

    def tokenize(self, text: str) -> List[str]:
        """
        Convert text into list of tokens

        Args:
            text: Text to tokenize

        Returns:
            List of tokens (words and, if enabled, bigrams)
        """
        if not text or not text.strip():
            return []

        processed = text
        if self.config.remove_urls:
            processed = self._urlPattern.sub(" ", processed)
        processed = self._whitespacePattern.sub(" ", processed)
        if self.config.lowercase:
            processed = processed.lower()

        words = self._filterWords(self._wordPattern.findall(processed))

        tokens = words.copy()
        if self.config.use_bigrams and len(words) > 1:
            tokens.extend(f"{words[i]}_{words[i + 1]}" for i in range(len(words) - 1))

        return tokens

    def _filterWords(self, words: List[str]) -> List[str]:
        """Filter words based on length and stopwords"""
        stopwords = self.config.getStopwords()
        filtered = []

        for word in words:
            if not (self.config.min_token_length <= len(word) <= self.config.max_token_length):
                continue
            if word.lower() in stopwords:
                continue
            filtered.append(word)

        return filtered

    def validateConfig(self) -> List[str]:
        """
        Validate tokenizer configuration

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if self.config.min_token_length < 1:
            errors.append("min_token_length must be at least 1")

        if self.config.max_token_length < self.config.min_token_length:
            errors.append("max_token_length must be >= min_token_length")

        if self.config.max_token_length > 100:
            errors.append("max_token_length should not exceed 100 for performance")

        return errors
