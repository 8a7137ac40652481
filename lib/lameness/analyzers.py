"""
Heuristic analyzers for lame text, dood!

Both analyzers are pure functions: they take an already-materialized string and
an options mapping, and return None if the text is fine, or a single-element
list with the violation message otherwise.
"""

import logging
import re
from typing import Any, Callable, Dict, List, Mapping, Optional

from .models import CapitalizationOptions, CapitalizationProfile, ExclamationOptions

logger = logging.getLogger(__name__)

AnalyzerFunc = Callable[..., Optional[List[str]]]

_letterPattern = re.compile(r"[a-zA-Z]")
_uppercasePattern = re.compile(r"[A-Z]")
_capitalWordPattern = re.compile(r"\b[A-Z]{2,}\b", re.ASCII)
_wordPattern = re.compile(r"\b\w{2,}\b", re.ASCII)


def _percentage(part: float, total: float) -> float:
    if total == 0:
        return 0.0
    return (part / total) * 100


def analyzeCapitalization(
    text: Optional[str], options: Optional[Mapping[str, Any] | CapitalizationOptions] = None
) -> Optional[List[str]]:
    """
    Check whether text has too many capital letters

    Args:
        text: Text to analyze, None and empty text are valid
        options: Analyzer options (message, maximum_uppercase_percentage, minimum_size,
            maximum_capital_words, maximum_percentage_of_capital_words, profile)

    Returns:
        None if the text is valid, otherwise a list with the violation message
    """
    config = options if isinstance(options, CapitalizationOptions) else CapitalizationOptions.fromOptions(options)
    if not text:
        return None

    totalCharacters = len(_letterPattern.findall(text))
    totalUppercase = len(_uppercasePattern.findall(text))

    # Too short to judge
    if totalCharacters < config.minimumSize:
        return None

    percentageUppercase = _percentage(totalUppercase, totalCharacters)
    if percentageUppercase > config.maximumUppercasePercentage:
        logger.debug(f"Uppercase percentage {percentageUppercase:.1f}% exceeds {config.maximumUppercasePercentage}%.")
        return [config.message]

    if config.profile == CapitalizationProfile.BASIC:
        return None

    capitalWords = len(_capitalWordPattern.findall(text))
    words = len(_wordPattern.findall(text))
    percentageOfCapitalWords = _percentage(capitalWords, words)

    if capitalWords > config.maximumCapitalWords:
        logger.debug(f"Found {capitalWords} capital words, maximum is {config.maximumCapitalWords}.")
        return [config.message]

    if percentageOfCapitalWords > config.maximumPercentageOfCapitalWords:
        logger.debug(
            f"Capital words make {percentageOfCapitalWords:.1f}% of text, "
            f"maximum is {config.maximumPercentageOfCapitalWords}%."
        )
        return [config.message]

    return None


def analyzeExclamationMarks(
    text: Optional[str], options: Optional[Mapping[str, Any] | ExclamationOptions] = None
) -> Optional[List[str]]:
    """
    Check whether text has too many exclamation marks, or too many of them together

    Args:
        text: Text to analyze, None and empty text are valid
        options: Analyzer options (message, maximum_in_composition, maximum_together)

    Returns:
        None if the text is valid, otherwise a list with the violation message
    """
    config = options if isinstance(options, ExclamationOptions) else ExclamationOptions.fromOptions(options)
    if not text:
        return None

    totalMarks = text.count("!")
    if totalMarks > config.maximumInComposition:
        logger.debug(f"Found {totalMarks} exclamation marks, maximum is {config.maximumInComposition}.")
        return [config.message]

    if "!" * (config.maximumTogether + 1) in text:
        logger.debug(f"Found more than {config.maximumTogether} exclamation marks together.")
        return [config.message]

    return None


ANALYZERS: Dict[str, AnalyzerFunc] = {
    "validate_capitalization_of": analyzeCapitalization,
    "validate_capitilization_of": analyzeCapitalization,
    "validate_exclamation_marks_of": analyzeExclamationMarks,
}


def getAnalyzer(name: str) -> AnalyzerFunc:
    """
    Get analyzer function by its validation name

    Raises:
        KeyError: If there is no analyzer with such name
    """
    try:
        return ANALYZERS[name]
    except KeyError:
        raise KeyError(f"Unknown lameness validation: {name!r}. Known: {', '.join(sorted(ANALYZERS))}") from None
