"""
Lameness reporting and querying, dood!

LamenessReporter trains the per-key classifiers from validation decisions and
answers whether new text looks lame.
"""

import logging

from .models import LAME_CATEGORY, UNLAME_CATEGORY, ClassifierKey, LamenessClassification
from .store import ClassifierStore

logger = logging.getLogger(__name__)


class LamenessReporter:
    """
    Reports lame/unlame text to the classifier store and queries it

    Every operation runs one locked load-mutate-snapshot cycle on the store.
    Storage errors are propagated, never turned into a verdict.
    """

    def __init__(self, store: ClassifierStore, selfTraining: bool = False):
        """
        Initialize reporter

        Args:
            store: Classifier store
            selfTraining: Train the classifier with its own predictions on isLame()
        """
        self.store = store
        self.selfTraining = selfTraining

        if self.selfTraining:
            logger.warning(
                "Self-training is enabled: isLame() predictions are trained back as ground truth, "
                "classifiers may drift without correction."
            )

    def reportLame(self, text: str, key: ClassifierKey) -> bool:
        """
        Mark text as lame

        Training is skipped if the classifier already classifies this text as lame.
        The snapshot is taken in any case.

        Args:
            text: Lame text
            key: Classifier key

        Returns:
            True if the classifier was trained
        """
        with self.store.session(key) as handle:
            trained = False
            if self.store.classify(handle, text) == LamenessClassification.LAME:
                logger.debug(f"Text is already classified as lame by {key}, skipping training.")
            else:
                self.store.train(handle, LAME_CATEGORY, text)
                trained = True
            self.store.snapshot(handle)

        logger.info(f"Reported lame text for {key}, trained: {trained}.")
        return trained

    def reportUnlame(self, text: str, key: ClassifierKey) -> bool:
        """
        Mark text as unlame

        Args:
            text: Unlame text
            key: Classifier key

        Returns:
            True, the classifier is always trained
        """
        with self.store.session(key) as handle:
            self.store.train(handle, UNLAME_CATEGORY, text)
            self.store.snapshot(handle)

        logger.info(f"Reported unlame text for {key}.")
        return True

    def report(self, text: str, key: ClassifierKey, isLame: bool) -> bool:
        """Mark text as lame or unlame"""
        if isLame:
            return self.reportLame(text, key)
        return self.reportUnlame(text, key)

    def getClassification(self, text: str, key: ClassifierKey) -> LamenessClassification:
        """
        Classify text

        Args:
            text: Text to classify
            key: Classifier key

        Returns:
            LAME, UNLAME, or UNKNOWN if there is no training data for one of categories yet
        """
        with self.store.session(key) as handle:
            classification = self.store.classify(handle, text)

            if self.selfTraining and classification != LamenessClassification.UNKNOWN:
                self.store.train(handle, classification.value, text)
                self.store.snapshot(handle)
                logger.debug(f"Self-trained {key} with {classification.value} prediction.")

        logger.debug(f"Text classified by {key} as {classification.value}.")
        return classification

    def isLame(self, text: str, key: ClassifierKey) -> bool:
        """
        Check whether text is lame

        Args:
            text: Text to check
            key: Classifier key

        Returns:
            True if classified as lame, False if unlame or can't be judged yet
        """
        return self.getClassification(text, key) == LamenessClassification.LAME
