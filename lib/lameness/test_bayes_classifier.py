"""
Tests for the lame/unlame Naive Bayes classifier, dood!
"""

import math

import pytest

from lib.lameness.bayes_classifier import SNAPSHOT_VERSION, BayesClassifier, BayesConfig
from lib.lameness.exceptions import SnapshotFormatError
from lib.lameness.models import LAME_CATEGORY, UNLAME_CATEGORY, LamenessClassification
from lib.lameness.tokenizer import TokenizerConfig


@pytest.fixture
def trainedClassifier():
    """Classifier trained with a few lame and unlame texts, dood!"""
    classifier = BayesClassifier()
    for text in ["BUY CHEAP PILLS NOW", "CHEAP DEALS CLICK HERE", "FREE MONEY CLICK NOW"]:
        classifier.train(LAME_CATEGORY, text)
    for text in ["Thanks for the detailed review", "Interesting article about gardening", "Great review, thanks"]:
        classifier.train(UNLAME_CATEGORY, text)
    return classifier


class TestBayesConfig:
    """Test classifier configuration validation, dood!"""

    def testDefaults(self):
        config = BayesConfig()
        assert config.alpha == 1.0
        assert config.tokenizerConfig is not None

    @pytest.mark.parametrize("alpha", [0, -1.0])
    def testNonPositiveAlphaRaisesError(self, alpha):
        with pytest.raises(ValueError, match="Alpha"):
            BayesConfig(alpha=alpha)

    def testNonPositiveMaxTokensRaisesError(self):
        with pytest.raises(ValueError):
            BayesConfig(maxTokensPerText=0)

    def testInvalidTokenizerConfigRaisesError(self):
        """Tokenizer settings are validated when the classifier config is built"""
        with pytest.raises(ValueError, match="max_token_length must be >= min_token_length"):
            BayesConfig(tokenizerConfig=TokenizerConfig(min_token_length=5, max_token_length=4))


class TestTraining:
    """Test classifier training, dood!"""

    def testTrainUpdatesCounts(self):
        """Training counts the document and its tokens"""
        classifier = BayesClassifier()
        learned = classifier.train(LAME_CATEGORY, "cheap cheap pills")

        assert learned == 3
        assert classifier.tokenCounts[LAME_CATEGORY] == {"cheap": 2, "pills": 1}
        assert classifier.categoryStats[LAME_CATEGORY].documentCount == 1
        assert classifier.categoryStats[LAME_CATEGORY].tokenCount == 3
        assert classifier.categoryStats[UNLAME_CATEGORY].documentCount == 0

    def testTrainingIsCaseInsensitive(self):
        classifier = BayesClassifier()
        classifier.train(LAME_CATEGORY, "CHEAP Cheap cheap")
        assert classifier.tokenCounts[LAME_CATEGORY] == {"cheap": 3}

    def testTrainWithoutTokensCountsDocument(self):
        """Text without tokens still counts as a trained document"""
        classifier = BayesClassifier()
        assert classifier.train(UNLAME_CATEGORY, "!!! ?? a") == 0
        assert classifier.categoryStats[UNLAME_CATEGORY].documentCount == 1
        assert classifier.categoryStats[UNLAME_CATEGORY].tokenCount == 0

    def testTrainUnknownCategoryRaisesError(self):
        classifier = BayesClassifier()
        with pytest.raises(ValueError, match="Unknown category"):
            classifier.train("spam", "text")

    def testMaxTokensPerText(self):
        classifier = BayesClassifier(BayesConfig(maxTokensPerText=2))
        assert classifier.train(LAME_CATEGORY, "one two three four five") == 2

    def testVocabularySize(self, trainedClassifier):
        vocabulary = set(trainedClassifier.tokenCounts[LAME_CATEGORY]) | set(
            trainedClassifier.tokenCounts[UNLAME_CATEGORY]
        )
        assert trainedClassifier.getVocabularySize() == len(vocabulary)


class TestClassification:
    """Test scores and classification, dood!"""

    def testEmptyClassifierIsUnknown(self):
        """No training data means no verdict"""
        classifier = BayesClassifier()
        assert classifier.classify("CHEAP PILLS") == LamenessClassification.UNKNOWN
        assert classifier.scores("CHEAP PILLS") == {LAME_CATEGORY: -math.inf, UNLAME_CATEGORY: -math.inf}

    def testSingleTrainedCategoryIsUnknown(self):
        """Only one trained category means no verdict either"""
        classifier = BayesClassifier()
        classifier.train(LAME_CATEGORY, "CHEAP PILLS")

        assert classifier.classify("CHEAP PILLS") == LamenessClassification.UNKNOWN
        scores = classifier.scores("CHEAP PILLS")
        assert math.isfinite(scores[LAME_CATEGORY])
        assert scores[UNLAME_CATEGORY] == -math.inf

    def testLameText(self, trainedClassifier):
        assert trainedClassifier.classify("cheap pills, click now") == LamenessClassification.LAME

    def testUnlameText(self, trainedClassifier):
        assert trainedClassifier.classify("detailed gardening review") == LamenessClassification.UNLAME

    def testTieIsUnlame(self):
        """Equal scores resolve to unlame"""
        classifier = BayesClassifier()
        classifier.train(LAME_CATEGORY, "apple")
        classifier.train(UNLAME_CATEGORY, "banana")

        scores = classifier.scores("cherry")
        assert scores[LAME_CATEGORY] == scores[UNLAME_CATEGORY]
        assert classifier.classify("cherry") == LamenessClassification.UNLAME

    def testScoreFormula(self):
        """Log prior plus Laplace-smoothed log likelihoods"""
        classifier = BayesClassifier()
        classifier.train(LAME_CATEGORY, "cheap pills")
        classifier.train(UNLAME_CATEGORY, "nice post")
        classifier.train(UNLAME_CATEGORY, "nice")

        scores = classifier.scores("cheap nice")
        vocabularySize = 4
        expectedLame = math.log(1 / 3) + math.log((1 + 1) / (2 + vocabularySize)) + math.log(1 / (2 + vocabularySize))
        expectedUnlame = (
            math.log(2 / 3) + math.log(1 / (3 + vocabularySize)) + math.log((2 + 1) / (3 + vocabularySize))
        )

        assert scores[LAME_CATEGORY] == pytest.approx(expectedLame)
        assert scores[UNLAME_CATEGORY] == pytest.approx(expectedUnlame)

    def testEmptyTextUsesPriorsOnly(self):
        classifier = BayesClassifier()
        classifier.train(LAME_CATEGORY, "cheap")
        classifier.train(LAME_CATEGORY, "pills")
        classifier.train(UNLAME_CATEGORY, "nice")

        scores = classifier.scores("")
        assert scores[LAME_CATEGORY] == pytest.approx(math.log(2 / 3))
        assert classifier.classify("") == LamenessClassification.LAME


class TestSnapshot:
    """Test classifier state serialization, dood!"""

    def testRestoredClassifierClassifiesTheSame(self, trainedClassifier):
        restored = BayesClassifier.fromDict(trainedClassifier.toDict())

        assert restored.tokenCounts == trainedClassifier.tokenCounts
        for text in ["cheap pills", "detailed review", "something else"]:
            assert restored.scores(text) == trainedClassifier.scores(text)

    def testSnapshotFormat(self):
        classifier = BayesClassifier()
        classifier.train(UNLAME_CATEGORY, "nice post")

        assert classifier.toDict() == {
            "version": SNAPSHOT_VERSION,
            "categories": {
                LAME_CATEGORY: {"documents": 0, "tokens": 0, "tokenCounts": {}},
                UNLAME_CATEGORY: {"documents": 1, "tokens": 2, "tokenCounts": {"nice": 1, "post": 1}},
            },
        }

    def testUnsupportedVersionRaisesError(self, trainedClassifier):
        data = trainedClassifier.toDict()
        data["version"] = 99
        with pytest.raises(SnapshotFormatError, match="version"):
            BayesClassifier.fromDict(data)

    def testOtherCategorySetRaisesError(self, trainedClassifier):
        """Snapshot with categories other than lame/unlame is rejected"""
        data = trainedClassifier.toDict()
        data["categories"]["spam"] = data["categories"].pop(LAME_CATEGORY)
        with pytest.raises(SnapshotFormatError, match="categories"):
            BayesClassifier.fromDict(data)

    def testMalformedCategoryRaisesError(self, trainedClassifier):
        data = trainedClassifier.toDict()
        del data["categories"][UNLAME_CATEGORY]["tokenCounts"]
        with pytest.raises(SnapshotFormatError, match="Malformed"):
            BayesClassifier.fromDict(data)

    def testNegativeCountsRaiseError(self, trainedClassifier):
        data = trainedClassifier.toDict()
        data["categories"][LAME_CATEGORY]["documents"] = -1
        with pytest.raises(SnapshotFormatError, match="Negative"):
            BayesClassifier.fromDict(data)

    @pytest.mark.parametrize("data", [None, [], "snapshot"])
    def testNonObjectRaisesError(self, data):
        with pytest.raises(SnapshotFormatError):
            BayesClassifier.fromDict(data)
