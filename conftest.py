import os

# Settings are read at import time; keep tests offline and deterministic
os.environ["SENTIMENT_ENABLED"] = "false"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["RATE_LIMIT_PER_MINUTE"] = "1000"
os.environ["ANALYSIS_MODE"] = "auto"
os.environ["ANALYSIS_API_KEY"] = ""
os.environ["LOVABLE_API_KEY"] = ""

import pytest

from schemas import AnalysisResult, SentimentResult


class StubClassifier:
    """Classifier returning a fixed sentiment, or raising ``error``."""

    def __init__(self, label="POSITIVE", score=0.5, error=None):
        self.label = label
        self.score = score
        self.error = error
        self.calls = []

    def classify(self, text):
        self.calls.append(text)
        if self.error is not None:
            raise self.error
        return SentimentResult(label=self.label, score=self.score)


@pytest.fixture
def negative_classifier():
    return StubClassifier(label="NEGATIVE", score=0.97)


@pytest.fixture
def positive_classifier():
    return StubClassifier(label="POSITIVE", score=0.99)


AI_RESULT = AnalysisResult(
    credibilityScore=82,
    determination="credible",
    summary="Gateway summary.",
    explanation="Gateway explanation.",
)


class FakeGateway:
    """Analysis gateway double recording calls."""

    def __init__(self, configured=True, result=AI_RESULT, error=None):
        self.configured = configured
        self.result = result
        self.error = error
        self.calls = []
        self.closed = False

    async def analyze_article(self, text, url=None):
        self.calls.append((text, url))
        if self.error is not None:
            raise self.error
        return self.result

    async def close(self):
        self.closed = True


class FakeExtractor:
    """Article extractor double returning fixed text."""

    def __init__(self, text="The city council met on Monday to discuss budgets."):
        self.text = text
        self.urls = []
        self.closed = False

    async def fetch_text(self, url):
        self.urls.append(url)
        return self.text

    async def close(self):
        self.closed = True
