import re
from typing import List, Optional

from errors import ClassifierUnavailable, InvalidInput
from logging_config import get_logger
from schemas import AnalysisResult, SentimentResult, determination_for

log = get_logger("scorer")

BASELINE_SCORE = 50

NEGATIVE_SENTIMENT_THRESHOLD = 0.9
CAPS_RATIO_THRESHOLD = 0.3
MAX_EXCLAMATIONS = 5
SHORT_TEXT_LENGTH = 200
LONG_TEXT_LENGTH = 500

FLAG_NEGATIVE_SENTIMENT = "Highly emotional or negative language detected."
FLAG_CAPS = "Excessive use of capital letters."
FLAG_EXCLAMATIONS = "Excessive use of exclamation marks."
FLAG_NO_CITATIONS = "No clear citations or source references found."
FLAG_SHORT = "Article is very short, which may indicate a lack of detail or context."
FLAG_CLICKBAIT = "Contains clickbait-style language."

INDICATOR_CITATIONS = "Contains references to sources or research"
INDICATOR_LENGTH = "Substantial content with adequate detail."

RECOMMENDATIONS = {
    "credible": (
        "This article shows several signs of credibility, but it is still good "
        "practice to verify key claims with other reputable sources."
    ),
    "questionable": (
        "Treat this article with caution. Cross-check its claims against "
        "established news outlets or fact-checking sites before sharing it."
    ),
    "fake": (
        "This article shows strong signs of being unreliable. Do not share it "
        "without verifying its claims through trusted sources."
    ),
}


class CredibilityScorer:
    """Rule-based credibility scorer.

    Each rule contributes its delta at most once, so the final score is
    ``BASELINE_SCORE`` plus the sum of triggered deltas, clamped to [0, 100].
    """

    def __init__(self, classifier=None):
        self.classifier = classifier

        self.citation_pattern = re.compile(
            r"source:|according to|study|research|report", re.IGNORECASE
        )
        self.clickbait_phrases = [
            "you won't believe",
            "shocking",
            "doctors hate",
            "one weird trick",
            "what happens next",
        ]
        self.clickbait_pattern = re.compile(
            "|".join(re.escape(p) for p in self.clickbait_phrases), re.IGNORECASE
        )

    def analyze(self, text: str) -> AnalysisResult:
        """Score ``text`` and build the result with summary and explanation."""
        if not text or not text.strip():
            raise InvalidInput("Article text is empty")

        score = BASELINE_SCORE
        flags: List[str] = []
        positives: List[str] = []

        sentiment = self._classify_sentiment(text)
        if (
            sentiment is not None
            and sentiment.label == "NEGATIVE"
            and sentiment.score > NEGATIVE_SENTIMENT_THRESHOLD
        ):
            score -= 20
            flags.append(FLAG_NEGATIVE_SENTIMENT)

        if self._caps_ratio(text) > CAPS_RATIO_THRESHOLD:
            score -= 15
            flags.append(FLAG_CAPS)

        if text.count("!") > MAX_EXCLAMATIONS:
            score -= 10
            flags.append(FLAG_EXCLAMATIONS)

        has_citations = self.citation_pattern.search(text) is not None
        if has_citations:
            score += 15
            positives.append(INDICATOR_CITATIONS)
        else:
            flags.append(FLAG_NO_CITATIONS)

        # Lengths from SHORT_TEXT_LENGTH to LONG_TEXT_LENGTH inclusive are neutral
        if len(text) < SHORT_TEXT_LENGTH:
            score -= 10
            flags.append(FLAG_SHORT)
        elif len(text) > LONG_TEXT_LENGTH:
            score += 10
            positives.append(INDICATOR_LENGTH)

        if self.clickbait_pattern.search(text):
            score -= 20
            flags.append(FLAG_CLICKBAIT)

        score = max(0, min(100, score))
        determination = determination_for(score)

        log.debug(
            f"Heuristic score {score} ({determination}), "
            f"{len(flags)} flags, {len(positives)} positive indicators"
        )

        return AnalysisResult(
            credibilityScore=score,
            determination=determination,
            summary=self._compose_summary(text, determination, sentiment, has_citations, flags),
            explanation=self._compose_explanation(determination, sentiment, flags, positives),
        )

    def _classify_sentiment(self, text: str) -> Optional[SentimentResult]:
        if self.classifier is None:
            return None
        try:
            return self.classifier.classify(text)
        except ClassifierUnavailable as e:
            log.warning(f"Skipping sentiment check: {e.message}")
        except Exception as e:
            log.warning(f"Skipping sentiment check, classifier error: {e}")
        return None

    @staticmethod
    def _caps_ratio(text: str) -> float:
        return sum(1 for c in text if c.isupper()) / len(text)

    @staticmethod
    def _flag_category(flags: List[str]) -> str:
        if not flags:
            return "no"
        if len(flags) <= 2:
            return "some"
        return "multiple"

    def _compose_summary(self, text, determination, sentiment, has_citations, flags) -> str:
        word_count = len(text.split())
        tone = sentiment.label.lower() if sentiment else "unavailable"
        citations = "references sources or research" if has_citations else "does not cite any sources"
        return (
            f"This {word_count}-word article appears {determination} based on heuristic analysis. "
            f"Overall sentiment: {tone}; the text {citations}, "
            f"and {self._flag_category(flags)} red flags were detected."
        )

    @staticmethod
    def _compose_explanation(determination, sentiment, flags, positives) -> str:
        sections = []

        sections.append(
            "Red flags:\n" + "\n".join(f"• {flag}" for flag in flags)
            if flags
            else "Red flags:\n• None detected"
        )
        sections.append(
            "Positive indicators:\n" + "\n".join(f"• {p}" for p in positives)
            if positives
            else "Positive indicators:\n• None detected"
        )

        if sentiment:
            sections.append(f"Sentiment: {sentiment.label} ({sentiment.score:.1%} confidence)")
        else:
            sections.append("Sentiment: analysis unavailable")

        sections.append(f"Recommendation: {RECOMMENDATIONS[determination]}")
        return "\n\n".join(sections)


def analyze(text: str, classifier=None) -> AnalysisResult:
    """Score ``text`` with the heuristic rules, optionally using ``classifier``."""
    return CredibilityScorer(classifier).analyze(text)
