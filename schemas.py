from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from config import settings

Determination = Literal["credible", "questionable", "fake"]

# Lowest score of each bucket, highest first
CREDIBLE_MIN_SCORE = 61
QUESTIONABLE_MIN_SCORE = 31


def determination_for(score: int) -> str:
    """Map a 0-100 credibility score to its determination bucket."""
    if score >= CREDIBLE_MIN_SCORE:
        return "credible"
    if score >= QUESTIONABLE_MIN_SCORE:
        return "questionable"
    return "fake"


class AnalysisRequest(BaseModel):
    articleText: str = Field("", max_length=settings.MAX_TEXT_LENGTH, description="Article text to analyze")
    articleUrl: Optional[str] = Field(None, max_length=2048, description="URL of the article to analyze")

    @field_validator("articleText", mode="before")
    @classmethod
    def validate_text(cls, v):
        return "" if v is None else v

    @property
    def has_text(self) -> bool:
        return bool(self.articleText.strip())

    @property
    def url(self) -> Optional[str]:
        if self.articleUrl and self.articleUrl.strip():
            return self.articleUrl.strip()
        return None

    @property
    def is_empty(self) -> bool:
        return not self.has_text and not self.url


class AnalysisResult(BaseModel):
    """Outcome of one analysis. Immutable once produced."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    credibilityScore: int = Field(..., ge=0, le=100, description="Credibility score (0-100, higher is more credible)")
    determination: Determination = Field(..., description="Classification: credible/questionable/fake")
    summary: str = Field(..., description="Brief summary of the article")
    explanation: str = Field(..., description="Red flags, credibility indicators and a recommendation")

    @field_validator("credibilityScore", mode="before")
    @classmethod
    def validate_score(cls, v):
        # Whole floats such as 72.0 are fine; strings and booleans are not
        if isinstance(v, (bool, str)):
            raise ValueError("credibilityScore must be a number")
        return v


class SentimentResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: Literal["POSITIVE", "NEGATIVE"]
    score: float = Field(..., ge=0, le=1)


class ErrorResponse(BaseModel):
    error: str = Field(..., description="Human-readable error message")


class HealthResponse(BaseModel):
    status: str = Field(..., description="Service status")
    timestamp: str = Field(..., description="Current timestamp")
    services: dict = Field(..., description="Service health information")
