from typing import Optional
from starlette.concurrency import run_in_threadpool

from config import settings
from errors import InvalidInput
from extract import ArticleExtractor, article_extractor
from gateway import AnalysisGatewayClient, analysis_gateway
from logging_config import get_logger
from model import SentimentClassifier, sentiment_classifier
from schemas import AnalysisRequest, AnalysisResult
from scorer import CredibilityScorer

log = get_logger("analysis")

MODES = ("ai", "heuristic", "auto")


class ArticleAnalysisService:
    """Routes an analysis request to the AI gateway or the heuristic scorer."""

    def __init__(
        self,
        mode: str = None,
        gateway: AnalysisGatewayClient = None,
        classifier: Optional[SentimentClassifier] = None,
        extractor: ArticleExtractor = None,
    ):
        self.mode = (mode or settings.ANALYSIS_MODE).lower()
        if self.mode not in MODES:
            raise ValueError(f"ANALYSIS_MODE must be one of {MODES}, got {self.mode!r}")
        self.gateway = gateway or analysis_gateway
        self.extractor = extractor or article_extractor
        self.scorer = CredibilityScorer(classifier)

    @property
    def engine(self) -> str:
        """Engine used for requests under the current mode and configuration."""
        if self.mode == "auto":
            return "ai" if self.gateway.configured else "heuristic"
        return self.mode

    async def analyze(self, request: AnalysisRequest) -> AnalysisResult:
        if request.is_empty:
            raise InvalidInput()

        if self.engine == "ai":
            text = request.articleText if request.has_text else ""
            return await self.gateway.analyze_article(text, request.url)
        return await self.analyze_heuristic(request)

    async def analyze_heuristic(self, request: AnalysisRequest) -> AnalysisResult:
        if request.is_empty:
            raise InvalidInput()

        if request.has_text:
            text = request.articleText
        else:
            text = await self.extractor.fetch_text(request.url)

        result = await run_in_threadpool(self.scorer.analyze, text)
        log.info(f"Heuristic analysis complete: {result.determination} ({result.credibilityScore})")
        return result

    async def close(self):
        await self.gateway.close()
        await self.extractor.close()


# Global analysis service instance
analysis_service = ArticleAnalysisService(
    classifier=sentiment_classifier if settings.SENTIMENT_ENABLED else None
)
