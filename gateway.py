import asyncio
import json
from typing import Any, Dict, Optional
import httpx
from pydantic import ValidationError

from config import settings
from errors import (
    BackendNotConfigured,
    MalformedUpstreamResponse,
    QuotaExhausted,
    RateLimited,
    UpstreamError,
)
from logging_config import get_logger
from schemas import AnalysisResult

log = get_logger("gateway")

SYSTEM_PROMPT = """You are an expert fact-checker and misinformation analyst helping students identify fake news.

Your task is to analyze news articles and provide:
1. A credibility score (0-100) where:
   - 0-30: Likely fake/unreliable
   - 31-60: Questionable/mixed credibility
   - 61-100: Likely credible

2. A determination: "credible", "questionable", or "fake"

3. A concise summary (2-3 sentences) of what the article claims

4. An educational explanation listing specific red flags or credibility indicators found in the article

Consider these factors:
- Sensational or clickbait language
- Lack of sources or citations
- Emotional manipulation tactics
- Verifiable facts vs opinions
- Author credibility and publication source
- Consistency with known facts
- Use of logical fallacies

Be educational and help students understand WHY something is unreliable."""

TOOL_NAME = "provide_analysis"

ANALYSIS_TOOL = {
    "type": "function",
    "function": {
        "name": TOOL_NAME,
        "description": "Return the fake news analysis results",
        "parameters": {
            "type": "object",
            "properties": {
                "credibilityScore": {
                    "type": "number",
                    "description": "Score from 0-100 indicating credibility",
                },
                "determination": {
                    "type": "string",
                    "enum": ["credible", "questionable", "fake"],
                    "description": "Overall determination of article credibility",
                },
                "summary": {
                    "type": "string",
                    "description": "Brief 2-3 sentence summary of the article",
                },
                "explanation": {
                    "type": "string",
                    "description": "Educational explanation of red flags or credibility indicators",
                },
            },
            "required": ["credibilityScore", "determination", "summary", "explanation"],
            "additionalProperties": False,
        },
    },
}


class AnalysisGatewayClient:
    """Client for the hosted language-model analysis gateway.

    Each call is a single attempt. Upstream failures are translated into
    BackendError subclasses carrying the status the API should return.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_url: Optional[str] = None,
        model: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.ANALYSIS_API_KEY
        self.api_url = api_url or settings.ANALYSIS_API_URL
        self.model = model or settings.ANALYSIS_MODEL
        self.http_client = http_client
        self._session_lock = asyncio.Lock()

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def _get_http_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client with timeout."""
        if not self.http_client:
            async with self._session_lock:
                if not self.http_client:
                    self.http_client = httpx.AsyncClient(timeout=settings.REQUEST_TIMEOUT_SECONDS)
        return self.http_client

    async def close(self):
        """Close HTTP client."""
        if self.http_client:
            await self.http_client.aclose()
            self.http_client = None

    def build_payload(self, text: str, url: Optional[str] = None) -> Dict[str, Any]:
        """Build the chat-completions request body."""
        content = text or f"Analyze this article from: {url}"
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": content},
            ],
            "tools": [ANALYSIS_TOOL],
            "tool_choice": {"type": "function", "function": {"name": TOOL_NAME}},
        }

    async def analyze_article(self, text: str, url: Optional[str] = None) -> AnalysisResult:
        """Send an article to the gateway and return the validated result."""
        if not self.configured:
            log.error("Analysis API key is not configured")
            raise BackendNotConfigured()

        client = await self._get_http_client()
        log.info("Calling analysis gateway for article analysis...")

        try:
            response = await client.post(
                self.api_url,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                json=self.build_payload(text, url),
            )
        except httpx.HTTPError as e:
            log.error(f"Analysis gateway request failed: {e}")
            raise UpstreamError() from e

        if response.status_code >= 400:
            self._raise_for_status(response)

        try:
            data = response.json()
        except ValueError as e:
            log.error(f"Analysis gateway returned non-JSON body: {response.text[:200]}")
            raise MalformedUpstreamResponse() from e

        result = self.parse_response(data)
        log.info(f"Analysis complete: {result.determination}")
        return result

    @staticmethod
    def _raise_for_status(response: httpx.Response):
        log.error(f"Analysis gateway error: {response.status_code} {response.text[:500]}")

        if response.status_code == 429:
            raise RateLimited()
        if response.status_code == 402:
            raise QuotaExhausted()
        if response.status_code in (401, 403):
            raise BackendNotConfigured("AI service authentication failed")
        raise UpstreamError()

    @staticmethod
    def parse_response(data: Any) -> AnalysisResult:
        """Extract and validate the forced tool call from a completion."""
        try:
            tool_call = data["choices"][0]["message"]["tool_calls"][0]
            arguments = tool_call["function"]["arguments"]
        except (KeyError, IndexError, TypeError) as e:
            log.error(f"No tool call in response: {json.dumps(data, default=str)[:500]}")
            raise MalformedUpstreamResponse() from e

        try:
            analysis = json.loads(arguments) if isinstance(arguments, str) else arguments
            return AnalysisResult.model_validate(analysis)
        except (ValueError, ValidationError) as e:
            log.error(f"Invalid analysis payload: {e}")
            raise MalformedUpstreamResponse() from e


# Global gateway client instance
analysis_gateway = AnalysisGatewayClient()
