import asyncio
import re
from typing import Optional
from urllib.parse import urlparse
import httpx
from bs4 import BeautifulSoup

from config import settings
from errors import ArticleFetchError, InvalidInput
from logging_config import get_logger

log = get_logger("extract")

NOISE_TAGS = ["script", "style", "noscript", "nav", "header", "footer", "aside", "form"]


class ArticleExtractor:
    """Fetches an article page and extracts its readable text."""

    def __init__(self, http_client: Optional[httpx.AsyncClient] = None):
        self.http_client = http_client
        self._session_lock = asyncio.Lock()

    async def _get_http_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client with timeout."""
        if not self.http_client:
            async with self._session_lock:
                if not self.http_client:
                    self.http_client = httpx.AsyncClient(
                        timeout=settings.REQUEST_TIMEOUT_SECONDS,
                        follow_redirects=True,
                        headers={
                            "User-Agent": "Mozilla/5.0 (compatible; CredibilityChecker/1.0)",
                            "Accept": "text/html,application/xhtml+xml",
                        },
                    )
        return self.http_client

    async def close(self):
        """Close HTTP client."""
        if self.http_client:
            await self.http_client.aclose()
            self.http_client = None

    @staticmethod
    def _validate_url(url: str) -> str:
        parsed = urlparse(url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise InvalidInput("articleUrl must be an http(s) URL")
        return url

    async def fetch_text(self, url: str) -> str:
        """Download ``url`` and return the article body as plain text."""
        url = self._validate_url(url)
        client = await self._get_http_client()

        try:
            response = await client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            log.warning(f"Article fetch failed for {url}: {e}")
            raise ArticleFetchError() from e

        text = extract_article_text(response.text)
        if not text:
            log.warning(f"No article text found at {url}")
            raise ArticleFetchError("No article text could be extracted from URL")

        log.info(f"Extracted {len(text)} characters from {url}")
        return text


def extract_article_text(html: str) -> str:
    """Pull paragraph text out of an HTML page.

    Paragraphs inside ``<article>`` are preferred; pages without one fall
    back to every ``<p>`` on the page.
    """
    soup = BeautifulSoup(html, "html.parser")

    for tag in soup(NOISE_TAGS):
        tag.decompose()

    container = soup.find("article") or soup
    paragraphs = [p.get_text(" ", strip=True) for p in container.find_all("p")]
    paragraphs = [p for p in paragraphs if p]

    if not paragraphs and container is not soup:
        paragraphs = [p.get_text(" ", strip=True) for p in soup.find_all("p")]
        paragraphs = [p for p in paragraphs if p]

    text = "\n\n".join(paragraphs)
    return re.sub(r"[ \t]+", " ", text).strip()


# Global extractor instance
article_extractor = ArticleExtractor()
