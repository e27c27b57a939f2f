import threading
from typing import Dict, Optional
from transformers import pipeline
import torch

from config import settings
from errors import ClassifierUnavailable
from logging_config import get_logger
from schemas import SentimentResult

log = get_logger("sentiment")


class SentimentClassifier:
    """Sentiment classification backed by a HuggingFace pipeline.

    The pipeline is loaded on first use and kept for the life of the process.
    A failed load is remembered so later calls fail fast with
    ClassifierUnavailable instead of retrying the download.
    """

    def __init__(self, model_name: str = None, max_chars: int = None, enabled: bool = None):
        self.model_name = model_name or settings.SENTIMENT_MODEL_NAME
        self.max_chars = max_chars or settings.SENTIMENT_MAX_CHARS
        self.enabled = settings.SENTIMENT_ENABLED if enabled is None else enabled
        self.pipeline = None
        self._model_loaded = False
        self._load_error: Optional[str] = None
        self._loading_lock = threading.Lock()

    @property
    def device(self) -> int:
        return 0 if torch.cuda.is_available() else -1

    def load_model(self) -> bool:
        """Load the pipeline once. Returns whether it is usable."""
        if self._model_loaded or self._load_error or not self.enabled:
            return self._model_loaded

        with self._loading_lock:
            if self._model_loaded or self._load_error:  # Double-check pattern
                return self._model_loaded

            try:
                log.info(f"🔄 Loading sentiment model: {self.model_name}")
                self.pipeline = pipeline(
                    "sentiment-analysis",
                    model=self.model_name,
                    device=self.device,
                )
                self._model_loaded = True
                log.info("✅ Sentiment model loaded successfully")
            except Exception as e:
                self._load_error = str(e)
                log.warning(f"❌ Sentiment model loading failed: {e}")

        return self._model_loaded

    def classify(self, text: str) -> SentimentResult:
        """Classify the leading ``max_chars`` characters of ``text``."""
        if not self.enabled:
            raise ClassifierUnavailable("Sentiment analysis is disabled")
        if not self.load_model():
            raise ClassifierUnavailable(f"Sentiment model unavailable: {self._load_error}")

        try:
            output = self.pipeline(text[: self.max_chars], truncation=True)[0]
            return SentimentResult(label=output["label"].upper(), score=float(output["score"]))
        except Exception as e:
            raise ClassifierUnavailable(f"Sentiment classification failed: {e}") from e

    def get_model_info(self) -> Dict:
        """Get information about the sentiment model."""
        return {
            "model_name": self.model_name,
            "enabled": self.enabled,
            "model_loaded": self._model_loaded,
            "load_error": self._load_error,
            "device": "cuda" if torch.cuda.is_available() else "cpu",
            "max_chars": self.max_chars,
        }


# Process-wide classifier, owned by the app lifespan
sentiment_classifier = SentimentClassifier()
