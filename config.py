import os
from typing import Optional
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """Application settings loaded from environment variables."""

    # Analysis engine: "ai", "heuristic" or "auto"
    ANALYSIS_MODE: str = os.getenv("ANALYSIS_MODE", "auto").lower()

    # Remote analysis gateway
    ANALYSIS_API_KEY: Optional[str] = os.getenv("ANALYSIS_API_KEY") or os.getenv("LOVABLE_API_KEY")
    ANALYSIS_API_URL: str = os.getenv(
        "ANALYSIS_API_URL", "https://ai.gateway.lovable.dev/v1/chat/completions"
    )
    ANALYSIS_MODEL: str = os.getenv("ANALYSIS_MODEL", "google/gemini-2.5-flash")

    # Sentiment model configuration
    SENTIMENT_ENABLED: bool = _env_bool("SENTIMENT_ENABLED", "true")
    SENTIMENT_MODEL_NAME: str = os.getenv(
        "SENTIMENT_MODEL_NAME", "distilbert-base-uncased-finetuned-sst-2-english"
    )
    SENTIMENT_MAX_CHARS: int = int(os.getenv("SENTIMENT_MAX_CHARS", "512"))

    # Request handling
    MAX_TEXT_LENGTH: int = int(os.getenv("MAX_TEXT_LENGTH", "50000"))
    REQUEST_TIMEOUT_SECONDS: int = int(os.getenv("REQUEST_TIMEOUT_SECONDS", "30"))

    # Rate Limiting
    RATE_LIMIT_ENABLED: bool = _env_bool("RATE_LIMIT_ENABLED", "true")
    RATE_LIMIT_PER_MINUTE: int = int(os.getenv("RATE_LIMIT_PER_MINUTE", "10"))

    # CORS Configuration
    ALLOWED_ORIGINS: list = ["*"]
    ALLOWED_HEADERS: list = ["authorization", "x-client-info", "apikey", "content-type"]

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    LOG_FORMAT: str = os.getenv("LOG_FORMAT", "console").lower()

    # Server
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))


# Global settings instance
settings = Settings()
