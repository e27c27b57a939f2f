from fastapi import status


class AnalysisError(Exception):
    """Base class for failures reported back to the caller."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Failed to analyze article"

    def __init__(self, message: str = None, status_code: int = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class InvalidInput(AnalysisError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Either articleText or articleUrl is required"


class ClassifierUnavailable(AnalysisError):
    """The sentiment classifier could not produce a result.

    The scorer recovers from this by skipping the sentiment check.
    """

    default_message = "Sentiment classifier unavailable"


class ArticleFetchError(AnalysisError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Could not retrieve article from URL"


class BackendError(AnalysisError):
    """Failure in the remote analysis gateway."""


class BackendNotConfigured(BackendError):
    default_message = "AI service not configured"


class RateLimited(BackendError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    default_message = "Rate limit exceeded. Please try again later."


class QuotaExhausted(BackendError):
    status_code = status.HTTP_402_PAYMENT_REQUIRED
    default_message = "AI credits exhausted. Please contact support."


class UpstreamError(BackendError):
    default_message = "Failed to analyze article"


class MalformedUpstreamResponse(BackendError):
    default_message = "Invalid AI response format"
