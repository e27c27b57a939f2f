import time
from contextlib import asynccontextmanager
from fastapi import FastAPI, Depends, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn

from analysis import ArticleAnalysisService, analysis_service
from config import settings
from errors import AnalysisError, RateLimited
from logging_config import get_logger
from model import sentiment_classifier
from schemas import AnalysisRequest, AnalysisResult, ErrorResponse, HealthResponse

log = get_logger("api")

# Rate limiter setup
limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Missing or invalid input"},
    402: {"model": ErrorResponse, "description": "AI credits exhausted"},
    429: {"model": ErrorResponse, "description": "Rate limit exceeded"},
    500: {"model": ErrorResponse, "description": "Analysis failed or AI service misconfigured"},
}


def get_analysis_service() -> ArticleAnalysisService:
    return analysis_service


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


# Application lifespan
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown events."""
    log.info("🚀 Starting Article Credibility Backend...")
    log.info(f"Analysis mode: {analysis_service.mode} (engine: {analysis_service.engine})")

    if sentiment_classifier.enabled:
        log.info("🔄 Preloading sentiment model...")
        await run_in_threadpool(sentiment_classifier.load_model)

    log.info("✅ Backend started successfully!")

    yield

    log.info("🔄 Shutting down...")
    await analysis_service.close()
    log.info("✅ Backend shutdown complete")


# Create FastAPI app
app = FastAPI(
    title="Article Credibility API",
    description="Heuristic and AI-assisted credibility scoring for news articles",
    version="1.0.0",
    lifespan=lifespan,
)

app.state.limiter = limiter

# Add middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=settings.ALLOWED_HEADERS,
)


@app.exception_handler(AnalysisError)
async def analysis_error_handler(request: Request, exc: AnalysisError):
    return error_response(exc.status_code, exc.message)


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    log.warning(f"Rate limit exceeded for {get_remote_address(request)}: {exc.detail}")
    return error_response(status.HTTP_429_TOO_MANY_REQUESTS, RateLimited.default_message)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else first.get("msg", "Invalid request")
    else:
        message = "Invalid request"
    return error_response(status.HTTP_400_BAD_REQUEST, message)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, str(exc.detail))


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for unexpected errors."""
    log.exception(f"Unexpected error handling {request.url.path}: {exc}")
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to analyze article")


# Health check endpoint
@app.get("/health", response_model=HealthResponse, tags=["System"])
async def health_check(service: ArticleAnalysisService = Depends(get_analysis_service)):
    """Health check endpoint to verify service status."""
    model_info = sentiment_classifier.get_model_info()
    if not model_info["enabled"]:
        sentiment_status = "disabled"
    elif model_info["model_loaded"]:
        sentiment_status = "healthy"
    else:
        sentiment_status = "unavailable"

    return HealthResponse(
        status="healthy",
        timestamp=time.strftime("%Y-%m-%d %H:%M:%S UTC", time.gmtime()),
        services={
            "analysis_mode": service.mode,
            "analysis_engine": service.engine,
            "ai_gateway": "configured" if service.gateway.configured else "not_configured",
            "sentiment_model": sentiment_status,
        },
    )


# Article analysis endpoint
@app.post(
    "/analyze-article",
    response_model=AnalysisResult,
    responses=ERROR_RESPONSES,
    tags=["Analysis"],
)
@limiter.limit(f"{settings.RATE_LIMIT_PER_MINUTE}/minute")
async def analyze_article(
    request: Request,
    analysis_request: AnalysisRequest,
    service: ArticleAnalysisService = Depends(get_analysis_service),
):
    """
    Analyze an article for credibility.

    Uses the configured engine and returns a credibility score,
    determination, summary and explanation.
    """
    return await service.analyze(analysis_request)


# Heuristic-only analysis endpoint
@app.post(
    "/analyze/heuristic",
    response_model=AnalysisResult,
    responses=ERROR_RESPONSES,
    tags=["Analysis"],
)
@limiter.limit(f"{settings.RATE_LIMIT_PER_MINUTE}/minute")
async def analyze_heuristic(
    request: Request,
    analysis_request: AnalysisRequest,
    service: ArticleAnalysisService = Depends(get_analysis_service),
):
    """Analyze an article with the rule-based scorer only."""
    return await service.analyze_heuristic(analysis_request)


# Model info endpoint
@app.get("/model/info", tags=["System"])
async def get_model_info():
    """Get information about the sentiment model."""
    return sentiment_classifier.get_model_info()


# Root endpoint
@app.get("/", tags=["System"])
async def root():
    """Root endpoint with API information."""
    return {
        "message": "Article Credibility API",
        "version": "1.0.0",
        "status": "running",
        "endpoints": {
            "analyze": "/analyze-article",
            "heuristic": "/analyze/heuristic",
            "health": "/health",
            "model_info": "/model/info",
            "docs": "/docs",
        },
    }


if __name__ == "__main__":
    uvicorn.run(
        "app:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=False,
        log_level=settings.LOG_LEVEL.lower(),
    )
