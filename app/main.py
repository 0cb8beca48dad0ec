from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from app.routers import match_score

# Import logging and middleware
from app.utils.logging_config import configure_for_environment, get_logger
from app.middleware.error_handlers import (
    ExceptionHandlerMiddleware,
    RequestLoggingMiddleware,
    PerformanceMiddleware,
    validation_exception_handler,
)
from app.models.ai_settings import AppSettings
from app.services.auth import BearerTokenSessionProvider, SessionProvider
from app.services.match_service import MatchScoreService

# Configure logging first
configure_for_environment()
logger = get_logger(__name__)

API_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager"""
    logger.info("Match Score API starting up...")
    if app.state.match_service.ai_enabled:
        logger.info("AI backend configured; rule-based scorer used as fallback")
    else:
        logger.info("AI backend not configured; using rule-based scorer only")
    yield
    logger.info("Match Score API shutting down...")


def create_app(
    settings: AppSettings = None,
    service: MatchScoreService = None,
    session_provider: SessionProvider = None,
) -> FastAPI:
    """Build the API with its collaborators; any of them may be injected"""
    settings = settings or AppSettings.from_env()

    app = FastAPI(title="Match Score API", version=API_VERSION, lifespan=lifespan)
    app.state.settings = settings
    app.state.match_service = service or MatchScoreService.from_settings(settings.llm_settings)
    app.state.session_provider = session_provider or BearerTokenSessionProvider(
        [t.get_secret_value() for t in settings.auth_settings.api_tokens]
    )

    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # Middleware is LIFO: the last one added runs first
    app.add_middleware(PerformanceMiddleware, slow_request_threshold=2.0)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(ExceptionHandlerMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    @app.head("/")
    async def root():
        """Root endpoint - handles both GET and HEAD requests for health checks"""
        logger.debug("Root endpoint accessed")
        return {"message": "Welcome to the Match Score API", "version": API_VERSION, "status": "ok"}

    @app.get("/health")
    @app.head("/health")
    async def health_check():
        """Health check endpoint - handles both GET and HEAD requests"""
        return {"status": "healthy"}

    app.include_router(match_score.router, prefix="/api")

    logger.info("Match Score API initialized successfully")
    return app


app = create_app()
