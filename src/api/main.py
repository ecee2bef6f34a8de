"""
FastAPI Application - Wiki Chatbot

Main entry point for the REST API.
"""

from fastapi import Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, FileResponse
from fastapi.exceptions import RequestValidationError
from contextlib import asynccontextmanager
from dotenv import load_dotenv
import time
import logging
from typing import AsyncGenerator
from pathlib import Path

from .dependencies import get_session_registry, get_settings
from .schemas import ErrorResponse, HealthResponse
from .sessions import SessionRegistry
from .analytics import analytics

load_dotenv()

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Version
VERSION = "0.1.0"

UI_PATH = Path(__file__).parent.parent / "ui" / "templates" / "index.html"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan events.

    Runs on startup and shutdown.
    """
    settings = get_settings()

    logger.info("=" * 60)
    logger.info(f"{settings.company_name} Wiki Chatbot API v{VERSION}")
    logger.info("=" * 60)

    # Test LLM configuration
    try:
        from ..agent.llm_config import get_llm_client

        llm_client = get_llm_client()
        if llm_client.is_configured:
            logger.info(f"✅ LLM configured: {llm_client.model}")
        else:
            logger.warning("⚠️  LLM API key not configured")
    except Exception as e:
        logger.warning(f"⚠️  LLM configuration issue: {e}")

    logger.info(f"🚀 API started on port {settings.port}")
    logger.info("Endpoints:")
    logger.info("  GET    /                           chat UI")
    logger.info("  POST   /ask                        ask a question")
    logger.info("  GET    /sessions                   list active sessions")
    logger.info("  GET    /sessions/{id}/history      conversation history")
    logger.info("  DELETE /sessions/{id}              forget a session")
    logger.info("  POST   /api/v1/search              raw semantic search")
    logger.info("  GET    /api/v1/analytics           usage statistics")
    logger.info("  GET    /health                     health check")
    logger.info("=" * 60)

    yield

    # Shutdown
    logger.info("Shutting down API...")


# Create FastAPI app
app = FastAPI(
    title="Wiki Chatbot API",
    description="""
    Ask questions about the company wiki in plain English.

    Answers are generated from the most relevant wiki passages and list the
    documents they came from.

    ## Features
    - Retrieval-augmented answers with source attribution
    - Per-session conversation memory (last 10 messages)
    - Raw semantic search for checking retrieval

    ## Example Questions
    - "What are the company holidays?"
    - "How does the integration budget work?"
    - "What tools does the company use for development?"
    """,
    version=VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request logging middleware
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all HTTP requests"""
    start_time = time.time()

    logger.info(f"→ {request.method} {request.url.path}")

    response = await call_next(request)

    duration = (time.time() - start_time) * 1000
    logger.info(f"← {response.status_code} ({duration:.0f}ms)")

    return response


# Exception handlers
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request validation errors"""
    errors = exc.errors()
    logger.warning(f"Validation error: {errors}")

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=ErrorResponse(
            detail=f"Validation error: {errors[0]['msg']}",
            error_code="VALIDATION_ERROR"
        ).model_dump(mode='json')
    )


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    """Handle ValueError exceptions"""
    logger.error(f"ValueError: {exc}")

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ErrorResponse(
            detail=str(exc),
            error_code="VALUE_ERROR"
        ).model_dump(mode='json')
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle all other exceptions"""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(
            detail="Internal server error. Please try again later.",
            error_code="INTERNAL_ERROR"
        ).model_dump(mode='json')
    )


# Root endpoint - serve web UI
@app.get("/", tags=["Root"])
async def root():
    """Serve the chat UI"""
    if UI_PATH.exists():
        return FileResponse(UI_PATH)
    else:
        # Fallback to API info if UI not found
        return {
            "name": "Wiki Chatbot API",
            "version": VERSION,
            "docs": "/docs",
            "health": "/health",
            "ask": "/ask"
        }


# Health check endpoint
@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check(registry: SessionRegistry = Depends(get_session_registry)):
    """
    Health check endpoint.

    Always healthy while the process serves requests.
    """
    return HealthResponse(
        status="ok",
        message="API is operational",
        activeSessions=len(registry),
        version=VERSION
    )


@app.get("/api/v1/analytics", tags=["Analytics"])
async def get_analytics():
    """
    Get question analytics.

    Returns statistics about API usage, answer latency, and errors.
    """
    return analytics.get_stats()


# Import routers
from .routers import chat, sessions, search

app.include_router(chat.router, tags=["Chat"])
app.include_router(sessions.router, tags=["Sessions"])
app.include_router(search.router, prefix="/api/v1", tags=["Search"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.api.main:app",
        host="0.0.0.0",
        port=get_settings().port,
        reload=True,
        log_level="info"
    )
