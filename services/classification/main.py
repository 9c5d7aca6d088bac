"""
Classification Service - Main Application
=========================================

FastAPI application for rule-based compliance classification of
processing activities, impact assessments and AI systems.

Version: 0.1.0
"""

import uuid
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shared.config import settings
from shared.llm import close_llm_provider, get_llm_provider
from shared.logging import get_logger, request_logging_context, setup_logging
from shared.models import ErrorResponse, HealthResponse, ValidationIssue

from services.classification.domains import DOMAINS
from services.classification.routes import classify, summary
from services.classification.services import (
    ClassificationError,
    EmptyReportSetError,
    ProfileValidationError,
    UnknownDomainError,
)

# Setup logging
setup_logging(
    log_level=settings.log_level.value,
    json_logs=settings.is_production,
    service_name=settings.service_name,
    version=settings.service_version,
)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> Any:
    """Application lifespan manager."""
    logger.info(
        "classification_starting",
        environment=settings.environment.value,
        port=settings.service_port,
        domains=sorted(DOMAINS),
        enhancement=settings.enhancement.enabled,
    )

    yield

    # Shutdown
    logger.info("classification_shutting_down")
    await close_llm_provider()


# Create FastAPI application
app = FastAPI(
    title="Compliance Classification Service",
    description="Rule-based GDPR and EU AI Act compliance classification",
    version=settings.service_version,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors.origins_list,
    allow_credentials=settings.cors.allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context(request: Request, call_next: Any) -> Any:
    """Bind a request id to all logs emitted while handling the request."""
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    with request_logging_context(request_id=request_id, path=request.url.path):
        response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


# ============================================================================
# Health Check Endpoints
# ============================================================================


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check() -> HealthResponse:
    """
    Service health check.

    Classification itself has no dependencies. The LLM provider is only
    checked when report enhancement is enabled.
    """
    components: dict[str, dict[str, Any]] = {
        "classifier": {"status": "healthy", "domains": sorted(DOMAINS)},
    }

    if settings.enhancement.enabled:
        try:
            components["llm"] = await get_llm_provider().health_check()
        except Exception as e:
            logger.warning("llm_health_check_failed", error=str(e))
            components["llm"] = {"status": "unhealthy", "error": str(e)}

    return HealthResponse.from_components(settings.service_name, settings.service_version, components)


@app.get("/", tags=["Health"])
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "service": "Compliance Classification Service",
        "version": settings.service_version,
        "docs": "/docs",
    }


# ============================================================================
# Include Routers
# ============================================================================

app.include_router(
    classify.router,
    prefix="/classify",
    tags=["Classification"],
)

app.include_router(
    summary.router,
    prefix="/summary",
    tags=["Summary"],
)


# ============================================================================
# Error Handlers
# ============================================================================


def _envelope(body: ErrorResponse) -> JSONResponse:
    return JSONResponse(status_code=body.status_code, content=body.model_dump(mode="json"))


def _error_response(status_code: int, error: Any) -> JSONResponse:
    return _envelope(ErrorResponse(error=error, status_code=status_code))


@app.exception_handler(ClassificationError)
async def classification_exception_handler(request: Request, exc: ClassificationError) -> JSONResponse:
    """Map engine errors to HTTP status codes."""
    if isinstance(exc, ProfileValidationError):
        logger.info("profile_rejected", path=request.url.path, errors=len(exc.errors))
        return _envelope(ErrorResponse.invalid(str(exc), ValidationIssue.from_errors(exc.errors)))
    if isinstance(exc, UnknownDomainError):
        return _error_response(status.HTTP_404_NOT_FOUND, str(exc))
    if isinstance(exc, EmptyReportSetError):
        return _error_response(status.HTTP_422_UNPROCESSABLE_ENTITY, str(exc))

    logger.error(
        "classification_failed",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
    )
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Classification failed")


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle request body validation errors."""
    logger.info("request_rejected", path=request.url.path, errors=len(exc.errors()))
    return _envelope(ErrorResponse.invalid("Invalid request", ValidationIssue.from_errors(exc.errors())))


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions."""
    logger.warning(
        "http_exception",
        status_code=exc.status_code,
        detail=exc.detail,
        path=request.url.path,
    )
    return _error_response(exc.status_code, exc.detail)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.error(
        "unhandled_exception",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
    )
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


# ============================================================================
# Run with Uvicorn
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "services.classification.main:app",
        host="0.0.0.0",
        port=settings.service_port,
        reload=settings.debug,
        log_level=settings.log_level.value.lower(),
    )
