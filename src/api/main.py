"""
FastAPI main application.
"""
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from config import settings
from src.utils import get_logger, registry
from src.models.schemas import HealthResponse, ErrorResponse, ErrorDetail
from src.api.middleware import LoggingMiddleware
from src.api.routes import studio
from studio_agents import __version__
from studio_agents.agents import StudioPipeline
from studio_agents.core.exceptions import StudioError
from studio_agents.core.gemini_client import GeminiClient

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager: one GeminiClient shared by every request."""
    logger.info(
        "Starting Studio Agents API",
        environment=settings.environment,
        version=__version__,
    )

    client = GeminiClient()
    app.state.gemini_client = client
    app.state.pipeline = StudioPipeline(client)

    if not settings.gemini_api_key:
        logger.warning("GEMINI_API_KEY is not set; generation requests will fail")

    yield

    await client.close()
    logger.info("Shutting down Studio Agents API")


# Create FastAPI app
app = FastAPI(
    title="Studio Agents API",
    description="Planner and Writer prompt orchestration with parallel Gemini image generation",
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Request/response logging middleware with correlation ID tracking
app.add_middleware(LoggingMiddleware)


# Exception handlers
@app.exception_handler(StudioError)
async def studio_exception_handler(request: Request, exc: StudioError) -> JSONResponse:
    """Render pipeline errors with their code, message and HTTP status."""
    logger.warning(
        "Studio error",
        error_code=exc.error_code,
        err_msg=exc.message,
        path=request.url.path,
    )

    error_response = ErrorResponse(
        error=ErrorDetail(
            code=exc.error_code,
            message=exc.message,
            details=exc.details or None,
        ),
        request_id=getattr(request.state, "request_id", None),
    )

    return JSONResponse(
        status_code=exc.http_status,
        content=error_response.model_dump(mode="json"),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global exception handler."""
    logger.error(
        "Unhandled exception",
        error=str(exc),
        path=request.url.path,
        exc_info=True,
    )

    error_response = ErrorResponse(
        error=ErrorDetail(
            code="INTERNAL_ERROR",
            message="An internal error occurred",
            details={"type": type(exc).__name__} if settings.environment != "production" else None,
        )
    )

    return JSONResponse(
        status_code=500,
        content=error_response.model_dump(mode="json"),
    )


# Health check endpoint
@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check endpoint with configuration checks."""
    from src.utils.health_check import perform_health_checks

    checks = await perform_health_checks()

    services = {
        service: result.get("status", False)
        for service, result in checks.items()
    }

    status = "healthy" if all(services.values()) else "degraded"

    return HealthResponse(
        status=status,
        version=__version__,
        services=services,
    )


# Metrics endpoint
@app.get("/metrics")
async def metrics() -> Response:
    """Prometheus metrics endpoint."""
    if not settings.enable_metrics:
        return JSONResponse(
            status_code=404,
            content={"error": "Metrics are disabled"},
        )

    data = generate_latest(registry)
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)


# Include routers
app.include_router(studio.router, prefix="/studio", tags=["Studio"])


# Root endpoint
@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "service": "Studio Agents API",
        "version": __version__,
        "status": "running",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.api.main:app",
        host=settings.server_host,
        port=settings.server_port,
        reload=settings.environment == "development",
    )
