"""Search service main application."""

import time
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import structlog

from .api.routes import router as api_router
from .orchestrator.search_manager import SearchManager
from .runtime.metrics import SERVICE_NAME, get_metrics_collector
from libs.common.config import SearchConfig
from libs.common.errors import UpstreamError, ValidationError
from libs.common.logging import configure_logging

logger = structlog.get_logger("search_service")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    config = app.state.config or SearchConfig()
    configure_logging(SERVICE_NAME, config.log_level, config.log_format, env=config.env)

    logger.info("Starting search service")

    owns_manager = getattr(app.state, "search_manager", None) is None
    if owns_manager:
        app.state.search_manager = SearchManager.from_config(
            config,
            metrics_collector=app.state.metrics_collector,
        )

    logger.info("Search service started successfully")

    yield

    # Shutdown
    logger.info("Shutting down search service")
    if owns_manager:
        await app.state.search_manager.cleanup()
    logger.info("Search service shutdown complete")


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Blank or missing query: 400 before any outbound call was made."""
    logger.info("Rejected search request", path=request.url.path, reason=exc.message)
    return JSONResponse(
        status_code=400,
        content={"error": exc.label, "message": exc.message}
    )


async def upstream_error_handler(request: Request, exc: UpstreamError) -> JSONResponse:
    """External dependency failed: 500 with the stage and cause, no traceback."""
    logger.error("Search failed", path=request.url.path, stage=exc.stage.value, error=exc.message)
    metrics_collector = getattr(request.app.state, "metrics_collector", None)
    if metrics_collector is not None:
        metrics_collector.record_upstream_failure(exc.stage.value)
    return JSONResponse(
        status_code=500,
        content={"error": exc.label, "message": str(exc)}
    )


def create_app(
    search_manager: Optional[SearchManager] = None,
    config: Optional[SearchConfig] = None,
) -> FastAPI:
    """Build the FastAPI application.

    Passing ``search_manager`` skips adapter wiring at startup; the caller
    then owns its cleanup.
    """
    app = FastAPI(
        title="Search Service",
        description="Lexical and semantic catalog search",
        version="0.1.0",
        lifespan=lifespan
    )
    app.state.config = config
    app.state.search_manager = search_manager
    app.state.metrics_collector = get_metrics_collector(SERVICE_NAME)

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(UpstreamError, upstream_error_handler)

    # Include API routes; /api/search is kept for existing clients
    app.include_router(api_router)
    app.include_router(api_router, prefix="/api")

    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next):
        """Add processing time header to responses."""
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = str(process_time)
        return response

    @app.middleware("http")
    async def metrics_middleware(request: Request, call_next):
        """Collect metrics for HTTP requests."""
        start_time = time.time()

        try:
            response = await call_next(request)
            status_code = response.status_code
        except Exception as e:
            logger.error("Unhandled request error", path=request.url.path, error=str(e))
            status_code = 500
            response = JSONResponse(
                status_code=500,
                content={"error": "Internal server error", "message": str(e)}
            )

        duration = time.time() - start_time
        app.state.metrics_collector.record_http_request(
            method=request.method,
            endpoint=request.url.path,
            status=status_code,
            duration=duration
        )

        return response

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        manager = app.state.search_manager
        try:
            healthy = manager is not None and await manager.health_check()
        except Exception as e:
            logger.error("Health check failed", error=str(e))
            return JSONResponse(
                status_code=503,
                content={"status": "unhealthy", "service": SERVICE_NAME, "error": str(e)}
            )

        if healthy:
            return {"status": "healthy", "service": SERVICE_NAME}
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "service": SERVICE_NAME}
        )

    @app.get("/metrics")
    async def metrics():
        """Prometheus metrics endpoint."""
        return Response(
            content=app.state.metrics_collector.get_metrics(),
            media_type="text/plain"
        )

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "service": SERVICE_NAME,
            "version": "0.1.0",
            "status": "running",
            "endpoints": {
                "health": "/health",
                "metrics": "/metrics",
                "search": "/search"
            }
        }

    return app


app = create_app()


if __name__ == "__main__":
    config = SearchConfig()
    uvicorn.run(
        "service_search.app.main:app",
        host="0.0.0.0",
        port=config.port,
        log_level=config.log_level.lower()
    )
