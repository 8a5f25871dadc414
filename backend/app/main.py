"""
FastAPI application entry point.
Sets up the API with lifespan events for staging directory initialization.
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from app.config import settings
from app.api.router import api_router
from app.middleware.metrics_middleware import MetricsMiddleware
from app.middleware.upload_limit_middleware import UploadLimitMiddleware
from app.storage.exceptions import StorageBackendError
from app.storage.r2_client import get_r2_client
from app.storage.temp_dirs import get_temp_directories
from app.utils.logging import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup/shutdown events.
    - Startup: Create staging directories, sweep leftovers, build the storage client
    - Shutdown: Cleanup (if needed)
    """
    # Configure structured JSON logging
    configure_logging(settings.service_name, settings.log_level)

    # Startup; a staging directory that cannot be created is fatal
    temp_dirs = get_temp_directories()
    temp_dirs.sweep_stale(settings.staging_max_age_seconds)

    r2 = get_r2_client()
    if not r2.is_configured and settings.environment == "production":
        raise RuntimeError("Object storage must be configured in production")

    yield
    # Shutdown (if needed)


# Create FastAPI app
app = FastAPI(
    title="Storage API",
    description="Upload, lookup and deletion of user avatars and tutoring session images",
    version="0.1.0",
    lifespan=lifespan
)

# Oversized uploads are refused before the body is read
app.add_middleware(UploadLimitMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Metrics middleware (must be after CORS to track all requests)
app.add_middleware(MetricsMiddleware)


@app.exception_handler(StorageBackendError)
async def storage_backend_error_handler(request: Request, exc: StorageBackendError):
    """Object store failures outside the upload path surface as 502."""
    logger.error(
        f"Storage backend error during {exc.operation}: {exc}",
        extra={"event": "storage_backend_error", "operation": exc.operation, "path": request.url.path}
    )
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"detail": f"Storage backend error: {exc}"}
    )


# Include API routes
app.include_router(api_router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Storage API",
        "version": "0.1.0",
        "environment": settings.environment
    }


@app.get("/metrics")
async def metrics():
    """Prometheus metrics endpoint."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )
