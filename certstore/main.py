"""Main FastAPI application for the certificate store."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from certstore.api.endpoints import router
from certstore.config import settings
from certstore.exceptions import CertificateServiceError
from certstore.models import MessageResponse
from certstore.services import CertificateRepository, CertificateService, StorageService

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Application lifespan handler."""
    # Startup
    logger.info(f"Starting {settings.service_name} in {settings.environment} mode")
    logger.info(f"Storage backend: {settings.storage_backend}")

    repository = CertificateRepository(
        settings.database_url,
        min_size=settings.database_pool_min_size,
        max_size=settings.database_pool_max_size,
    )
    await repository.connect()
    app.state.certificate_service = CertificateService(StorageService(), repository)

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.service_name}")
    await repository.disconnect()


# Create FastAPI app
app = FastAPI(
    title="Certificate Store",
    description="Stores certificate records and their images",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(CertificateServiceError)
async def service_exception_handler(request: Request, exc: CertificateServiceError):
    """Map service error kinds to status codes."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed requests (e.g. a non-numeric id) are client errors."""
    errors = exc.errors()
    message = errors[0]["msg"] if errors else "Invalid request"
    return JSONResponse(status_code=400, content={"error": message})


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error"}
    )


# Request logging middleware
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests."""
    logger.info(f"{request.method} {request.url.path}")

    try:
        response = await call_next(request)
        logger.info(f"{request.method} {request.url.path} - {response.status_code}")
        return response
    except Exception as e:
        logger.error(f"Request failed: {e}", exc_info=True)
        raise


# Include routers
app.include_router(router)


# Root endpoint
@app.get("/", response_model=MessageResponse)
async def root() -> MessageResponse:
    """Root endpoint."""
    return MessageResponse(message="Selamat Datang Kawan...")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "certstore.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower()
    )
