"""
Middleware components for the blog content service.

This module contains middleware for security headers, request logging and
CORS handling, plus the lifespan handler that builds the metadata, cache
and blob stores on ``app.state``.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from time import perf_counter
from uuid import uuid4

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from rich.traceback import install
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from blog_content.clients.file_cache import FileCacheStore
from blog_content.configs import settings
from blog_content.monitoring import bind_request_id, clear_context, configure_logging, get_logger
from blog_content.repositories import InMemoryMetadataStore, JsonFileMetadataStore, MetadataStore
from blog_content.services.storage import get_blob_store
from blog_content.utils.helpers import host

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

install()


async def build_metadata_store() -> MetadataStore:
    if settings.METADATA_FILE:
        return await JsonFileMetadataStore.open(settings.METADATA_FILE)
    logger.warning("METADATA_FILE not set, using a non-persistent in-memory catalog")
    return InMemoryMetadataStore()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Manage application startup and shutdown events with store initialization."""
    configure_logging()
    logger.info(f"Starting {app.title}...")

    try:
        app.state.metadata_store = await build_metadata_store()
        app.state.cache_store = FileCacheStore(
            settings.cache_dir,
            validity_seconds=settings.CACHE_VALIDITY_SECONDS,
        )
        app.state.blob_store = get_blob_store()

        logger.info(
            "Services initialized successfully",
            cache_dir=str(settings.cache_dir),
            storage_provider=settings.STORAGE_PROVIDER,
        )
        logger.info("  - API Documentation: http://localhost:8000/docs")
        logger.info("  - Health Check: http://localhost:8000/health")
    except Exception:
        logger.exception("Failed to initialize services")
        raise

    yield

    logger.info(f"Shutting down {app.title}...")
    try:
        await app.state.blob_store.close()
        logger.info("Services cleaned up successfully")
    except Exception:
        logger.exception("Error during service cleanup")


def configure_cors(app: FastAPI) -> None:
    """Configure CORS middleware for the application."""
    allowed_origins: list[str] = [
        "http://localhost:3000",  # Next.js development
        "http://127.0.0.1:3000",
    ]

    if frontend_url := settings.PRODUCTION_FRONTEND_URL:
        allowed_origins.append(frontend_url)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """Bind a request id, then log request summary and timing information."""

        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex
        clear_context()
        bind_request_id(request_id)

        start_time = perf_counter()
        logger.info(f"Request: {request.method} {request.url.path}, from ip: {host(request)}")

        response = await call_next(request)
        duration = perf_counter() - start_time

        logger.info(
            f"Response: {response.status_code} for {request.method} {request.url.path}",
            duration_ms=round(duration * 1000, 2),
        )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """Add security headers to all responses."""

        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response
