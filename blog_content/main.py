"""Blog Content Service - Versioned blog content with a local markdown cache."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from blog_content.configs import settings
from blog_content.dependencies import CacheStoreDep
from blog_content.errors import (
    AuthError,
    BlobStoreError,
    BlogError,
    MetadataStoreError,
    auth_exception_handler,
    blog_exception_handler,
    metadata_exception_handler,
    storage_exception_handler,
    validation_exception_handler,
)
from blog_content.managers import limiter, rate_limit_exceeded_handler
from blog_content.middleware import (
    LoggingMiddleware,
    SecurityHeadersMiddleware,
    configure_cors,
    lifespan,
)
from blog_content.routes import blog_router
from blog_content.schemas import HealthCheckResponse
from blog_content.utils.helpers import today_str

app = FastAPI(
    title=settings.APP_NAME,
    description="Blog content resolution, caching and listing API",
    version="1.0.0",
    debug=settings.DEBUG,
    lifespan=lifespan,
    swagger_ui_parameters={
        "docExpansion": "none",
        "operationsSorter": "method",
    },
)

configure_cors(app)

app.add_middleware(LoggingMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(GZipMiddleware, minimum_size=1000)
# Trust forwarded headers from the hosting proxy
app.add_middleware(ProxyHeadersMiddleware, trusted_hosts="*")

app.include_router(blog_router)

errors = [
    (BlogError, blog_exception_handler),
    (AuthError, auth_exception_handler),
    (BlobStoreError, storage_exception_handler),
    (MetadataStoreError, metadata_exception_handler),
    (RateLimitExceeded, rate_limit_exceeded_handler),
    (RequestValidationError, validation_exception_handler),
]

_ = [app.add_exception_handler(exc_type, handler) for exc_type, handler in errors]

app.state.limiter = limiter
limiter: Limiter = app.state.limiter


@app.get(
    "/health",
    tags=["🩺 Health"],
    summary="Health check endpoint",
    response_model=HealthCheckResponse,
    response_class=ORJSONResponse,
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "version": "1.0.0",
                        "status": "ok",
                        "timestamp": "2025-01-01 00:00:00",
                        "cacheEntries": 12,
                        "storageProvider": "local",
                    },
                },
            },
        },
    },
    operation_id="health_check",
)
@limiter.exempt
async def health_check(request: Request, cache: CacheStoreDep) -> HealthCheckResponse:
    """
    Health check endpoint.

    Parameters
    ----------
    request : Request
        Current request context.
    cache : CacheStoreProtocol
        Content cache store.

    Returns
    -------
    HealthCheckResponse
        Service status with the number of cached entries.

    Examples
    --------
    Request
        GET /health
    Response
        200 OK
        {"version": "1.0.0", "status": "ok", "timestamp": "...", "cacheEntries": 12, ...}
    """
    return HealthCheckResponse(
        version=app.version,
        status="ok",
        timestamp=today_str(),
        cache_entries=await cache.entry_count(),
        storage_provider=settings.STORAGE_PROVIDER,
    )


if __name__ == "__main__":
    from uvicorn import run

    run(app, host="127.0.0.1", port=8000, log_level="info")
