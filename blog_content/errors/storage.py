"""Blob storage error classes."""

from starlette.status import HTTP_404_NOT_FOUND, HTTP_502_BAD_GATEWAY

from blog_content.errors.base import BaseAppError, create_exception_handler
from blog_content.monitoring import get_logger

logger = get_logger(__name__)


class BlobStoreError(BaseAppError):
    """Raised when the blob store fails (network, permission, quota)."""

    def __init__(self, detail: str = "Blob storage operation failed") -> None:
        super().__init__(detail=detail, status_code=HTTP_502_BAD_GATEWAY)


class BlobNotFoundError(BlobStoreError):
    """Raised when the requested object does not exist in the blob store."""

    def __init__(self, path: str) -> None:
        super().__init__(detail=f"Object not found in storage: {path}")
        self.status_code = HTTP_404_NOT_FOUND
        self.path = path


storage_exception_handler = create_exception_handler(logger)
