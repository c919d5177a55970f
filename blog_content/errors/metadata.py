"""Metadata store error classes."""

from pathlib import Path

from starlette.status import HTTP_502_BAD_GATEWAY

from blog_content.errors.base import BaseAppError, create_exception_handler
from blog_content.monitoring import get_logger

logger = get_logger(__name__)


class MetadataStoreError(BaseAppError):
    """Raised when the post catalog cannot be read or updated."""

    def __init__(self, detail: str = "Metadata store operation failed") -> None:
        super().__init__(detail=detail, status_code=HTTP_502_BAD_GATEWAY)


class MetadataFileError(MetadataStoreError):
    """Raised when the metadata document cannot be read or written."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(detail=f"Metadata file error ({path.name}): {reason}")


metadata_exception_handler = create_exception_handler(logger)
