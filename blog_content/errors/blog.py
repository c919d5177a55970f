"""
Blog content error classes.

These map the failure kinds of the content path (malformed input, not
found, upstream failure) onto distinct HTTP outcomes.
"""

from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_502_BAD_GATEWAY,
)

from blog_content.errors.base import BaseAppError, create_exception_handler
from blog_content.monitoring import get_logger

logger = get_logger(__name__)


class BlogError(BaseAppError):
    """Base exception for blog content errors."""


class MalformedInputError(BlogError):
    """Raised when an identifying parameter is missing or invalid."""

    def __init__(self, detail: str = "Invalid request parameters") -> None:
        super().__init__(detail=detail, status_code=HTTP_400_BAD_REQUEST)


class UnsupportedImageTypeError(MalformedInputError):
    """Raised when an uploaded image has a content type outside the allowed set."""

    def __init__(self, content_type: str, allowed_types: list[str]) -> None:
        super().__init__("Invalid image type. Allowed types: JPEG, PNG, GIF, WebP")
        self.content_type = content_type
        self.allowed_types = allowed_types


class InvalidBundleError(MalformedInputError):
    """Raised when an uploaded markdown bundle cannot be accepted."""

    def __init__(self, detail: str = "Invalid bundle archive") -> None:
        super().__init__(detail)


class PostNotFoundError(BlogError):
    """Raised when no post matches, or its markdown body is missing from storage."""

    def __init__(self, detail: str = "Blog post not found") -> None:
        super().__init__(detail=detail, status_code=HTTP_404_NOT_FOUND)


class DuplicateSlugError(BlogError):
    """Raised when a slug is already taken by another version in the same language."""

    def __init__(self, slug: str, language: str) -> None:
        super().__init__(
            detail=f"Slug '{slug}' already exists for language '{language}'",
            status_code=HTTP_409_CONFLICT,
        )


class LanguageVersionExistsError(BlogError):
    """Raised when a post already has a different version in the requested language."""

    def __init__(self, blog_id: str, language: str) -> None:
        super().__init__(
            detail=f"Post '{blog_id}' already has a version for language '{language}'",
            status_code=HTTP_409_CONFLICT,
        )


class UpstreamError(BlogError):
    """Raised when the metadata or blob store fails for reasons other than absence."""

    def __init__(self, detail: str = "Failed to fetch blog content") -> None:
        super().__init__(detail=detail, status_code=HTTP_502_BAD_GATEWAY)


blog_exception_handler = create_exception_handler(logger)
