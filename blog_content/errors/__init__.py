from blog_content.errors.auth import (
    AuthError,
    InvalidCredentialError,
    ServerConfigurationError,
    auth_exception_handler,
)
from blog_content.errors.base import BaseAppError, create_exception_handler
from blog_content.errors.blog import (
    BlogError,
    DuplicateSlugError,
    InvalidBundleError,
    LanguageVersionExistsError,
    MalformedInputError,
    PostNotFoundError,
    UnsupportedImageTypeError,
    UpstreamError,
    blog_exception_handler,
)
from blog_content.errors.metadata import (
    MetadataFileError,
    MetadataStoreError,
    metadata_exception_handler,
)
from blog_content.errors.storage import (
    BlobNotFoundError,
    BlobStoreError,
    storage_exception_handler,
)
from blog_content.errors.validation import validation_exception_handler

__all__ = [
    "AuthError",
    "BaseAppError",
    "BlobNotFoundError",
    "BlobStoreError",
    "BlogError",
    "DuplicateSlugError",
    "InvalidBundleError",
    "InvalidCredentialError",
    "LanguageVersionExistsError",
    "MalformedInputError",
    "MetadataFileError",
    "MetadataStoreError",
    "PostNotFoundError",
    "ServerConfigurationError",
    "UnsupportedImageTypeError",
    "UpstreamError",
    "auth_exception_handler",
    "blog_exception_handler",
    "create_exception_handler",
    "metadata_exception_handler",
    "storage_exception_handler",
    "validation_exception_handler",
]
