from blog_content.schemas.blog import (
    BundlePublishResponse,
    CacheClearResponse,
    ContentResponse,
    DeleteResponse,
    HealthCheckResponse,
    IdentifierKind,
    ImageUploadResponse,
    LanguageVariant,
    LanguageVersionsResponse,
    MetadataResponse,
    PaginationInfo,
    PostListResponse,
    PostRecord,
    PostSummary,
    PublishRequest,
    PublishResponse,
    VerifyPasswordRequest,
    VerifyPasswordResponse,
    Version,
    effective_language,
    new_identity,
    normalize_language,
)
from blog_content.schemas.cache import CacheEntry

__all__ = [
    "BundlePublishResponse",
    "CacheClearResponse",
    "CacheEntry",
    "ContentResponse",
    "DeleteResponse",
    "HealthCheckResponse",
    "IdentifierKind",
    "ImageUploadResponse",
    "LanguageVariant",
    "LanguageVersionsResponse",
    "MetadataResponse",
    "PaginationInfo",
    "PostListResponse",
    "PostRecord",
    "PostSummary",
    "PublishRequest",
    "PublishResponse",
    "VerifyPasswordRequest",
    "VerifyPasswordResponse",
    "Version",
    "effective_language",
    "new_identity",
    "normalize_language",
]
