"""
Blog schemas.

A post (``PostRecord``) is identified by an immutable ``blog_id`` and groups
one ``Version`` per language. Versions carry their own ``version_id`` and a
slug that is unique within the version's language. Response models use
camelCase aliases to match what the frontend consumes.
"""

from datetime import datetime
from enum import StrEnum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator

from blog_content.configs.settings import PRIMARY_LANGUAGE, SUPPORTED_LANGUAGES
from blog_content.utils.helpers import iso_utc, slugify, utc_now


def new_identity() -> str:
    """Generate an opaque identity for a post or version."""
    return str(uuid4())


def normalize_language(language: str | None) -> str | None:
    """
    Return ``language`` when it is a member of the closed language set.

    Unknown or empty hints yield None so callers fall back to unscoped lookups.

    Examples
    --------
    >>> normalize_language("EN")
    'en'
    >>> normalize_language("fr") is None
    True
    """
    if not language:
        return None
    candidate = language.strip().lower()
    return candidate if candidate in SUPPORTED_LANGUAGES else None


def effective_language(language: str | None) -> str:
    """Language tag of a version, with absence meaning the primary language."""
    return language or PRIMARY_LANGUAGE


class IdentifierKind(StrEnum):
    """Identifier forms accepted by identity resolution, in lookup order."""

    POST_ID = "post_id"
    VERSION_ID = "version_id"
    SLUG = "slug"


class PostRecord(BaseModel):
    """Main post document shared by all language versions."""

    blog_id: str
    hashtag_ids: list[str] = Field(default_factory=list)
    version_ids: dict[str, str] = Field(
        default_factory=dict,
        description="Version id per language tag",
    )


class Version(BaseModel):
    """One language rendition of a post."""

    model_config = ConfigDict(frozen=True)

    version_id: str = Field(default_factory=new_identity)
    blog_id: str
    language: str | None = None
    slug: str
    title: str
    description: str = ""
    thumbnail: str = ""
    created_at: datetime = Field(default_factory=utc_now)
    modified_at: datetime = Field(default_factory=utc_now)
    publish_date: datetime | None = None
    category: str | None = None
    hashtag_ids: list[str] = Field(
        default_factory=list,
        description="Joined from the owning post",
    )

    @property
    def effective_language(self) -> str:
        return effective_language(self.language)

    @property
    def listing_date(self) -> datetime:
        """Date shown in listings: publish date when set, else creation time."""
        return self.publish_date or self.created_at


class ContentResponse(BaseModel):
    """Markdown body of a post and whether it came from the local cache."""

    content: str
    cached: bool


class MetadataResponse(BaseModel):
    """Version metadata with ISO-8601 timestamps."""

    model_config = ConfigDict(populate_by_name=True)

    blog_id: str = Field(alias="blogId")
    uuid: str = Field(description="Version id (kept for older clients)")
    version_id: str = Field(alias="versionId")
    title: str
    description: str
    thumbnail: str
    slug: str
    created_at: str = Field(alias="createdAt")
    modified_at: str = Field(alias="modifiedAt")
    publish_date: str | None = Field(default=None, alias="publishDate")
    category: str | None = None
    hashtag_ids: list[str] = Field(default_factory=list, alias="hashtagIds")
    language: str

    @classmethod
    def from_version(cls, version: Version) -> "MetadataResponse":
        return cls(
            blog_id=version.blog_id,
            uuid=version.version_id,
            version_id=version.version_id,
            title=version.title,
            description=version.description,
            thumbnail=version.thumbnail,
            slug=version.slug,
            created_at=iso_utc(version.created_at),
            modified_at=iso_utc(version.modified_at),
            publish_date=iso_utc(version.publish_date) if version.publish_date else None,
            category=version.category,
            hashtag_ids=version.hashtag_ids,
            language=version.effective_language,
        )


class PostSummary(BaseModel):
    """Listing entry for a single version."""

    model_config = ConfigDict(populate_by_name=True)

    slug: str
    title: str
    excerpt: str
    date: str
    image: str
    blog_id: str = Field(alias="blogId")
    version_id: str = Field(alias="versionId")
    category: str | None = None
    hashtag_ids: list[str] = Field(default_factory=list, alias="hashtagIds")
    language: str

    @classmethod
    def from_version(cls, version: Version) -> "PostSummary":
        return cls(
            slug=version.slug,
            title=version.title,
            excerpt=version.description,
            date=version.listing_date.date().isoformat(),
            image=version.thumbnail,
            blog_id=version.blog_id,
            version_id=version.version_id,
            category=version.category,
            hashtag_ids=version.hashtag_ids,
            language=version.effective_language,
        )


class PaginationInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    current_page: int = Field(alias="currentPage")
    total_pages: int = Field(alias="totalPages")
    total_items: int = Field(alias="totalItems")
    has_more: bool = Field(alias="hasMore")
    limit: int


class PostListResponse(BaseModel):
    posts: list[PostSummary]
    pagination: PaginationInfo


class LanguageVariant(BaseModel):
    language: str
    slug: str
    title: str


class LanguageVersionsResponse(BaseModel):
    """Language variants available for a post."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    blog_id: str = Field(alias="blogId")
    has_vi: bool = Field(alias="hasVi")
    has_en: bool = Field(alias="hasEn")
    versions: list[LanguageVariant]


class PublishRequest(BaseModel):
    """Create or update a language version of a post."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1, max_length=200)
    slug: str = Field(
        default="",
        max_length=200,
        description="URL slug (generated from the title when omitted)",
    )
    description: str = Field(default="", max_length=500)
    thumbnail: str = ""
    content: str = Field(..., min_length=1, description="Markdown body")
    language: str = PRIMARY_LANGUAGE
    blog_id: str | None = Field(
        default=None,
        alias="blogId",
        description="Existing post to attach this language version to",
    )
    version_id: str | None = Field(
        default=None,
        alias="versionId",
        description="Existing version to update",
    )
    category: str | None = None
    publish_date: datetime | None = Field(default=None, alias="publishDate")
    hashtag_ids: list[str] | None = Field(
        default=None,
        alias="hashtagIds",
        description="Replaces the post's hashtags when provided",
    )

    @model_validator(mode="after")
    def check_slug_and_language(self) -> "PublishRequest":
        language = normalize_language(self.language)
        if language is None:
            mssg = f"Unsupported language: {self.language}"
            raise ValueError(mssg)
        self.language = language

        self.slug = slugify(self.slug or self.title)
        if not self.slug:
            mssg = "Could not generate valid slug from title"
            raise ValueError(mssg)
        return self


class PublishResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    blog_id: str = Field(alias="blogId")
    version_id: str = Field(alias="versionId")
    slug: str
    language: str
    url: str


class BundlePublishResponse(PublishResponse):
    extracted_images: int = Field(default=0, alias="extractedImages")
    thumbnail: str = ""


class DeleteResponse(BaseModel):
    success: bool = True
    message: str = "Blog post deleted successfully"


class VerifyPasswordRequest(BaseModel):
    password: str = Field(..., min_length=1)


class VerifyPasswordResponse(BaseModel):
    success: bool = True


class ImageUploadResponse(BaseModel):
    success: bool = True
    path: str
    url: str


class CacheClearResponse(BaseModel):
    status: str = "success"
    message: str = "All cached blog content cleared"


class HealthCheckResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    version: str
    status: str
    timestamp: str
    cache_entries: int = Field(alias="cacheEntries")
    storage_provider: str = Field(alias="storageProvider")
