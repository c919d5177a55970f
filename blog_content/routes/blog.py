"""
Blog Routes.

Serves markdown bodies, metadata and paginated listings to readers, and
the secret-protected endpoints that publish, delete and upload content.

Summary
-------
Endpoints include:
  - Get content by slug (cached)
  - Get metadata by slug
  - List posts (with language and hashtag filters)
  - List language versions of a post
  - Delete post
  - Publish a language version
  - Publish a markdown bundle (.md or .zip with images)
  - Upload image
  - Verify upload password
  - Clear content cache

Dependencies
------------
  - `ContentServiceDep`: Content service wired to the stores on `app.state`.
  - `require_upload_secret`: Checks the `X-Upload-Password` header.

Rate Limiting
-------------
All endpoints define explicit limits and include `429` response examples. Tiered
limits apply when `X-API-Key` is present.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, File, Form, Query, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from pydantic import ValidationError
from starlette.status import HTTP_201_CREATED

from blog_content.auth import get_settings, require_upload_secret, verify_upload_secret
from blog_content.configs.settings import (
    DEFAULT_PAGE_SIZE,
    MAX_BUNDLE_SIZE,
    MAX_PAGE_SIZE,
    Settings,
)
from blog_content.dependencies import ContentServiceDep
from blog_content.errors.blog import MalformedInputError
from blog_content.managers import limiter
from blog_content.monitoring import get_logger
from blog_content.repositories.resolver import MetadataResolver
from blog_content.schemas import (
    BundlePublishResponse,
    CacheClearResponse,
    ContentResponse,
    DeleteResponse,
    ImageUploadResponse,
    LanguageVariant,
    LanguageVersionsResponse,
    MetadataResponse,
    PaginationInfo,
    PostListResponse,
    PostSummary,
    PublishRequest,
    PublishResponse,
    VerifyPasswordRequest,
    VerifyPasswordResponse,
)
from blog_content.services.bundle import Bundle, read_bundle
from blog_content.services.content import ImageFile
from blog_content.utils.helpers import host

router = APIRouter(prefix="/api/blog", tags=["📝 Blog"])

logger = get_logger(__name__)

RATE_LIMIT_RESPONSE = {
    "description": "Rate limit exceeded",
    "content": {"application/json": {"example": {"detail": "Rate limit exceeded"}}},
}
NOT_FOUND_RESPONSE = {
    "description": "Not found",
    "content": {"application/json": {"example": {"detail": "Blog post not found"}}},
}
UNAUTHORIZED_RESPONSE = {
    "description": "Missing or invalid upload password",
    "content": {"application/json": {"example": {"detail": "Invalid password"}}},
}


def parse_hashtags(value: str | None) -> list[str]:
    """
    Split a comma-separated hashtag query value.

    Examples
    --------
    >>> parse_hashtags(" a, ,b ")
    ['a', 'b']
    """
    if not value:
        return []
    return [tag.strip() for tag in value.split(",") if tag.strip()]


@router.get(
    "/content/{slug}",
    response_class=ORJSONResponse,
    response_model=ContentResponse,
    summary="Get blog content",
    description="Get the markdown body of a post, served from the local cache when fresh.",
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {"content": "# Hello\n\nFirst post.", "cached": True},
                },
            },
        },
        400: {
            "description": "Bad request",
            "content": {"application/json": {"example": {"detail": "Slug is required"}}},
        },
        404: NOT_FOUND_RESPONSE,
        502: {
            "description": "Storage failure",
            "content": {
                "application/json": {"example": {"detail": "Failed to fetch blog content"}},
            },
        },
        429: RATE_LIMIT_RESPONSE,
    },
    operation_id="blog_get_content",
)
@limiter.limit(lambda key: "120/minute" if "apikey" in key else "60/minute")
async def get_content(
    request: Request,
    slug: str,
    service: ContentServiceDep,
    language: Annotated[str | None, Query(description="Language hint (vi or en)")] = None,
) -> ContentResponse:
    """
    Get blog content by slug.

    Parameters
    ----------
    request : Request
        Current request context.
    slug : str
        URL slug, also the cache key.
    service : ContentService
        Content service dependency.
    language : str | None
        Optional language hint; unsupported values are ignored.

    Returns
    -------
    ContentResponse
        Markdown body and cache flag.
    """
    result = await service.get_content(slug, language)
    return ContentResponse(content=result.content, cached=result.cached)


@router.get(
    "/metadata/{slug}",
    response_class=ORJSONResponse,
    response_model=MetadataResponse,
    summary="Get blog metadata",
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "blogId": "0b0f5c8e-8a57-4c1e-9d53-2b4f7e0f6c11",
                        "uuid": "5e1f2a9c-3d4b-4f6a-8c7d-9e0f1a2b3c4d",
                        "versionId": "5e1f2a9c-3d4b-4f6a-8c7d-9e0f1a2b3c4d",
                        "title": "Hello World",
                        "description": "First post",
                        "thumbnail": "/default_blog_img.png",
                        "slug": "hello-world",
                        "createdAt": "2025-01-01T00:00:00.000Z",
                        "modifiedAt": "2025-01-01T00:00:00.000Z",
                        "publishDate": None,
                        "category": "notes",
                        "hashtagIds": ["python"],
                        "language": "en",
                    },
                },
            },
        },
        404: NOT_FOUND_RESPONSE,
        429: RATE_LIMIT_RESPONSE,
    },
    operation_id="blog_get_metadata",
)
@limiter.limit(lambda key: "120/minute" if "apikey" in key else "60/minute")
async def get_metadata(
    request: Request,
    slug: str,
    service: ContentServiceDep,
    language: Annotated[str | None, Query(description="Language hint (vi or en)")] = None,
) -> MetadataResponse:
    """Get version metadata by slug with ISO-8601 timestamps."""
    version = await service.get_metadata(slug, language)
    return MetadataResponse.from_version(version)


@router.get(
    "/posts",
    response_class=ORJSONResponse,
    response_model=PostListResponse,
    summary="List blog posts",
    description=(
        "Paginated listing, newest first. `hashtags` keeps posts tagged with any of the "
        "comma-separated ids; `noHashtags=true` keeps only untagged posts."
    ),
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "posts": [
                            {
                                "slug": "hello-world",
                                "title": "Hello World",
                                "excerpt": "First post",
                                "date": "2025-01-01",
                                "image": "/default_blog_img.png",
                                "blogId": "0b0f5c8e-8a57-4c1e-9d53-2b4f7e0f6c11",
                                "versionId": "5e1f2a9c-3d4b-4f6a-8c7d-9e0f1a2b3c4d",
                                "category": None,
                                "hashtagIds": [],
                                "language": "vi",
                            },
                        ],
                        "pagination": {
                            "currentPage": 1,
                            "totalPages": 1,
                            "totalItems": 1,
                            "hasMore": False,
                            "limit": 9,
                        },
                    },
                },
            },
        },
        400: {
            "description": "Bad request",
            "content": {
                "application/json": {"example": {"detail": "Page must be a positive integer"}},
            },
        },
        429: RATE_LIMIT_RESPONSE,
    },
    operation_id="blog_list_posts",
)
@limiter.limit(lambda key: "120/minute" if "apikey" in key else "60/minute")
async def list_posts(
    request: Request,
    service: ContentServiceDep,
    page: Annotated[int, Query(description="1-based page number")] = 1,
    limit: Annotated[
        int,
        Query(le=MAX_PAGE_SIZE, description="Posts per page"),
    ] = DEFAULT_PAGE_SIZE,
    language: Annotated[str | None, Query(description="Restrict to one language")] = None,
    hashtags: Annotated[
        str | None,
        Query(description="Comma-separated hashtag ids (any match)"),
    ] = None,
    no_hashtags: Annotated[
        bool,
        Query(alias="noHashtags", description="Only posts without hashtags"),
    ] = False,
) -> PostListResponse:
    """
    List blog posts.

    Parameters
    ----------
    request : Request
        Current request context.
    service : ContentService
        Content service dependency.
    page : int
        1-based page number.
    limit : int
        Page size.
    language : str | None
        Optional language filter.
    hashtags : str | None
        Comma-separated hashtag ids.
    no_hashtags : bool
        Keep only posts without hashtags.

    Returns
    -------
    PostListResponse
        Page of posts with pagination info.
    """
    result = await service.list_posts(
        page,
        limit,
        language,
        parse_hashtags(hashtags),
        no_hashtags=no_hashtags,
    )
    return PostListResponse(
        posts=[PostSummary.from_version(v) for v in result.items],
        pagination=PaginationInfo(
            current_page=page,
            total_pages=result.total_pages,
            total_items=result.total_items,
            has_more=result.has_more,
            limit=limit,
        ),
    )


@router.get(
    "/language-versions",
    response_class=ORJSONResponse,
    response_model=LanguageVersionsResponse,
    summary="List language versions of a post",
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "success": True,
                        "blogId": "0b0f5c8e-8a57-4c1e-9d53-2b4f7e0f6c11",
                        "hasVi": True,
                        "hasEn": False,
                        "versions": [
                            {"language": "vi", "slug": "xin-chao", "title": "Xin chào"},
                        ],
                    },
                },
            },
        },
        400: {
            "description": "Bad request",
            "content": {"application/json": {"example": {"detail": "blogId is required"}}},
        },
        429: RATE_LIMIT_RESPONSE,
    },
    operation_id="blog_language_versions",
)
@limiter.limit(lambda key: "120/minute" if "apikey" in key else "60/minute")
async def language_versions(
    request: Request,
    service: ContentServiceDep,
    blog_id: Annotated[str | None, Query(alias="blogId", description="Post id")] = None,
) -> LanguageVersionsResponse:
    """Language variants of a post with per-language availability flags."""
    variants = await service.language_versions(blog_id or "")
    flags = MetadataResolver.variant_flags(variants)
    return LanguageVersionsResponse(
        blog_id=blog_id or "",
        has_vi=flags["vi"],
        has_en=flags["en"],
        versions=[
            LanguageVariant(language=v.effective_language, slug=v.slug, title=v.title)
            for v in variants
        ],
    )


@router.delete(
    "/delete",
    response_class=ORJSONResponse,
    response_model=DeleteResponse,
    summary="Delete a blog post",
    description="Delete the version resolved from `blogId` (post id, version id or slug) or `slug`.",
    dependencies=[Depends(require_upload_secret)],
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {"success": True, "message": "Blog post deleted successfully"},
                },
            },
        },
        401: UNAUTHORIZED_RESPONSE,
        404: NOT_FOUND_RESPONSE,
        429: RATE_LIMIT_RESPONSE,
    },
    operation_id="blog_delete",
)
@limiter.limit(lambda key: "20/minute" if "apikey" in key else "5/minute")
async def delete_post(
    request: Request,
    service: ContentServiceDep,
    blog_id: Annotated[str | None, Query(alias="blogId")] = None,
    slug: Annotated[str | None, Query()] = None,
) -> DeleteResponse:
    """
    Delete a blog post.

    Parameters
    ----------
    request : Request
        Current request context.
    service : ContentService
        Content service dependency.
    blog_id : str | None
        Any identifier form; takes precedence over ``slug``.
    slug : str | None
        Slug of the post.

    Returns
    -------
    DeleteResponse
        Confirmation payload.

    Raises
    ------
    MalformedInputError
        If neither identifier is supplied.
    PostNotFoundError
        If nothing matches.
    """
    identifier = blog_id or slug
    if not identifier:
        mssg = "Blog ID is required"
        raise MalformedInputError(mssg)

    version = await service.delete_post(identifier)
    logger.info(f"Blog post {version.slug} deleted by ip: {host(request)}")
    return DeleteResponse()


@router.post(
    "/upload",
    response_class=ORJSONResponse,
    response_model=PublishResponse,
    status_code=HTTP_201_CREATED,
    summary="Publish a language version",
    description=(
        "Create a post or a new language version of an existing post (`blogId`), "
        "or update an existing version (`versionId`)."
    ),
    dependencies=[Depends(require_upload_secret)],
    responses={
        201: {
            "content": {
                "application/json": {
                    "example": {
                        "success": True,
                        "blogId": "0b0f5c8e-8a57-4c1e-9d53-2b4f7e0f6c11",
                        "versionId": "5e1f2a9c-3d4b-4f6a-8c7d-9e0f1a2b3c4d",
                        "slug": "hello-world",
                        "language": "en",
                        "url": "/uploads/blog-markdown/5e1f2a9c-3d4b-4f6a-8c7d-9e0f1a2b3c4d/5e1f2a9c-3d4b-4f6a-8c7d-9e0f1a2b3c4d.md",
                    },
                },
            },
        },
        401: UNAUTHORIZED_RESPONSE,
        409: {
            "description": "Conflict",
            "content": {
                "application/json": {
                    "example": {"detail": "Slug 'hello-world' already exists for language 'en'"},
                },
            },
        },
        429: RATE_LIMIT_RESPONSE,
    },
    operation_id="blog_publish",
)
@limiter.limit(lambda key: "20/minute" if "apikey" in key else "5/minute")
async def publish(
    request: Request,
    payload: Annotated[
        PublishRequest,
        Body(
            examples={
                "basic": {
                    "summary": "New post in English",
                    "value": {
                        "title": "Hello World",
                        "content": "# Hello\n\nFirst post.",
                        "language": "en",
                        "hashtagIds": ["python"],
                    },
                },
            },
        ),
    ],
    service: ContentServiceDep,
) -> PublishResponse:
    """Create or update a language version and store its markdown body."""
    result = await service.publish(payload)
    version = result.version
    return PublishResponse(
        blog_id=version.blog_id,
        version_id=version.version_id,
        slug=version.slug,
        language=version.effective_language,
        url=result.url,
    )


def bundle_request(bundle: Bundle, fields: dict[str, Any]) -> PublishRequest:
    """
    Build a publish request from bundle form fields.

    The title falls back to the markdown file name. Field errors are
    reported like body validation errors.
    """
    values = {k: v for k, v in fields.items() if v is not None}
    values.setdefault("title", bundle.title)
    try:
        return PublishRequest(content=bundle.markdown, **values)
    except ValidationError as e:
        raise RequestValidationError(
            [{**err, "loc": ("body", *err["loc"])} for err in e.errors()],
        ) from e


@router.post(
    "/upload-bundle",
    response_class=ORJSONResponse,
    response_model=BundlePublishResponse,
    status_code=HTTP_201_CREATED,
    summary="Publish a markdown bundle",
    description=(
        "Publish a language version from a `.md` file or a `.zip` archive holding one "
        "markdown file and its images. Archive images are stored with the version and "
        "references to them are rewritten to their stored URLs. Identity rules match "
        "`/upload`."
    ),
    dependencies=[Depends(require_upload_secret)],
    responses={
        201: {
            "content": {
                "application/json": {
                    "example": {
                        "success": True,
                        "blogId": "0b0f5c8e-8a57-4c1e-9d53-2b4f7e0f6c11",
                        "versionId": "5e1f2a9c-3d4b-4f6a-8c7d-9e0f1a2b3c4d",
                        "slug": "hello-world",
                        "language": "vi",
                        "url": "/uploads/blog-markdown/5e1f2a9c-3d4b-4f6a-8c7d-9e0f1a2b3c4d/5e1f2a9c-3d4b-4f6a-8c7d-9e0f1a2b3c4d.md",
                        "extractedImages": 2,
                        "thumbnail": "/uploads/blog-thumbnails/5e1f2a9c-3d4b-4f6a-8c7d-9e0f1a2b3c4d/cover.png",
                    },
                },
            },
        },
        400: {
            "description": "Bad request",
            "content": {
                "application/json": {
                    "example": {"detail": "No markdown file found in archive"},
                },
            },
        },
        401: UNAUTHORIZED_RESPONSE,
        409: {
            "description": "Conflict",
            "content": {
                "application/json": {
                    "example": {
                        "detail": "Post '0b0f5c8e-8a57-4c1e-9d53-2b4f7e0f6c11' already has "
                        "a version for language 'vi'",
                    },
                },
            },
        },
        429: RATE_LIMIT_RESPONSE,
    },
    operation_id="blog_publish_bundle",
)
@limiter.limit(lambda key: "20/minute" if "apikey" in key else "5/minute")
async def publish_bundle(
    request: Request,
    file: Annotated[UploadFile, File(description="Markdown file or ZIP bundle")],
    service: ContentServiceDep,
    title: Annotated[str | None, Form()] = None,
    slug: Annotated[str | None, Form()] = None,
    description: Annotated[str | None, Form()] = None,
    thumbnail: Annotated[str | None, Form(description="Thumbnail URL")] = None,
    language: Annotated[str | None, Form()] = None,
    blog_id: Annotated[str | None, Form(alias="blogId")] = None,
    version_id: Annotated[str | None, Form(alias="versionId")] = None,
    category: Annotated[str | None, Form()] = None,
    publish_date: Annotated[str | None, Form(alias="publishDate")] = None,
    hashtags: Annotated[
        str | None,
        Form(alias="hashtagIds", description="Comma-separated hashtag ids"),
    ] = None,
    thumbnail_file: Annotated[
        UploadFile | None,
        File(alias="thumbnailFile", description="Thumbnail image"),
    ] = None,
) -> BundlePublishResponse:
    """
    Publish a markdown bundle.

    Parameters
    ----------
    request : Request
        Current request context.
    file : UploadFile
        ``.md`` file or ``.zip`` archive.
    service : ContentService
        Content service dependency.
    thumbnail_file : UploadFile | None
        Optional thumbnail image; replaces ``thumbnail`` when given.

    Returns
    -------
    BundlePublishResponse
        Stored version, markdown URL and stored image count.

    Raises
    ------
    InvalidBundleError
        If the file is not a valid markdown bundle.
    """
    bundle = read_bundle(await file.read(MAX_BUNDLE_SIZE + 1), file.filename or "")
    payload = bundle_request(
        bundle,
        {
            "title": title,
            "slug": slug,
            "description": description,
            "thumbnail": thumbnail,
            "language": language,
            "blog_id": blog_id,
            "version_id": version_id,
            "category": category,
            "publish_date": publish_date,
            "hashtag_ids": parse_hashtags(hashtags) if hashtags is not None else None,
        },
    )

    image = None
    if thumbnail_file is not None:
        image = ImageFile(
            data=await thumbnail_file.read(),
            content_type=thumbnail_file.content_type or "",
            filename=thumbnail_file.filename or "thumbnail",
        )

    result = await service.publish_bundle(payload, bundle, image)
    version = result.version
    logger.info(f"Blog bundle {version.slug} published by ip: {host(request)}")
    return BundlePublishResponse(
        blog_id=version.blog_id,
        version_id=version.version_id,
        slug=version.slug,
        language=version.effective_language,
        url=result.url,
        extracted_images=result.images,
        thumbnail=version.thumbnail,
    )


@router.post(
    "/upload-image",
    response_class=ORJSONResponse,
    response_model=ImageUploadResponse,
    status_code=HTTP_201_CREATED,
    summary="Upload an image",
    description="Upload a thumbnail for `versionId`, or a standalone image when omitted.",
    dependencies=[Depends(require_upload_secret)],
    responses={
        201: {
            "content": {
                "application/json": {
                    "example": {
                        "success": True,
                        "path": "blog-images/1735689600000-cover.png",
                        "url": "/uploads/blog-images/1735689600000-cover.png",
                    },
                },
            },
        },
        400: {
            "description": "Bad request",
            "content": {
                "application/json": {
                    "example": {"detail": "Invalid image type. Allowed types: JPEG, PNG, GIF, WebP"},
                },
            },
        },
        401: UNAUTHORIZED_RESPONSE,
        429: RATE_LIMIT_RESPONSE,
    },
    operation_id="blog_upload_image",
)
@limiter.limit(lambda key: "30/minute" if "apikey" in key else "10/minute")
async def upload_image(
    request: Request,
    file: Annotated[UploadFile, File(description="Image file")],
    service: ContentServiceDep,
    version_id: Annotated[str | None, Form(alias="versionId")] = None,
) -> ImageUploadResponse:
    """Upload an image and return its storage path and public URL."""
    data = await file.read()
    result = await service.upload_image(
        data,
        file.content_type or "",
        file.filename or "image",
        version_id,
    )
    return ImageUploadResponse(path=result.path, url=result.url)


@router.post(
    "/verify-password",
    response_class=ORJSONResponse,
    response_model=VerifyPasswordResponse,
    summary="Verify upload password",
    responses={
        200: {"content": {"application/json": {"example": {"success": True}}}},
        401: UNAUTHORIZED_RESPONSE,
        500: {
            "description": "Server secret not configured",
            "content": {"application/json": {"example": {"detail": "Server configuration error"}}},
        },
        429: RATE_LIMIT_RESPONSE,
    },
    operation_id="blog_verify_password",
)
@limiter.limit("5/minute")
async def verify_password(
    request: Request,
    payload: VerifyPasswordRequest,
    app_settings: Annotated[Settings, Depends(get_settings)],
) -> VerifyPasswordResponse:
    """Check a password against the server-held upload secret."""
    verify_upload_secret(payload.password, app_settings.SECRET_UPLOAD_PASSWORD)
    return VerifyPasswordResponse()


@router.delete(
    "/cache",
    response_class=ORJSONResponse,
    response_model=CacheClearResponse,
    summary="Clear content cache",
    dependencies=[Depends(require_upload_secret)],
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {"status": "success", "message": "All cached blog content cleared"},
                },
            },
        },
        401: UNAUTHORIZED_RESPONSE,
        429: RATE_LIMIT_RESPONSE,
    },
    operation_id="blog_clear_cache",
)
@limiter.limit("5/minute")
async def clear_cache(
    request: Request,
    service: ContentServiceDep,
) -> CacheClearResponse:
    """Invalidate every cached markdown body."""
    await service.clear_cache()
    logger.info(f"Content cache cleared by ip: {host(request)}")
    return CacheClearResponse()
