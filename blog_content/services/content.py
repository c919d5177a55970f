"""
Content orchestration.

Owns the read path for markdown bodies (resolve, consult the cache, fall
back to the blob store) and the mutating paths that must keep the cache
consistent with the catalog: publishing a version and deleting a post.
"""

from collections.abc import Callable
from dataclasses import dataclass
from time import time

from blog_content.clients.protocols import CacheStoreProtocol
from blog_content.configs.settings import ALLOWED_IMAGE_TYPES
from blog_content.errors.blog import (
    DuplicateSlugError,
    LanguageVersionExistsError,
    MalformedInputError,
    PostNotFoundError,
    UnsupportedImageTypeError,
    UpstreamError,
)
from blog_content.errors.storage import BlobNotFoundError, BlobStoreError
from blog_content.monitoring import get_logger
from blog_content.repositories.resolver import MetadataResolver
from blog_content.schemas.blog import PublishRequest, Version, new_identity
from blog_content.services.bundle import Bundle, rewrite_image_links
from blog_content.services.pagination import Page, paginate
from blog_content.services.storage.base import BlobStore
from blog_content.services.storage.paths import (
    bundle_image_path,
    standalone_image_path,
    thumbnail_path,
    version_prefixes,
)
from blog_content.utils.helpers import utc_now

logger = get_logger(__name__)


@dataclass(frozen=True)
class ContentResult:
    """Markdown body and whether it was served from the cache."""

    content: str
    cached: bool


@dataclass(frozen=True)
class PublishResult:
    version: Version
    url: str
    images: int = 0


@dataclass(frozen=True)
class PublishTarget:
    """Version a publish request writes, resolved before anything is stored."""

    existing: Version | None
    version_id: str
    blog_id: str


@dataclass(frozen=True)
class ImageUploadResult:
    path: str
    url: str


@dataclass(frozen=True)
class ImageFile:
    data: bytes
    content_type: str
    filename: str


def _require_identifier(value: str | None, name: str) -> str:
    identifier = (value or "").strip()
    if not identifier:
        mssg = f"{name} is required"
        raise MalformedInputError(mssg)
    return identifier


def _check_image(data: bytes, content_type: str) -> None:
    if content_type not in ALLOWED_IMAGE_TYPES:
        raise UnsupportedImageTypeError(content_type, sorted(ALLOWED_IMAGE_TYPES))
    if not data:
        mssg = "No file provided"
        raise MalformedInputError(mssg)


class ContentService:
    """
    Blog content service.

    The cache is keyed by the slug used at request time. Every failure of
    the cache is absorbed by the cache store; blob store failures are mapped
    to not-found or upstream errors.
    """

    def __init__(
        self,
        resolver: MetadataResolver,
        cache: CacheStoreProtocol,
        blob_store: BlobStore,
        clock: Callable[[], float] = time,
    ) -> None:
        """
        Initialize the service.

        Args:
            resolver: Metadata resolver
            cache: Content cache store
            blob_store: Durable store for markdown bodies and images
            clock: Returns the current time in epoch seconds
        """
        self.resolver = resolver
        self.cache = cache
        self.blob_store = blob_store
        self._clock = clock

    async def _resolve(self, slug: str, language: str | None) -> Version:
        version = await self.resolver.resolve_by_slug(slug, language)
        if version is None:
            raise PostNotFoundError
        return version

    async def get_content(self, slug: str, language: str | None = None) -> ContentResult:
        """
        Get the markdown body for a slug.

        Args:
            slug: URL slug, also the cache key
            language: Optional language hint

        Returns:
            ContentResult: Body and cache flag

        Raises:
            MalformedInputError: If the slug is blank
            PostNotFoundError: If no version matches or its body is missing
            UpstreamError: If the blob store fails
        """
        slug = _require_identifier(slug, "Slug")
        version = await self._resolve(slug, language)

        if await self.cache.is_valid(slug):
            cached = await self.cache.get(slug)
            if cached is not None:
                logger.debug("Serving cached content", slug=slug)
                return ContentResult(content=cached, cached=True)

        try:
            content = await self.blob_store.download_text(version.version_id)
        except BlobNotFoundError as e:
            logger.warning("Markdown missing from storage", slug=slug, path=e.path)
            raise PostNotFoundError from e
        except BlobStoreError as e:
            logger.exception("Failed to fetch blog content", slug=slug)
            raise UpstreamError from e

        await self.cache.put(slug, content)
        return ContentResult(content=content, cached=False)

    async def get_metadata(self, slug: str, language: str | None = None) -> Version:
        slug = _require_identifier(slug, "Slug")
        return await self._resolve(slug, language)

    async def list_posts(
        self,
        page: int,
        page_size: int,
        language: str | None = None,
        hashtag_ids: list[str] | None = None,
        *,
        no_hashtags: bool = False,
    ) -> Page[Version]:
        """One page of the newest-first listing, after filters."""
        listing = await self.resolver.full_listing(
            language,
            hashtag_ids,
            no_hashtags=no_hashtags,
        )
        return paginate(listing, page, page_size)

    async def language_versions(self, blog_id: str) -> list[Version]:
        blog_id = _require_identifier(blog_id, "blogId")
        return await self.resolver.list_variants(blog_id)

    async def delete_post(self, identifier: str) -> Version:
        """
        Delete the version an identifier resolves to.

        Blob objects owned by the version are removed, then its metadata
        (and the post when no other variant remains). Cache entries are
        dropped for both the identifier as given and the resolved slug.

        Args:
            identifier: Post id, version id or slug

        Returns:
            Version: The deleted version

        Raises:
            MalformedInputError: If the identifier is blank
            PostNotFoundError: If nothing matches
        """
        identifier = _require_identifier(identifier, "blogId or slug")
        version = await self.resolver.resolve_by_identity(identifier)
        if version is None:
            raise PostNotFoundError

        for prefix in version_prefixes(version.version_id):
            try:
                await self.blob_store.delete_prefix(prefix)
            except BlobStoreError as e:
                # Orphaned objects do not block removing the post from the catalog
                logger.warning("Failed to delete blob objects", prefix=prefix, error=str(e))

        await self.resolver.store.delete_version(version.version_id)

        await self.cache.invalidate(identifier)
        if version.slug != identifier:
            await self.cache.invalidate(version.slug)

        logger.info(
            "Deleted blog version",
            version_id=version.version_id,
            blog_id=version.blog_id,
            slug=version.slug,
        )
        return version

    async def _existing_version(self, request: PublishRequest) -> Version | None:
        store = self.resolver.store
        if request.version_id:
            return await store.get_version(request.version_id)
        if request.blog_id:
            post = await store.get_post(request.blog_id)
            if post and (version_id := post.version_ids.get(request.language)):
                return await store.get_version(version_id)
        return None

    async def _publish_target(self, request: PublishRequest) -> PublishTarget:
        """
        Decide which version a publish request writes, before anything is stored.

        Raises:
            MalformedInputError: If ``versionId`` names a version of another post
            LanguageVersionExistsError: If the post already has a different
                version in the requested language
            DuplicateSlugError: If another version already uses the slug in that language
        """
        store = self.resolver.store
        existing = await self._existing_version(request)
        if existing and request.blog_id and request.blog_id != existing.blog_id:
            mssg = f"versionId '{existing.version_id}' belongs to a different blogId"
            raise MalformedInputError(mssg)

        version_id = existing.version_id if existing else request.version_id or new_identity()
        blog_id = existing.blog_id if existing else request.blog_id or new_identity()

        # One version per language per post
        post = await store.get_post(blog_id)
        occupant = post.version_ids.get(request.language) if post else None
        if occupant and occupant != version_id:
            raise LanguageVersionExistsError(blog_id, request.language)

        taken = await store.find_versions_by_slug(request.slug, request.language)
        if any(v.version_id != version_id for v in taken):
            raise DuplicateSlugError(request.slug, request.language)

        return PublishTarget(existing=existing, version_id=version_id, blog_id=blog_id)

    async def _store_version(
        self,
        request: PublishRequest,
        target: PublishTarget,
        images: int = 0,
    ) -> PublishResult:
        existing, version_id = target.existing, target.version_id
        try:
            url = await self.blob_store.upload_text(version_id, request.content)
        except BlobStoreError as e:
            logger.exception("Failed to store markdown", version_id=version_id)
            mssg = "Failed to store blog content"
            raise UpstreamError(mssg) from e

        now = utc_now()
        version = Version(
            version_id=version_id,
            blog_id=target.blog_id,
            language=request.language,
            slug=request.slug,
            title=request.title,
            description=request.description,
            thumbnail=request.thumbnail,
            created_at=existing.created_at if existing else now,
            modified_at=now,
            publish_date=request.publish_date,
            category=request.category,
        )
        saved = await self.resolver.store.save_version(version, request.hashtag_ids)

        await self.cache.invalidate(saved.slug)
        if existing and existing.slug != saved.slug:
            await self.cache.invalidate(existing.slug)

        logger.info(
            "Published blog version",
            version_id=saved.version_id,
            blog_id=saved.blog_id,
            language=saved.effective_language,
            updated=existing is not None,
            images=images,
        )
        return PublishResult(version=saved, url=url, images=images)

    async def publish(self, request: PublishRequest) -> PublishResult:
        """
        Create or update one language version of a post.

        Args:
            request: Validated publish request

        Returns:
            PublishResult: Stored version and the URL of its markdown body

        Raises:
            MalformedInputError: If ``versionId`` and ``blogId`` disagree
            LanguageVersionExistsError: If the post already has another version in that language
            DuplicateSlugError: If another version already uses the slug in that language
            UpstreamError: If the markdown body cannot be stored
        """
        target = await self._publish_target(request)
        return await self._store_version(request, target)

    async def publish_bundle(
        self,
        request: PublishRequest,
        bundle: Bundle,
        thumbnail: ImageFile | None = None,
    ) -> PublishResult:
        """
        Publish a version from a markdown bundle.

        Images in the bundle are stored under the version, and the markdown
        references to them are rewritten to their stored URLs. A thumbnail
        file, when given, replaces ``request.thumbnail``. Nothing is stored
        when the request conflicts with the catalog.

        Args:
            request: Validated publish request; its content is the bundle markdown
            bundle: Extracted bundle
            thumbnail: Optional thumbnail image file

        Returns:
            PublishResult: Stored version, markdown URL and stored image count

        Raises:
            UnsupportedImageTypeError: If the thumbnail is not an allowed image type
            UpstreamError: If an image or the markdown body cannot be stored
        """
        if thumbnail is not None:
            _check_image(thumbnail.data, thumbnail.content_type)
        target = await self._publish_target(request)

        urls: dict[str, str] = {}
        for image in bundle.images:
            path = bundle_image_path(target.version_id, image.path)
            urls[image.path] = await self._upload(path, image.data, image.content_type)

        update: dict[str, str] = {"content": rewrite_image_links(request.content, urls)}
        if thumbnail is not None:
            path = thumbnail_path(target.version_id, thumbnail.filename or "thumbnail")
            update["thumbnail"] = await self._upload(path, thumbnail.data, thumbnail.content_type)

        return await self._store_version(
            request.model_copy(update=update),
            target,
            images=len(urls),
        )

    async def _upload(self, path: str, data: bytes, content_type: str) -> str:
        try:
            return await self.blob_store.upload_binary(path, data, content_type)
        except BlobStoreError as e:
            logger.exception("Failed to upload image", path=path)
            mssg = "Failed to upload image"
            raise UpstreamError(mssg) from e

    async def upload_image(
        self,
        data: bytes,
        content_type: str,
        filename: str,
        version_id: str | None = None,
    ) -> ImageUploadResult:
        """
        Store an image, as a version thumbnail when ``version_id`` is given.

        Raises:
            UnsupportedImageTypeError: If the content type is not an allowed image type
            MalformedInputError: If the file is empty
            UpstreamError: If the blob store fails
        """
        _check_image(data, content_type)

        name = filename or "image"
        if version_id:
            path = thumbnail_path(version_id, name)
        else:
            path = standalone_image_path(int(self._clock() * 1000), name)

        url = await self._upload(path, data, content_type)
        return ImageUploadResult(path=path, url=url)

    async def clear_cache(self) -> None:
        await self.cache.invalidate_all()
