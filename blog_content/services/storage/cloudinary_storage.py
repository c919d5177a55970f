"""
Cloudinary blob store.

This module provides a Cloudinary-based storage backend for production
use. Markdown bodies are stored as raw resources and fetched back over the
CDN with httpx; thumbnails and images are stored as image resources.
"""

import asyncio
from functools import partial
from pathlib import PurePosixPath
from typing import Any

import cloudinary
import cloudinary.api
import cloudinary.exceptions
import cloudinary.uploader
import cloudinary.utils
from httpx import AsyncBaseTransport, AsyncClient, HTTPError, Timeout
from starlette.status import HTTP_404_NOT_FOUND

from blog_content.configs.settings import settings
from blog_content.errors.storage import BlobNotFoundError, BlobStoreError
from blog_content.monitoring import get_logger
from blog_content.services.storage.paths import markdown_path

logger = get_logger(__name__)

RESOURCE_TYPES = ("raw", "image")


class CloudinaryBlobStore:
    """
    Cloudinary blob store.

    Object paths become public ids below ``CLOUDINARY_FOLDER``. Blocking
    SDK calls run in the default thread pool.
    """

    def __init__(
        self,
        folder: str | None = None,
        timeout: float | None = None,
        transport: AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize Cloudinary with configured credentials.

        Args:
            folder: Root folder for public ids (defaults to ``CLOUDINARY_FOLDER``)
            timeout: Download timeout in seconds (defaults to ``BLOB_FETCH_TIMEOUT``)
            transport: Optional httpx transport used for downloads
        """
        cloudinary.config(
            cloud_name=settings.CLOUDINARY_CLOUD_NAME,
            api_key=settings.CLOUDINARY_API_KEY,
            api_secret=settings.CLOUDINARY_API_SECRET.get_secret_value(),
            secure=True,
        )
        self.folder = (folder if folder is not None else settings.CLOUDINARY_FOLDER).strip("/")
        self._http = AsyncClient(
            timeout=Timeout(timeout or settings.BLOB_FETCH_TIMEOUT),
            transport=transport,
        )

    def _public_id(self, path: str, *, keep_extension: bool = True) -> str:
        """
        Get the Cloudinary public ID for an object path.

        Raw resources keep their extension; image resources drop it because
        Cloudinary tracks the format separately.
        """
        if not keep_extension:
            path = str(PurePosixPath(path).with_suffix(""))
        return f"{self.folder}/{path}" if self.folder else path

    async def _call(self, func: Any, *args: Any, **kwargs: Any) -> dict[str, Any]:
        operation = getattr(func, "__name__", "request")
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, partial(func, *args, **kwargs))
        except cloudinary.exceptions.Error as e:
            logger.exception("Cloudinary request failed", operation=operation)
            mssg = f"Cloudinary {operation} failed: {e}"
            raise BlobStoreError(mssg) from e

    async def download_text(self, version_id: str) -> str:
        path = markdown_path(version_id)
        url, _ = cloudinary.utils.cloudinary_url(
            self._public_id(path),
            resource_type="raw",
            secure=True,
        )

        try:
            response = await self._http.get(url)
        except HTTPError as e:
            logger.warning("Markdown download failed", path=path, error=str(e))
            mssg = f"Failed to download {path}: {e}"
            raise BlobStoreError(mssg) from e

        if response.status_code == HTTP_404_NOT_FOUND:
            raise BlobNotFoundError(path)
        if response.is_error:
            mssg = f"Failed to download markdown: {response.status_code} {response.reason_phrase}"
            raise BlobStoreError(mssg)

        try:
            return response.content.decode("utf-8")
        except UnicodeDecodeError as e:
            mssg = f"Stored markdown is not valid UTF-8: {path}"
            raise BlobStoreError(mssg) from e

    async def upload_text(self, version_id: str, text: str) -> str:
        result = await self._call(
            cloudinary.uploader.upload,
            text.encode("utf-8"),
            public_id=self._public_id(markdown_path(version_id)),
            resource_type="raw",
            overwrite=True,
            invalidate=True,
        )
        return result["secure_url"]

    async def upload_binary(self, path: str, data: bytes, content_type: str) -> str:
        result = await self._call(
            cloudinary.uploader.upload,
            data,
            public_id=self._public_id(path, keep_extension=False),
            resource_type="image",
            overwrite=True,
            invalidate=True,
        )
        logger.debug("Uploaded image", path=path, content_type=content_type)
        return result["secure_url"]

    async def delete_prefix(self, prefix: str) -> int:
        deleted = 0
        for resource_type in RESOURCE_TYPES:
            result = await self._call(
                cloudinary.api.delete_resources_by_prefix,
                self._public_id(prefix),
                resource_type=resource_type,
            )
            deleted += sum(1 for status in result.get("deleted", {}).values() if status == "deleted")
        return deleted

    async def close(self) -> None:
        await self._http.aclose()
