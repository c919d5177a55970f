"""
Local filesystem blob store.

This module provides a local storage backend for development
and testing purposes. Objects are stored under the configured
uploads directory and served from ``PUBLIC_BASE_URL``.
"""

from pathlib import Path
from shutil import rmtree

import aiofiles

from blog_content.configs.settings import settings
from blog_content.errors.storage import BlobNotFoundError, BlobStoreError
from blog_content.monitoring import get_logger
from blog_content.services.storage.paths import markdown_path

logger = get_logger(__name__)


class LocalBlobStore:
    """
    Local filesystem blob store.

    Object paths map directly onto files below ``root``.
    """

    def __init__(self, root: Path | None = None, public_base_url: str | None = None) -> None:
        """
        Initialize local storage.

        Args:
            root: Directory holding objects (defaults to ``UPLOADS_DIR``)
            public_base_url: URL prefix objects are served from
        """
        self.root = root or settings.UPLOADS_DIR
        self.public_base_url = (public_base_url or settings.PUBLIC_BASE_URL).rstrip("/")

    def _file_path(self, path: str) -> Path:
        """
        Map an object path to a file below the root.

        Raises:
            BlobStoreError: If the path escapes the root directory
        """
        root = self.root.resolve()
        file_path = (root / path).resolve()
        if not file_path.is_relative_to(root):
            mssg = f"Object path outside storage root: {path}"
            raise BlobStoreError(mssg)
        return file_path

    def _url(self, path: str) -> str:
        return f"{self.public_base_url}/{path}"

    async def download_text(self, version_id: str) -> str:
        path = markdown_path(version_id)
        try:
            async with aiofiles.open(self._file_path(path), encoding="utf-8") as f:
                return await f.read()
        except FileNotFoundError as e:
            raise BlobNotFoundError(path) from e
        except (OSError, UnicodeDecodeError) as e:
            logger.exception("Failed to read markdown", path=path)
            mssg = f"Failed to read {path}: {e}"
            raise BlobStoreError(mssg) from e

    async def _write(self, path: str, data: bytes) -> str:
        file_path = self._file_path(path)
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(file_path, "wb") as f:
                await f.write(data)
        except OSError as e:
            logger.exception("Failed to write object", path=path)
            mssg = f"Failed to write {path}: {e}"
            raise BlobStoreError(mssg) from e
        return self._url(path)

    async def upload_text(self, version_id: str, text: str) -> str:
        return await self._write(markdown_path(version_id), text.encode("utf-8"))

    async def upload_binary(self, path: str, data: bytes, content_type: str) -> str:
        logger.debug("Storing object", path=path, content_type=content_type, size=len(data))
        return await self._write(path, data)

    async def delete_prefix(self, prefix: str) -> int:
        target = self._file_path(prefix)
        try:
            if target.is_file():
                target.unlink()
                return 1
            if not target.is_dir():
                return 0
            count = sum(1 for p in target.rglob("*") if p.is_file())
            rmtree(target)
        except OSError as e:
            logger.exception("Failed to delete objects", prefix=prefix)
            mssg = f"Failed to delete {prefix}: {e}"
            raise BlobStoreError(mssg) from e
        return count

    async def close(self) -> None:
        return None
