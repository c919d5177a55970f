"""
Base blob store protocol.

This module defines the interface for durable object storage backends,
allowing for different implementations (local, cloudinary, S3, etc.).
"""

from abc import abstractmethod
from typing import Protocol


class BlobStore(Protocol):
    """
    Protocol defining the interface for blob stores.

    Absence of an object is reported as ``BlobNotFoundError``; every other
    backend failure as ``BlobStoreError``.
    """

    @abstractmethod
    async def download_text(self, version_id: str) -> str:
        """
        Download the markdown body of a version.

        Args:
            version_id: Version identity

        Returns:
            str: UTF-8 markdown text

        Raises:
            BlobNotFoundError: If no body is stored for the version
            BlobStoreError: For any other backend failure
        """
        ...

    @abstractmethod
    async def upload_text(self, version_id: str, text: str) -> str:
        """
        Store the markdown body of a version, replacing any previous one.

        Args:
            version_id: Version identity
            text: Markdown text

        Returns:
            str: URL of the stored body
        """
        ...

    @abstractmethod
    async def upload_binary(self, path: str, data: bytes, content_type: str) -> str:
        """
        Store a binary object (thumbnail or image) at ``path``.

        Args:
            path: Object path built with the helpers in ``paths``
            data: Raw bytes
            content_type: MIME type of the object

        Returns:
            str: Public URL of the object
        """
        ...

    @abstractmethod
    async def delete_prefix(self, prefix: str) -> int:
        """
        Delete every object under ``prefix``. A missing prefix is not an error.

        Args:
            prefix: Object path prefix

        Returns:
            int: Number of objects deleted
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release network resources held by the store."""
        ...
