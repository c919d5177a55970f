"""
Base metadata store protocol.

This module defines the interface for post/version metadata backends,
allowing for different implementations (in-memory, JSON file, document
databases, etc.).
"""

from abc import abstractmethod
from typing import Protocol

from blog_content.schemas.blog import PostRecord, Version


class MetadataStore(Protocol):
    """
    Protocol defining the interface for metadata stores.

    Lookups return None or an empty list when nothing matches. Only backend
    failures raise. Versions returned by a store carry the hashtag ids of
    their owning post.
    """

    @abstractmethod
    async def get_version(self, version_id: str) -> Version | None:
        """
        Get a version by its identity.

        Args:
            version_id: Version identity

        Returns:
            Version | None: The version, or None if not found
        """
        ...

    @abstractmethod
    async def get_post(self, blog_id: str) -> PostRecord | None:
        """
        Get the post document grouping the language versions.

        Args:
            blog_id: Post identity

        Returns:
            PostRecord | None: The post, or None if not found
        """
        ...

    @abstractmethod
    async def find_versions_by_slug(
        self,
        slug: str,
        language: str | None = None,
    ) -> list[Version]:
        """
        Find versions carrying ``slug``, in store order.

        Args:
            slug: URL slug
            language: Restrict to versions in this language when given

        Returns:
            list[Version]: Matching versions
        """
        ...

    @abstractmethod
    async def get_versions_of_post(self, blog_id: str) -> list[Version]:
        """
        Get every language version of a post, in store order.

        Args:
            blog_id: Post identity

        Returns:
            list[Version]: The post's versions
        """
        ...

    @abstractmethod
    async def list_versions(self, language: str | None = None) -> list[Version]:
        """
        List all versions, optionally restricted to one language.

        Args:
            language: Restrict to versions in this language when given

        Returns:
            list[Version]: Versions in store order
        """
        ...

    @abstractmethod
    async def save_version(
        self,
        version: Version,
        hashtag_ids: list[str] | None = None,
    ) -> Version:
        """
        Insert or replace a version and link it from its post.

        The post document is created when missing. Its hashtags are replaced
        when ``hashtag_ids`` is given and kept otherwise.

        Args:
            version: Version to store
            hashtag_ids: New hashtags for the owning post

        Returns:
            Version: The stored version with the post's hashtags joined in
        """
        ...

    @abstractmethod
    async def delete_version(self, version_id: str) -> bool:
        """
        Delete a version and unlink it from its post.

        The post document is deleted along with its last version.

        Args:
            version_id: Version identity

        Returns:
            bool: True if a version was deleted, False if it did not exist
        """
        ...
