"""
Storage services package.

This package provides blob store backends for markdown bodies and images,
with support for local filesystem and Cloudinary.
"""

from blog_content.configs.settings import settings
from blog_content.services.storage.base import BlobStore
from blog_content.services.storage.cloudinary_storage import CloudinaryBlobStore
from blog_content.services.storage.local import LocalBlobStore


def get_blob_store() -> BlobStore:
    """
    Get the configured blob store.

    Returns the appropriate storage implementation based on
    the STORAGE_PROVIDER setting.

    Returns:
        BlobStore: Configured blob store instance
    """
    if settings.STORAGE_PROVIDER == "cloudinary":
        return CloudinaryBlobStore()
    return LocalBlobStore()


__all__ = [
    "BlobStore",
    "CloudinaryBlobStore",
    "LocalBlobStore",
    "get_blob_store",
]
