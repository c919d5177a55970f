"""Application dependencies resolved from ``app.state``."""

from typing import Annotated

from fastapi import Depends, Request

from blog_content.clients.protocols import CacheStoreProtocol
from blog_content.repositories.resolver import MetadataResolver
from blog_content.services.content import ContentService
from blog_content.services.storage.base import BlobStore


def get_cache_store(request: Request) -> CacheStoreProtocol:
    return request.app.state.cache_store


def get_resolver(request: Request) -> MetadataResolver:
    return MetadataResolver(request.app.state.metadata_store)


def get_blob_store(request: Request) -> BlobStore:
    return request.app.state.blob_store


def get_content_service(
    resolver: Annotated[MetadataResolver, Depends(get_resolver)],
    cache: Annotated[CacheStoreProtocol, Depends(get_cache_store)],
    blob_store: Annotated[BlobStore, Depends(get_blob_store)],
) -> ContentService:
    """
    Build the content service from the stores on ``app.state``.

    The stores are created once in the lifespan handler; tests may assign
    them directly.
    """
    return ContentService(resolver, cache, blob_store)


ContentServiceDep = Annotated[ContentService, Depends(get_content_service)]
CacheStoreDep = Annotated[CacheStoreProtocol, Depends(get_cache_store)]
