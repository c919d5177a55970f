# tests/services/conftest.py
"""Pytest fixtures for service tests."""

from collections.abc import Callable
from unittest.mock import AsyncMock, MagicMock

import pytest

from blog_content.clients import MemoryCacheStore
from blog_content.repositories import InMemoryMetadataStore, MetadataResolver
from blog_content.schemas import Version
from blog_content.services import ContentService
from tests.helpers import FakeClock


@pytest.fixture
def metadata_store() -> InMemoryMetadataStore:
    return InMemoryMetadataStore()


@pytest.fixture
def cache(clock: FakeClock) -> MemoryCacheStore:
    return MemoryCacheStore(clock=clock)


@pytest.fixture
def blob_store() -> MagicMock:
    """Create a mock blob store."""
    mock = MagicMock()
    mock.download_text = AsyncMock(return_value="# Hello\n\nFrom storage.")
    mock.upload_text = AsyncMock(return_value="https://cdn.test/blog-markdown/v/v.md")
    mock.upload_binary = AsyncMock(return_value="https://cdn.test/image.png")
    mock.delete_prefix = AsyncMock(return_value=1)
    mock.close = AsyncMock()
    return mock


@pytest.fixture
def service(
    metadata_store: InMemoryMetadataStore,
    cache: MemoryCacheStore,
    blob_store: MagicMock,
    clock: FakeClock,
) -> ContentService:
    return ContentService(MetadataResolver(metadata_store), cache, blob_store, clock=clock)


@pytest.fixture
async def published(
    metadata_store: InMemoryMetadataStore,
    make_version: Callable[..., Version],
) -> Version:
    """A single stored version with slug ``hello-world``."""
    version = make_version(version_id="v-hello", blog_id="p-hello", slug="hello-world")
    return await metadata_store.save_version(version)
