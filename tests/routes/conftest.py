# tests/routes/conftest.py
"""Pytest fixtures for route tests."""

from collections.abc import AsyncGenerator, Callable
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient
from pydantic import SecretStr

from blog_content.auth import UPLOAD_PASSWORD_HEADER, get_settings
from blog_content.clients import MemoryCacheStore
from blog_content.configs.settings import Settings
from blog_content.main import app
from blog_content.managers.rate_limiter import limiter
from blog_content.repositories import InMemoryMetadataStore
from blog_content.schemas import Version
from blog_content.services.storage import LocalBlobStore

UPLOAD_SECRET = "test-secret"


@pytest.fixture
def metadata_store() -> InMemoryMetadataStore:
    return InMemoryMetadataStore()


@pytest.fixture
def cache_store() -> MemoryCacheStore:
    return MemoryCacheStore()


@pytest.fixture
def blob_store(tmp_path: Path) -> LocalBlobStore:
    return LocalBlobStore(root=tmp_path / "uploads", public_base_url="/uploads")


@pytest.fixture
def upload_headers() -> dict[str, str]:
    """Headers carrying the valid upload secret."""
    return {UPLOAD_PASSWORD_HEADER: UPLOAD_SECRET}


@pytest.fixture
async def client(
    metadata_store: InMemoryMetadataStore,
    cache_store: MemoryCacheStore,
    blob_store: LocalBlobStore,
) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for testing."""
    # ASGITransport skips the lifespan, so the stores are attached here
    app.state.metadata_store = metadata_store
    app.state.cache_store = cache_store
    app.state.blob_store = blob_store
    app.dependency_overrides[get_settings] = lambda: Settings(
        SECRET_UPLOAD_PASSWORD=SecretStr(UPLOAD_SECRET),
    )
    limiter.enabled = False
    async with AsyncClient(
        base_url="http://test",
        transport=ASGITransport(app=app),
    ) as ac:
        yield ac
    limiter.enabled = True
    app.dependency_overrides.clear()


@pytest.fixture
async def stored_post(
    metadata_store: InMemoryMetadataStore,
    blob_store: LocalBlobStore,
    make_version: Callable[..., Version],
) -> Version:
    """A Vietnamese version whose markdown body exists in blob storage."""
    version = make_version(
        version_id="v-hello",
        blog_id="p-hello",
        slug="xin-chao",
        title="Xin chào",
    )
    await blob_store.upload_text(version.version_id, "# Xin chào\n\nBài viết đầu tiên.")
    return await metadata_store.save_version(version, ["python"])
