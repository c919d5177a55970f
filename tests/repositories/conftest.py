# tests/repositories/conftest.py
"""Pytest fixtures for metadata store and resolver tests."""

from collections.abc import Callable

import pytest

from blog_content.repositories import InMemoryMetadataStore, MetadataResolver
from blog_content.schemas import Version


@pytest.fixture
def store() -> InMemoryMetadataStore:
    return InMemoryMetadataStore()


@pytest.fixture
def resolver(store: InMemoryMetadataStore) -> MetadataResolver:
    return MetadataResolver(store)


@pytest.fixture
async def bilingual_post(
    store: InMemoryMetadataStore,
    make_version: Callable[..., Version],
) -> tuple[Version, Version]:
    """A post with a Vietnamese and an English version sharing one slug."""
    vi = make_version(
        version_id="vi-version",
        blog_id="post-shared",
        language="vi",
        slug="shared-slug",
        title="Xin chào",
    )
    en = make_version(
        version_id="en-version",
        blog_id="post-shared",
        language="en",
        slug="shared-slug",
        title="Hello",
    )
    await store.save_version(vi, ["python"])
    await store.save_version(en)
    return vi, en
