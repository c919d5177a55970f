# tests/conftest.py
"""Root pytest configuration and shared fixtures."""

import os
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

# Settings are read at import time, so the environment is set before any
# application module is imported
os.environ["SECRET_UPLOAD_PASSWORD"] = "test-secret"
os.environ["ENVIRONMENT"] = "test"
os.environ["STORAGE_PROVIDER"] = "local"

import pytest

from blog_content.schemas import Version
from tests.helpers import FakeClock

BASE_TIME = datetime(2025, 1, 1, tzinfo=UTC)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_version() -> Callable[..., Version]:
    """Factory for versions with deterministic timestamps."""
    counter = {"n": 0}

    def factory(**overrides: Any) -> Version:
        counter["n"] += 1
        n = counter["n"]
        fields: dict[str, Any] = {
            "version_id": f"version-{n}",
            "blog_id": f"post-{n}",
            "language": "vi",
            "slug": f"post-{n}",
            "title": f"Post {n}",
            "description": f"Description {n}",
            "thumbnail": "/default_blog_img.png",
            "created_at": BASE_TIME + timedelta(hours=n),
            "modified_at": BASE_TIME + timedelta(hours=n),
        }
        fields.update(overrides)
        return Version(**fields)

    return factory
