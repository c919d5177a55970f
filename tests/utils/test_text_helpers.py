# tests/utils/test_text_helpers.py
"""Tests for blog_content/utils/helpers.py."""

from datetime import UTC, datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from blog_content.utils.helpers import host, iso_utc, slugify, utc_now


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("Hello World", "hello-world"),
        ("  Hello, World -- again ", "hello-world-again"),
        ("snake_case title", "snake-case-title"),
        ("Xin chào", "xin-chào"),
        ("!!!", ""),
    ],
)
def test_slugify(text: str, expected: str) -> None:
    assert slugify(text) == expected


class TestIsoUtc:
    """Tests for iso_utc."""

    def test_aware_datetime(self) -> None:
        value = datetime(2025, 1, 2, 3, 4, 5, 678000, tzinfo=UTC)
        assert iso_utc(value) == "2025-01-02T03:04:05.678Z"

    def test_offset_is_converted(self) -> None:
        value = datetime(2025, 1, 2, 10, 0, tzinfo=timezone(timedelta(hours=7)))
        assert iso_utc(value) == "2025-01-02T03:00:00.000Z"

    def test_naive_is_treated_as_utc(self) -> None:
        assert iso_utc(datetime(2025, 1, 2)) == "2025-01-02T00:00:00.000Z"


def test_utc_now_is_aware() -> None:
    assert utc_now().tzinfo is UTC


def test_host() -> None:
    request = MagicMock()
    request.client.host = "10.0.0.1"
    assert host(request) == "10.0.0.1"

    request.client = None
    assert host(request) == "unknown"
