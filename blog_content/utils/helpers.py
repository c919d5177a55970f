from datetime import UTC, datetime
from re import sub

from fastapi import Request


def host(request: Request) -> str:
    """Return the host IP address."""
    return request.client.host if request.client else "unknown"


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(tz=UTC)


def today_str() -> str:
    """Return the current local time as a string."""
    return datetime.now(datetime.now().astimezone().tzinfo).strftime(
        "%Y-%m-%d %H:%M:%S",
    )


def iso_utc(value: datetime) -> str:
    """
    Format a datetime as an ISO-8601 UTC string with millisecond precision.

    Naive datetimes are assumed to already be in UTC.

    Examples
    --------
    >>> iso_utc(datetime(2025, 1, 2, 3, 4, 5, tzinfo=UTC))
    '2025-01-02T03:04:05.000Z'
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def slugify(text: str) -> str:
    """
    Build a URL-friendly slug from free text.

    Examples
    --------
    >>> slugify("  Hello, World -- again ")
    'hello-world-again'
    """
    slug = text.lower()
    slug = sub(r"[^\w\s-]", "", slug)
    slug = sub(r"[\s_]+", "-", slug)
    slug = sub(r"-+", "-", slug)
    return slug.strip("-")
