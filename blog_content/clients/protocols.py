"""Protocol definitions for content cache store implementations."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class CacheStoreProtocol(Protocol):
    """
    Protocol for time-bounded content cache stores.

    Both FileCacheStore and MemoryCacheStore conform to this protocol.
    Implementations never raise from these methods: unreadable or expired
    entries read as misses and failed writes are logged and dropped.
    """

    async def is_valid(self, key: str) -> bool:
        """Whether an entry exists for ``key`` and is younger than the validity window."""
        ...

    async def get(self, key: str) -> str | None:
        """Return the cached content when valid, otherwise None."""
        ...

    async def put(self, key: str, content: str) -> None:
        """Overwrite the entry for ``key`` with fresh content and the current time."""
        ...

    async def invalidate(self, key: str) -> None:
        """Remove the entry for ``key`` if present."""
        ...

    async def invalidate_all(self) -> None:
        """Remove every entry."""
        ...

    async def entry_count(self) -> int:
        """Number of stored entries, valid or not."""
        ...
