"""In-memory content cache store for tests and ephemeral deployments."""

from collections.abc import Callable
from time import time

from blog_content.configs.settings import CACHE_VALIDITY_SECONDS
from blog_content.monitoring import get_logger
from blog_content.schemas.cache import CacheEntry

logger = get_logger(__name__)


class MemoryCacheStore:
    """
    Dict-backed cache store with the same semantics as FileCacheStore.

    Entries are never evicted; an expired entry stays in place until it is
    overwritten or invalidated.
    """

    def __init__(
        self,
        validity_seconds: int = CACHE_VALIDITY_SECONDS,
        clock: Callable[[], float] = time,
    ) -> None:
        self.validity_ms = validity_seconds * 1000
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def _fresh_entry(self, key: str) -> CacheEntry | None:
        entry = self._entries.get(key)
        if entry is None or entry.age_ms(self._now_ms()) >= self.validity_ms:
            return None
        return entry

    async def is_valid(self, key: str) -> bool:
        return self._fresh_entry(key) is not None

    async def get(self, key: str) -> str | None:
        entry = self._fresh_entry(key)
        return entry.content if entry else None

    async def put(self, key: str, content: str) -> None:
        self._entries[key] = CacheEntry(content=content, timestamp=self._now_ms())

    async def invalidate(self, key: str) -> None:
        self._entries.pop(key, None)

    async def invalidate_all(self) -> None:
        self._entries.clear()
        logger.info("Cleared all cached blog content (memory)")

    async def entry_count(self) -> int:
        return len(self._entries)
