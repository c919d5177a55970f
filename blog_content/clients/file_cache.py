"""Filesystem-backed content cache store."""

from collections.abc import Callable
from contextlib import suppress
from os import replace as os_replace
from pathlib import Path
from time import time
from urllib.parse import quote
from uuid import uuid4

import aiofiles
from pydantic import ValidationError

from blog_content.configs.settings import CACHE_VALIDITY_SECONDS
from blog_content.monitoring import get_logger
from blog_content.schemas.cache import CacheEntry

logger = get_logger(__name__)

ENTRY_SUFFIX = ".json"


class FileCacheStore:
    """
    Cache store keeping one JSON document per key in a directory.

    Features:
        - Lazy expiry: expired entries are ignored, never deleted on read
        - Corrupt or unreadable entries are treated as misses
        - Atomic overwrite through a temporary file and rename
        - Best-effort writes: failures are logged, never raised

    The store is local to the serving instance; nothing coordinates entries
    across instances.
    """

    def __init__(
        self,
        directory: Path,
        validity_seconds: int = CACHE_VALIDITY_SECONDS,
        clock: Callable[[], float] = time,
    ) -> None:
        """
        Initialize the store.

        Args:
            directory: Directory holding cache entries (created lazily on write).
            validity_seconds: Age after which an entry stops being served.
            clock: Returns the current time in epoch seconds.
        """
        self.directory = directory
        self.validity_ms = validity_seconds * 1000
        self._clock = clock

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def path_for(self, key: str) -> Path:
        """File holding the entry for ``key``; the key is percent-encoded."""
        return self.directory / f"{quote(key, safe='')}{ENTRY_SUFFIX}"

    def _ensure_directory(self) -> bool:
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning("Cache directory creation failed (non-critical)", error=str(e))
            return False
        return True

    async def _read_entry(self, key: str) -> CacheEntry | None:
        path = self.path_for(key)
        try:
            async with aiofiles.open(path, "rb") as f:
                raw = await f.read()
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning("Cache read failed (non-critical)", key=key, error=str(e))
            return None

        try:
            return CacheEntry.model_validate_json(raw)
        except (ValidationError, UnicodeDecodeError):
            logger.warning("Ignoring corrupt cache entry", key=key)
            return None

    def _is_fresh(self, entry: CacheEntry) -> bool:
        return entry.age_ms(self._now_ms()) < self.validity_ms

    async def is_valid(self, key: str) -> bool:
        entry = await self._read_entry(key)
        return entry is not None and self._is_fresh(entry)

    async def get(self, key: str) -> str | None:
        entry = await self._read_entry(key)
        if entry is None or not self._is_fresh(entry):
            return None
        return entry.content

    async def put(self, key: str, content: str) -> None:
        if not self._ensure_directory():
            return

        entry = CacheEntry(content=content, timestamp=self._now_ms())
        path = self.path_for(key)
        tmp_path = path.with_name(f".{path.name}.{uuid4().hex}.tmp")
        try:
            async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
                await f.write(entry.model_dump_json(indent=2))
            os_replace(tmp_path, path)
        except OSError as e:
            logger.warning("Failed to save cache (non-critical)", key=key, error=str(e))
            with suppress(OSError):
                tmp_path.unlink(missing_ok=True)

    async def invalidate(self, key: str) -> None:
        try:
            self.path_for(key).unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Failed to clear cache (non-critical)", key=key, error=str(e))

    def _list_entries(self) -> list[Path]:
        try:
            if not self.directory.is_dir():
                return []
            return list(self.directory.glob(f"*{ENTRY_SUFFIX}"))
        except OSError as e:
            logger.warning("Cache directory listing failed (non-critical)", error=str(e))
            return []

    async def invalidate_all(self) -> None:
        for path in self._list_entries():
            try:
                path.unlink(missing_ok=True)
            except OSError as e:
                # Continue with the remaining files
                logger.warning("Failed to delete cache file", file=path.name, error=str(e))
        logger.info("Cleared all cached blog content", directory=str(self.directory))

    async def entry_count(self) -> int:
        return len(self._list_entries())
