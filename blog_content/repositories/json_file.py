"""
JSON file metadata store.

Persists posts and versions to a single JSON document so a small deployment
keeps its catalog across restarts without a database. The whole document is
rewritten on every mutation; mutations are serialized by a lock.
"""

from asyncio import Lock
from collections.abc import Awaitable, Callable
from contextlib import suppress
from os import replace as os_replace
from pathlib import Path
from typing import Any, TypeVar
from uuid import uuid4

import aiofiles
from orjson import OPT_INDENT_2, JSONDecodeError, dumps, loads
from pydantic import ValidationError

from blog_content.errors.metadata import MetadataFileError
from blog_content.monitoring import get_logger
from blog_content.repositories.memory import InMemoryMetadataStore
from blog_content.schemas.blog import PostRecord, Version

logger = get_logger(__name__)

T = TypeVar("T")


class JsonFileMetadataStore(InMemoryMetadataStore):
    """
    Metadata store backed by a JSON file.

    Use ``open`` to build a store loaded from disk. A missing file is an
    empty catalog; a corrupt one is an error, never silently discarded.
    """

    def __init__(self, path: Path) -> None:
        super().__init__()
        self.path = path
        self._lock = Lock()

    @classmethod
    async def open(cls, path: Path) -> "JsonFileMetadataStore":
        store = cls(path)
        await store.load()
        return store

    async def load(self) -> None:
        try:
            async with aiofiles.open(self.path, "rb") as f:
                raw = await f.read()
        except FileNotFoundError:
            logger.info("Metadata file not found, starting empty", path=str(self.path))
            return
        except OSError as e:
            raise MetadataFileError(self.path, str(e)) from e

        try:
            document = loads(raw)
            posts = [PostRecord.model_validate(p) for p in document.get("posts", [])]
            versions = [Version.model_validate(v) for v in document.get("versions", [])]
        except (JSONDecodeError, ValidationError, AttributeError) as e:
            raise MetadataFileError(self.path, "invalid document") from e

        self._posts = {p.blog_id: p for p in posts}
        self._versions = {v.version_id: v for v in versions}
        logger.info(
            "Loaded blog metadata",
            path=str(self.path),
            posts=len(self._posts),
            versions=len(self._versions),
        )

    async def _persist(self) -> None:
        document = {
            "posts": [p.model_dump(mode="json") for p in self._posts.values()],
            "versions": [v.model_dump(mode="json") for v in self._versions.values()],
        }
        tmp_path = self.path.with_name(f".{self.path.name}.{uuid4().hex}.tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(tmp_path, "wb") as f:
                await f.write(dumps(document, option=OPT_INDENT_2))
            os_replace(tmp_path, self.path)
        except OSError as e:
            with suppress(OSError):
                tmp_path.unlink(missing_ok=True)
            raise MetadataFileError(self.path, str(e)) from e

    async def _write(self, mutation: Callable[..., Awaitable[T]], *args: Any) -> T:
        """
        Apply a mutation and rewrite the document under the write lock.

        The in-memory catalog is restored when the document cannot be
        written, so memory never holds a change the file does not.
        """
        async with self._lock:
            posts = {k: p.model_copy(deep=True) for k, p in self._posts.items()}
            versions = dict(self._versions)
            result = await mutation(*args)
            try:
                await self._persist()
            except MetadataFileError:
                self._posts, self._versions = posts, versions
                logger.warning("Rolled back unsaved metadata change", path=str(self.path))
                raise
            return result

    async def save_version(
        self,
        version: Version,
        hashtag_ids: list[str] | None = None,
    ) -> Version:
        return await self._write(super().save_version, version, hashtag_ids)

    async def delete_version(self, version_id: str) -> bool:
        return await self._write(super().delete_version, version_id)
