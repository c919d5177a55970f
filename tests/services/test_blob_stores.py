# tests/services/test_blob_stores.py
"""Tests for the local and Cloudinary blob stores."""

from collections.abc import AsyncGenerator
from pathlib import Path
from unittest.mock import patch

import cloudinary.exceptions
import httpx
import pytest

from blog_content.configs.settings import settings
from blog_content.errors import BlobNotFoundError, BlobStoreError
from blog_content.services.storage import CloudinaryBlobStore, LocalBlobStore


class TestLocalBlobStore:
    """Tests for LocalBlobStore."""

    @pytest.fixture
    def local_store(self, tmp_path: Path) -> LocalBlobStore:
        """Create a LocalBlobStore rooted in a temp directory."""
        return LocalBlobStore(root=tmp_path, public_base_url="https://blog.test/uploads/")

    @pytest.mark.asyncio
    async def test_text_round_trip(self, local_store: LocalBlobStore, tmp_path: Path) -> None:
        url = await local_store.upload_text("v-1", "# Xin chào")

        assert url == "https://blog.test/uploads/blog-markdown/v-1/v-1.md"
        assert (tmp_path / "blog-markdown" / "v-1" / "v-1.md").exists()
        assert await local_store.download_text("v-1") == "# Xin chào"

    @pytest.mark.asyncio
    async def test_missing_markdown(self, local_store: LocalBlobStore) -> None:
        with pytest.raises(BlobNotFoundError) as exc_info:
            await local_store.download_text("missing")
        assert exc_info.value.path == "blog-markdown/missing/missing.md"
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_invalid_utf8_is_store_error(
        self,
        local_store: LocalBlobStore,
        tmp_path: Path,
    ) -> None:
        target = tmp_path / "blog-markdown" / "v-1" / "v-1.md"
        target.parent.mkdir(parents=True)
        target.write_bytes(b"\xff\xfe\xfa")

        with pytest.raises(BlobStoreError) as exc_info:
            await local_store.download_text("v-1")
        assert not isinstance(exc_info.value, BlobNotFoundError)

    @pytest.mark.asyncio
    async def test_upload_binary(self, local_store: LocalBlobStore, tmp_path: Path) -> None:
        url = await local_store.upload_binary("blog-images/v-1/a.png", b"png", "image/png")

        assert url == "https://blog.test/uploads/blog-images/v-1/a.png"
        assert (tmp_path / "blog-images" / "v-1" / "a.png").read_bytes() == b"png"

    @pytest.mark.asyncio
    async def test_path_outside_root_is_rejected(self, local_store: LocalBlobStore) -> None:
        with pytest.raises(BlobStoreError):
            await local_store.upload_binary("../escape.png", b"x", "image/png")

    @pytest.mark.asyncio
    async def test_delete_prefix(self, local_store: LocalBlobStore, tmp_path: Path) -> None:
        await local_store.upload_binary("blog-images/v-1/a.png", b"a", "image/png")
        await local_store.upload_binary("blog-images/v-1/b.png", b"b", "image/png")
        await local_store.upload_binary("blog-images/v-2/c.png", b"c", "image/png")

        deleted = await local_store.delete_prefix("blog-images/v-1")

        assert deleted == 2
        assert not (tmp_path / "blog-images" / "v-1").exists()
        assert (tmp_path / "blog-images" / "v-2" / "c.png").exists()

    @pytest.mark.asyncio
    async def test_delete_missing_prefix(self, local_store: LocalBlobStore) -> None:
        assert await local_store.delete_prefix("blog-thumbnails/none") == 0


class TestCloudinaryBlobStore:
    """Tests for CloudinaryBlobStore with the SDK and CDN mocked."""

    @pytest.fixture(autouse=True)
    def cloudinary_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(settings, "CLOUDINARY_CLOUD_NAME", "demo")
        monkeypatch.setattr(settings, "CLOUDINARY_API_KEY", "key")

    @staticmethod
    async def _store(handler: httpx.MockTransport | None = None) -> CloudinaryBlobStore:
        return CloudinaryBlobStore(folder="blog", transport=handler)

    @pytest.fixture
    async def cdn_store(self) -> AsyncGenerator[CloudinaryBlobStore]:
        """Store whose CDN serves one markdown body and 404 for everything else."""

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("/blog/blog-markdown/v-1/v-1.md"):
                return httpx.Response(200, content="# Hello".encode())
            if request.url.path.endswith("/blog/blog-markdown/boom/boom.md"):
                return httpx.Response(500)
            return httpx.Response(404)

        store = await self._store(httpx.MockTransport(handler))
        yield store
        await store.close()

    @pytest.mark.asyncio
    async def test_download_text(self, cdn_store: CloudinaryBlobStore) -> None:
        assert await cdn_store.download_text("v-1") == "# Hello"

    @pytest.mark.asyncio
    async def test_download_missing(self, cdn_store: CloudinaryBlobStore) -> None:
        with pytest.raises(BlobNotFoundError):
            await cdn_store.download_text("missing")

    @pytest.mark.asyncio
    async def test_download_server_error(self, cdn_store: CloudinaryBlobStore) -> None:
        with pytest.raises(BlobStoreError) as exc_info:
            await cdn_store.download_text("boom")
        assert not isinstance(exc_info.value, BlobNotFoundError)

    @pytest.mark.asyncio
    async def test_download_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable", request=request)

        store = await self._store(httpx.MockTransport(handler))
        try:
            with pytest.raises(BlobStoreError):
                await store.download_text("v-1")
        finally:
            await store.close()

    @pytest.mark.asyncio
    async def test_upload_text_uses_raw_resource(self, cdn_store: CloudinaryBlobStore) -> None:
        with patch(
            "cloudinary.uploader.upload",
            return_value={"secure_url": "https://res.test/v-1.md"},
        ) as mock_upload:
            url = await cdn_store.upload_text("v-1", "# Body")

        assert url == "https://res.test/v-1.md"
        args, kwargs = mock_upload.call_args
        assert args[0] == b"# Body"
        assert kwargs["public_id"] == "blog/blog-markdown/v-1/v-1.md"
        assert kwargs["resource_type"] == "raw"
        assert kwargs["overwrite"] is True

    @pytest.mark.asyncio
    async def test_upload_binary_drops_extension(self, cdn_store: CloudinaryBlobStore) -> None:
        with patch(
            "cloudinary.uploader.upload",
            return_value={"secure_url": "https://res.test/a.png"},
        ) as mock_upload:
            url = await cdn_store.upload_binary("blog-thumbnails/v-1/a.png", b"png", "image/png")

        assert url == "https://res.test/a.png"
        kwargs = mock_upload.call_args.kwargs
        assert kwargs["public_id"] == "blog/blog-thumbnails/v-1/a"
        assert kwargs["resource_type"] == "image"

    @pytest.mark.asyncio
    async def test_sdk_error_is_store_error(self, cdn_store: CloudinaryBlobStore) -> None:
        with (
            patch(
                "cloudinary.uploader.upload",
                side_effect=cloudinary.exceptions.Error("quota exceeded"),
            ),
            pytest.raises(BlobStoreError),
        ):
            await cdn_store.upload_text("v-1", "# Body")

    @pytest.mark.asyncio
    async def test_delete_prefix_counts_both_resource_types(
        self,
        cdn_store: CloudinaryBlobStore,
    ) -> None:
        with patch(
            "cloudinary.api.delete_resources_by_prefix",
            return_value={"deleted": {"a": "deleted", "b": "not_found"}},
        ) as mock_delete:
            deleted = await cdn_store.delete_prefix("blog-images/v-1")

        assert deleted == 2
        resource_types = [c.kwargs["resource_type"] for c in mock_delete.call_args_list]
        assert resource_types == ["raw", "image"]
        assert mock_delete.call_args.args[0] == "blog/blog-images/v-1"
