# tests/services/test_bundle.py
"""Tests for markdown bundle extraction and link rewriting."""

from io import BytesIO
from zipfile import ZIP_DEFLATED, ZipFile

import pytest

from blog_content.errors import InvalidBundleError, MalformedInputError
from blog_content.services.bundle import extract_bundle, read_bundle, rewrite_image_links


def make_zip(files: dict[str, bytes]) -> bytes:
    buffer = BytesIO()
    with ZipFile(buffer, "w", ZIP_DEFLATED) as archive:
        for name, data in files.items():
            archive.writestr(name, data)
    return buffer.getvalue()


class TestExtractBundle:
    """Tests for extract_bundle."""

    def test_markdown_and_images(self) -> None:
        data = make_zip(
            {
                "post/Trip Notes.md": "# Trip\n".encode(),
                "post/images/cover.PNG": b"png",
                "post/map.webp": b"webp",
                "post/notes.txt": b"ignored",
            },
        )

        bundle = extract_bundle(data)

        assert bundle.markdown == "# Trip\n"
        assert bundle.markdown_name == "Trip Notes.md"
        assert bundle.title == "Trip Notes"
        assert [(i.path, i.content_type, i.data) for i in bundle.images] == [
            ("post/images/cover.PNG", "image/png", b"png"),
            ("post/map.webp", "image/webp", b"webp"),
        ]

    def test_utf8_bom_is_stripped(self) -> None:
        bundle = extract_bundle(make_zip({"a.md": "\ufeffXin chào".encode()}))
        assert bundle.markdown == "Xin chào"

    def test_macos_metadata_is_ignored(self) -> None:
        data = make_zip(
            {
                "post.md": b"# Post",
                "__MACOSX/._post.md": b"\x00\x05",
                "._post.md": b"\x00\x05",
                ".DS_Store": b"\x00",
            },
        )

        assert extract_bundle(data).markdown == "# Post"

    @pytest.mark.parametrize(
        ("files", "message"),
        [
            ({"cover.png": b"png"}, "No markdown file found in archive"),
            ({"a.md": b"a", "b/b.md": b"b"}, "Multiple markdown files found"),
            ({"../escape.md": b"x"}, "Directory traversal is not allowed"),
            ({"post/../../escape.png": b"x", "a.md": b"a"}, "Directory traversal"),
            ({"/etc/post.md": b"x"}, "Invalid path in archive"),
            ({"C:/post.md": b"x"}, "Invalid path in archive"),
            ({"a.md": b"\xff\xfe\xfa"}, "not valid UTF-8"),
        ],
    )
    def test_rejected_archives(self, files: dict[str, bytes], message: str) -> None:
        with pytest.raises(InvalidBundleError) as exc_info:
            extract_bundle(make_zip(files))

        assert message in exc_info.value.detail
        assert exc_info.value.status_code == 400

    def test_corrupt_archive(self) -> None:
        with pytest.raises(InvalidBundleError, match="Invalid ZIP archive"):
            extract_bundle(b"PK\x03\x04 definitely not a zip")

    def test_entry_size_limit(self) -> None:
        data = make_zip({"a.md": b"x" * 2048})

        with pytest.raises(InvalidBundleError, match="exceeds maximum file size"):
            extract_bundle(data, max_entry_size=1024)

    def test_total_size_limit(self) -> None:
        data = make_zip({"a.md": b"x" * 600, "b.png": b"y" * 600})

        with pytest.raises(InvalidBundleError, match="Total extraction size"):
            extract_bundle(data, max_entry_size=1024, max_extracted_size=1000)

    def test_entry_count_limit(self) -> None:
        files = {f"img-{i}.png": b"p" for i in range(5)}
        files["a.md"] = b"a"

        with pytest.raises(InvalidBundleError, match="more than 3 files"):
            extract_bundle(make_zip(files), max_entries=3)

    def test_is_malformed_input(self) -> None:
        assert issubclass(InvalidBundleError, MalformedInputError)


class TestReadBundle:
    """Tests for read_bundle."""

    def test_plain_markdown_file(self) -> None:
        bundle = read_bundle("# Hello".encode(), "Hello World.md")

        assert bundle.markdown == "# Hello"
        assert bundle.title == "Hello World"
        assert bundle.images == []

    def test_zip_by_extension(self) -> None:
        bundle = read_bundle(make_zip({"x.md": b"# X"}), "BUNDLE.ZIP")
        assert bundle.markdown == "# X"

    @pytest.mark.parametrize(
        ("data", "filename", "message"),
        [
            (b"", "a.md", "No file provided"),
            (b"%PDF", "a.pdf", "Only .md or .zip files are allowed"),
        ],
    )
    def test_rejected_uploads(self, data: bytes, filename: str, message: str) -> None:
        with pytest.raises(InvalidBundleError, match=message):
            read_bundle(data, filename)


class TestRewriteImageLinks:
    """Tests for rewrite_image_links."""

    URLS = {
        "post/images/cover.png": "https://cdn.test/cover.png",
        "post/map.webp": "https://cdn.test/map.webp",
    }

    @pytest.mark.parametrize(
        ("markdown", "expected"),
        [
            ("![c](post/images/cover.png)", "![c](https://cdn.test/cover.png)"),
            ("![c](./post/images/cover.png)", "![c](https://cdn.test/cover.png)"),
            ("![c](../images/cover.png)", "![c](https://cdn.test/cover.png)"),
            ("![c](/cover.png)", "![c](https://cdn.test/cover.png)"),
            ("![c](cover.png \"Cover\")", "![c](https://cdn.test/cover.png \"Cover\")"),
            ("![m](map%2Ewebp)", "![m](https://cdn.test/map.webp)"),
            ('<img alt="m" src="./map.webp" />', '<img alt="m" src="https://cdn.test/map.webp" />'),
            ("<IMG SRC='cover.png'>", "<IMG SRC='https://cdn.test/cover.png'>"),
        ],
    )
    def test_references_are_rewritten(self, markdown: str, expected: str) -> None:
        assert rewrite_image_links(markdown, self.URLS) == expected

    @pytest.mark.parametrize(
        "markdown",
        [
            "![x](https://example.com/cover.png)",
            "![x](missing.png)",
            "[link](cover.png)",
            "![x](data:image/png;base64,AAAA)",
        ],
    )
    def test_other_references_are_untouched(self, markdown: str) -> None:
        assert rewrite_image_links(markdown, self.URLS) == markdown

    def test_ambiguous_file_name_needs_full_path(self) -> None:
        urls = {"a/x.png": "https://cdn.test/a.png", "b/x.png": "https://cdn.test/b.png"}

        assert rewrite_image_links("![x](x.png)", urls) == "![x](x.png)"
        assert rewrite_image_links("![x](b/x.png)", urls) == "![x](https://cdn.test/b.png)"

    def test_no_images(self) -> None:
        assert rewrite_image_links("![x](a.png)", {}) == "![x](a.png)"
