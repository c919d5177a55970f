"""
Markdown bundle extraction.

A bundle is either a single ``.md`` file or a ZIP archive holding exactly
one markdown file plus the images it references. Archives are read in
memory; nothing is written to disk. Entry names are checked before any
entry is read, and every read is capped, so a hostile archive fails fast
with ``InvalidBundleError``.
"""

import re
import zlib
from dataclasses import dataclass, field
from io import BytesIO
from pathlib import PurePosixPath
from posixpath import basename, normpath
from urllib.parse import unquote
from zipfile import BadZipFile, ZipFile, ZipInfo

from blog_content.configs.settings import (
    BUNDLE_IMAGE_TYPES,
    MAX_BUNDLE_ENTRIES,
    MAX_BUNDLE_ENTRY_SIZE,
    MAX_BUNDLE_EXTRACTED_SIZE,
    MAX_BUNDLE_SIZE,
)
from blog_content.errors.blog import InvalidBundleError
from blog_content.monitoring import get_logger

logger = get_logger(__name__)

MEGABYTE = 1024 * 1024

# ![alt](target "title")
MARKDOWN_IMAGE = re.compile(r"(!\[[^\]]*\]\(\s*)([^)\s]+)([^)]*\))")
# <img ... src="target">
HTML_IMAGE = re.compile(r"""(<img\b[^>]*?\bsrc\s*=\s*)(["'])([^"']+)\2""", re.IGNORECASE)


@dataclass(frozen=True)
class BundleImage:
    path: str
    data: bytes
    content_type: str


@dataclass(frozen=True)
class Bundle:
    """Markdown body and the images shipped with it."""

    markdown: str
    markdown_name: str
    images: list[BundleImage] = field(default_factory=list)

    @property
    def title(self) -> str:
        """Title derived from the markdown file name."""
        return PurePosixPath(self.markdown_name).stem


def _entry_path(name: str) -> str:
    """
    Normalize an archive entry name, rejecting anything outside the archive root.

    Examples
    --------
    >>> _entry_path("./images\\\\cover.png")
    'images/cover.png'
    """
    posix = name.replace("\\", "/")
    if posix.startswith("/") or re.match(r"^[A-Za-z]:", posix):
        mssg = f"Invalid path in archive: {name}"
        raise InvalidBundleError(mssg)
    if ".." in PurePosixPath(posix).parts:
        mssg = f"Invalid path in archive: {name}. Directory traversal is not allowed"
        raise InvalidBundleError(mssg)
    return str(PurePosixPath(posix))


def _is_metadata_entry(path: str) -> bool:
    """macOS resource forks and Finder metadata are not bundle content."""
    parts = PurePosixPath(path).parts
    if not parts:
        return True
    return parts[0] == "__MACOSX" or parts[-1].startswith("._") or parts[-1] == ".DS_Store"


def _decode(data: bytes, name: str) -> str:
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        mssg = f"Markdown file {name} is not valid UTF-8"
        raise InvalidBundleError(mssg) from e


def _read_entry(archive: ZipFile, info: ZipInfo, max_entry_size: int) -> bytes:
    # Declared sizes can lie; cap the bytes actually inflated
    with archive.open(info) as f:
        data = f.read(max_entry_size + 1)
    if len(data) > max_entry_size:
        mssg = f"File {info.filename} exceeds maximum file size of {max_entry_size // MEGABYTE}MB"
        raise InvalidBundleError(mssg)
    return data


def _check_sizes(
    entries: list[ZipInfo],
    max_entries: int,
    max_entry_size: int,
    max_extracted_size: int,
) -> None:
    if len(entries) > max_entries:
        mssg = f"Archive holds more than {max_entries} files"
        raise InvalidBundleError(mssg)

    total = 0
    for info in entries:
        if info.file_size > max_entry_size:
            mssg = (
                f"File {info.filename} exceeds maximum file size of "
                f"{max_entry_size // MEGABYTE}MB"
            )
            raise InvalidBundleError(mssg)
        total += info.file_size
        if total > max_extracted_size:
            mssg = (
                f"Total extraction size exceeds maximum of {max_extracted_size // MEGABYTE}MB"
            )
            raise InvalidBundleError(mssg)


def extract_bundle(
    data: bytes,
    max_entries: int = MAX_BUNDLE_ENTRIES,
    max_entry_size: int = MAX_BUNDLE_ENTRY_SIZE,
    max_extracted_size: int = MAX_BUNDLE_EXTRACTED_SIZE,
) -> Bundle:
    """
    Read a ZIP archive holding one markdown file and its images.

    Args:
        data: Raw archive bytes
        max_entries: Maximum number of files in the archive
        max_entry_size: Maximum uncompressed size of one file
        max_extracted_size: Maximum uncompressed size of all files

    Returns:
        Bundle: Markdown body and every image entry, keyed by archive path

    Raises:
        InvalidBundleError: If the archive is corrupt, oversized, holds an
            unsafe path, or does not hold exactly one markdown file
    """
    try:
        archive = ZipFile(BytesIO(data))
    except BadZipFile as e:
        mssg = "Invalid ZIP archive"
        raise InvalidBundleError(mssg) from e

    with archive:
        entries = [info for info in archive.infolist() if not info.is_dir()]
        paths = {info.filename: _entry_path(info.filename) for info in entries}
        entries = [info for info in entries if not _is_metadata_entry(paths[info.filename])]
        _check_sizes(entries, max_entries, max_entry_size, max_extracted_size)

        markdown_entries = [
            info for info in entries if paths[info.filename].lower().endswith(".md")
        ]
        if not markdown_entries:
            mssg = "No markdown file found in archive"
            raise InvalidBundleError(mssg)
        if len(markdown_entries) > 1:
            mssg = "Multiple markdown files found. Only one markdown file is allowed per archive"
            raise InvalidBundleError(mssg)
        markdown_entry = markdown_entries[0]

        try:
            markdown = _decode(
                _read_entry(archive, markdown_entry, max_entry_size),
                markdown_entry.filename,
            )
            images = []
            for info in entries:
                path = paths[info.filename]
                content_type = BUNDLE_IMAGE_TYPES.get(PurePosixPath(path).suffix.lower())
                if content_type is None:
                    continue
                images.append(
                    BundleImage(
                        path=path,
                        data=_read_entry(archive, info, max_entry_size),
                        content_type=content_type,
                    ),
                )
        except (BadZipFile, EOFError, NotImplementedError, RuntimeError, zlib.error) as e:
            # RuntimeError covers encrypted entries
            mssg = f"Invalid ZIP archive: {e}"
            raise InvalidBundleError(mssg) from e

    logger.debug(
        "Extracted markdown bundle",
        markdown=markdown_entry.filename,
        images=len(images),
    )
    return Bundle(
        markdown=markdown,
        markdown_name=basename(paths[markdown_entry.filename]),
        images=images,
    )


def read_bundle(data: bytes, filename: str) -> Bundle:
    """
    Read an uploaded ``.md`` file or ``.zip`` bundle.

    Raises:
        InvalidBundleError: If the file is empty, too large, of another
            type, or an invalid archive
    """
    if not data:
        mssg = "No file provided"
        raise InvalidBundleError(mssg)
    if len(data) > MAX_BUNDLE_SIZE:
        mssg = f"File exceeds maximum size of {MAX_BUNDLE_SIZE // MEGABYTE}MB"
        raise InvalidBundleError(mssg)

    name = basename(filename.replace("\\", "/")) or "post.md"
    lowered = name.lower()
    if lowered.endswith(".zip"):
        return extract_bundle(data)
    if lowered.endswith(".md"):
        return Bundle(markdown=_decode(data, name), markdown_name=name)

    mssg = "Only .md or .zip files are allowed"
    raise InvalidBundleError(mssg)


def _link_target(target: str, urls: dict[str, str], by_name: dict[str, str]) -> str | None:
    if "://" in target or target.startswith(("data:", "#", "mailto:")):
        return None
    path = unquote(target.split("#", 1)[0].split("?", 1)[0]).replace("\\", "/")
    path = normpath(path.lstrip("/"))
    while path.startswith("../"):
        path = path[3:]
    return urls.get(path) or by_name.get(basename(path))


def rewrite_image_links(markdown: str, urls: dict[str, str]) -> str:
    """
    Point image references at stored URLs.

    ``urls`` maps archive paths to stored URLs. A reference matches by its
    normalized path (``./``, ``../`` and a leading ``/`` are ignored), or by
    file name when exactly one image carries that name. Markdown image
    syntax and HTML ``<img>`` tags are rewritten; other links are left alone.

    Examples
    --------
    >>> rewrite_image_links("![a](./img/x.png)", {"img/x.png": "https://cdn/x.png"})
    '![a](https://cdn/x.png)'
    """
    if not urls:
        return markdown

    names: dict[str, list[str]] = {}
    for path, url in urls.items():
        names.setdefault(basename(path), []).append(url)
    by_name = {name: found[0] for name, found in names.items() if len(found) == 1}

    def markdown_link(match: re.Match[str]) -> str:
        url = _link_target(match.group(2), urls, by_name)
        return f"{match.group(1)}{url}{match.group(3)}" if url else match.group(0)

    def html_link(match: re.Match[str]) -> str:
        url = _link_target(match.group(3), urls, by_name)
        quote = match.group(2)
        return f"{match.group(1)}{quote}{url}{quote}" if url else match.group(0)

    return HTML_IMAGE.sub(html_link, MARKDOWN_IMAGE.sub(markdown_link, markdown))
