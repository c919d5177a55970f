"""Object path layout shared by every blob store."""

from re import sub

MARKDOWN_ROOT = "blog-markdown"
THUMBNAIL_ROOT = "blog-thumbnails"
IMAGE_ROOT = "blog-images"


def safe_filename(filename: str) -> str:
    """
    Replace every character outside ``[a-zA-Z0-9.-]`` with an underscore.

    Examples
    --------
    >>> safe_filename("../my photo (1).png")
    '.._my_photo__1_.png'
    """
    return sub(r"[^a-zA-Z0-9.-]", "_", filename)


def markdown_path(version_id: str) -> str:
    return f"{MARKDOWN_ROOT}/{version_id}/{version_id}.md"


def thumbnail_path(version_id: str, filename: str) -> str:
    return f"{THUMBNAIL_ROOT}/{version_id}/{safe_filename(filename)}"


def bundle_image_path(version_id: str, relative_path: str) -> str:
    """Path for an image shipped inside a version's markdown bundle."""
    return f"{IMAGE_ROOT}/{version_id}/{safe_filename(relative_path)}"


def standalone_image_path(timestamp_ms: int, filename: str) -> str:
    """Path for an image not attached to a version."""
    return f"{IMAGE_ROOT}/{timestamp_ms}-{safe_filename(filename)}"


def version_prefixes(version_id: str) -> tuple[str, ...]:
    """Every prefix holding objects owned by a version."""
    return (
        f"{MARKDOWN_ROOT}/{version_id}",
        f"{THUMBNAIL_ROOT}/{version_id}",
        f"{IMAGE_ROOT}/{version_id}",
    )
