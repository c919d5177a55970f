from blog_content.services.bundle import Bundle, BundleImage, read_bundle, rewrite_image_links
from blog_content.services.content import (
    ContentResult,
    ContentService,
    ImageFile,
    ImageUploadResult,
    PublishResult,
)
from blog_content.services.pagination import Page, paginate

__all__ = [
    "Bundle",
    "BundleImage",
    "ContentResult",
    "ContentService",
    "ImageFile",
    "ImageUploadResult",
    "Page",
    "PublishResult",
    "paginate",
    "read_bundle",
    "rewrite_image_links",
]
