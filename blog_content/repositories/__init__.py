"""Metadata stores and resolution."""

from blog_content.repositories.base import MetadataStore
from blog_content.repositories.json_file import JsonFileMetadataStore, MetadataFileError
from blog_content.repositories.memory import InMemoryMetadataStore
from blog_content.repositories.resolver import MetadataResolver

__all__ = [
    "InMemoryMetadataStore",
    "JsonFileMetadataStore",
    "MetadataFileError",
    "MetadataResolver",
    "MetadataStore",
]
