from blog_content.clients.file_cache import FileCacheStore
from blog_content.clients.memory_cache import MemoryCacheStore
from blog_content.clients.protocols import CacheStoreProtocol

__all__ = ["CacheStoreProtocol", "FileCacheStore", "MemoryCacheStore"]
