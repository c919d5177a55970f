"""In-memory metadata store."""

from blog_content.monitoring import get_logger
from blog_content.schemas.blog import PostRecord, Version, effective_language

logger = get_logger(__name__)


class InMemoryMetadataStore:
    """
    Metadata store keeping posts and versions in dictionaries.

    Store order is insertion order. Suitable for development and testing,
    and as the working set of the JSON file store.
    """

    def __init__(self) -> None:
        self._versions: dict[str, Version] = {}
        self._posts: dict[str, PostRecord] = {}

    def _joined(self, version: Version) -> Version:
        post = self._posts.get(version.blog_id)
        hashtag_ids = list(post.hashtag_ids) if post else []
        return version.model_copy(update={"hashtag_ids": hashtag_ids})

    def _matches_language(self, version: Version, language: str | None) -> bool:
        return language is None or version.effective_language == language

    async def get_version(self, version_id: str) -> Version | None:
        version = self._versions.get(version_id)
        return self._joined(version) if version else None

    async def get_post(self, blog_id: str) -> PostRecord | None:
        post = self._posts.get(blog_id)
        return post.model_copy(deep=True) if post else None

    async def find_versions_by_slug(
        self,
        slug: str,
        language: str | None = None,
    ) -> list[Version]:
        return [
            self._joined(v)
            for v in self._versions.values()
            if v.slug == slug and self._matches_language(v, language)
        ]

    async def get_versions_of_post(self, blog_id: str) -> list[Version]:
        return [self._joined(v) for v in self._versions.values() if v.blog_id == blog_id]

    async def list_versions(self, language: str | None = None) -> list[Version]:
        return [
            self._joined(v)
            for v in self._versions.values()
            if self._matches_language(v, language)
        ]

    async def save_version(
        self,
        version: Version,
        hashtag_ids: list[str] | None = None,
    ) -> Version:
        language = version.effective_language
        post = self._posts.get(version.blog_id)
        if post is None:
            post = PostRecord(blog_id=version.blog_id)
            self._posts[version.blog_id] = post

        # A version moving to another language releases its old slot
        previous = self._versions.get(version.version_id)
        if previous is not None and previous.effective_language != language:
            post.version_ids.pop(previous.effective_language, None)

        post.version_ids[language] = version.version_id
        if hashtag_ids is not None:
            post.hashtag_ids = list(hashtag_ids)

        self._versions[version.version_id] = version.model_copy(update={"hashtag_ids": []})
        logger.debug(
            "Saved blog version",
            version_id=version.version_id,
            blog_id=version.blog_id,
            language=language,
        )
        return self._joined(version)

    async def delete_version(self, version_id: str) -> bool:
        version = self._versions.pop(version_id, None)
        if version is None:
            return False

        post = self._posts.get(version.blog_id)
        if post is not None:
            language = effective_language(version.language)
            if post.version_ids.get(language) == version_id:
                del post.version_ids[language]

        remaining = any(v.blog_id == version.blog_id for v in self._versions.values())
        if not remaining:
            self._posts.pop(version.blog_id, None)
            logger.info("Deleted post with its last version", blog_id=version.blog_id)

        return True
