"""
Metadata resolution over a metadata store.

Maps a request-time slug (optionally language-qualified) or any identifier
form to a single version record, enumerates the language variants of a post,
and produces the ordered full listing consumed by pagination.
"""

from blog_content.configs.settings import PRIMARY_LANGUAGE
from blog_content.monitoring import get_logger
from blog_content.repositories.base import MetadataStore
from blog_content.schemas.blog import IdentifierKind, Version, normalize_language

logger = get_logger(__name__)

RESOLUTION_ORDER: tuple[IdentifierKind, ...] = (
    IdentifierKind.POST_ID,
    IdentifierKind.VERSION_ID,
    IdentifierKind.SLUG,
)


class MetadataResolver:
    """
    Resolve slugs and identifiers to version records.

    Not-found is reported as None or an empty list. Failures of the
    underlying store propagate unchanged.
    """

    def __init__(self, store: MetadataStore) -> None:
        """
        Initialize the resolver.

        Args:
            store: Metadata store to query
        """
        self.store = store

    async def resolve_by_slug(self, slug: str, language: str | None = None) -> Version | None:
        """
        Resolve a slug to a version.

        A supported language hint scopes the lookup to that language. An
        unknown hint is ignored. Without a hint the first match in store
        order wins.

        Args:
            slug: URL slug
            language: Optional language hint

        Returns:
            Version | None: The matching version, or None
        """
        scoped = normalize_language(language)
        if language and scoped is None:
            logger.debug("Ignoring unsupported language hint", language=language, slug=slug)

        matches = await self.store.find_versions_by_slug(slug, scoped)
        return matches[0] if matches else None

    async def _resolve_post_id(self, identifier: str) -> Version | None:
        variants = await self.store.get_versions_of_post(identifier)
        if not variants:
            return None
        for variant in variants:
            if variant.effective_language == PRIMARY_LANGUAGE:
                return variant
        return variants[0]

    async def _resolve_kind(self, kind: IdentifierKind, identifier: str) -> Version | None:
        match kind:
            case IdentifierKind.POST_ID:
                return await self._resolve_post_id(identifier)
            case IdentifierKind.VERSION_ID:
                return await self.store.get_version(identifier)
            case IdentifierKind.SLUG:
                return await self.resolve_by_slug(identifier)

    async def resolve_by_identity(self, identifier: str) -> Version | None:
        """
        Resolve an identifier that may be a post id, a version id or a slug.

        The forms are tried in that fixed order. A post id resolves to the
        post's primary-language version when present, otherwise to its
        first variant.

        Args:
            identifier: Post id, version id or slug

        Returns:
            Version | None: The resolved version, or None
        """
        for kind in RESOLUTION_ORDER:
            version = await self._resolve_kind(kind, identifier)
            if version is not None:
                logger.debug("Resolved identifier", identifier=identifier, kind=kind.value)
                return version
        return None

    async def list_variants(self, blog_id: str) -> list[Version]:
        """All language variants of a post; empty when the post is unknown."""
        return await self.store.get_versions_of_post(blog_id)

    @staticmethod
    def variant_flags(variants: list[Version]) -> dict[str, bool]:
        """
        Membership flags per supported language.

        Examples
        --------
        >>> MetadataResolver.variant_flags([])
        {'vi': False, 'en': False}
        """
        languages = {v.effective_language for v in variants}
        return {"vi": "vi" in languages, "en": "en" in languages}

    async def full_listing(
        self,
        language: str | None = None,
        hashtag_ids: list[str] | None = None,
        *,
        no_hashtags: bool = False,
    ) -> list[Version]:
        """
        Every version matching the filters, newest first.

        Args:
            language: Restrict to this language when supported
            hashtag_ids: Keep versions whose post has any of these hashtags
            no_hashtags: Keep only versions whose post has no hashtags

        Returns:
            list[Version]: Versions sorted by descending creation time
        """
        versions = await self.store.list_versions(normalize_language(language))

        if no_hashtags:
            versions = [v for v in versions if not v.hashtag_ids]
        elif hashtag_ids:
            wanted = set(hashtag_ids)
            versions = [v for v in versions if wanted.intersection(v.hashtag_ids)]

        # Stable sort keeps store order among equal timestamps
        return sorted(versions, key=lambda v: v.created_at, reverse=True)
