# tests/repositories/test_resolver.py
"""Tests for MetadataResolver."""

from collections.abc import Callable
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from blog_content.repositories import InMemoryMetadataStore, MetadataResolver
from blog_content.schemas import Version


class TestResolveBySlug:
    """Tests for slug resolution."""

    @pytest.mark.asyncio
    async def test_unknown_slug_is_none(self, resolver: MetadataResolver) -> None:
        assert await resolver.resolve_by_slug("missing") is None

    @pytest.mark.asyncio
    async def test_language_hint_disambiguates(
        self,
        resolver: MetadataResolver,
        bilingual_post: tuple[Version, Version],
    ) -> None:
        vi, en = bilingual_post

        found_en = await resolver.resolve_by_slug("shared-slug", "en")
        found_vi = await resolver.resolve_by_slug("shared-slug", "vi")

        assert found_en is not None
        assert found_en.version_id == en.version_id
        assert found_vi is not None
        assert found_vi.version_id == vi.version_id

    @pytest.mark.asyncio
    async def test_no_hint_returns_first_in_store_order(
        self,
        resolver: MetadataResolver,
        bilingual_post: tuple[Version, Version],
    ) -> None:
        vi, _ = bilingual_post

        first = await resolver.resolve_by_slug("shared-slug")
        again = await resolver.resolve_by_slug("shared-slug")

        assert first is not None
        assert first.version_id == vi.version_id
        assert again == first

    @pytest.mark.asyncio
    async def test_unsupported_hint_is_ignored(
        self,
        resolver: MetadataResolver,
        bilingual_post: tuple[Version, Version],
    ) -> None:
        vi, _ = bilingual_post

        found = await resolver.resolve_by_slug("shared-slug", "fr")

        assert found is not None
        assert found.version_id == vi.version_id

    @pytest.mark.asyncio
    async def test_hint_is_case_insensitive(
        self,
        resolver: MetadataResolver,
        bilingual_post: tuple[Version, Version],
    ) -> None:
        _, en = bilingual_post

        found = await resolver.resolve_by_slug("shared-slug", "EN")

        assert found is not None
        assert found.version_id == en.version_id

    @pytest.mark.asyncio
    async def test_untagged_version_matches_primary_language(
        self,
        store: InMemoryMetadataStore,
        resolver: MetadataResolver,
        make_version: Callable[..., Version],
    ) -> None:
        legacy = make_version(language=None, slug="legacy-post")
        await store.save_version(legacy)

        found = await resolver.resolve_by_slug("legacy-post", "vi")

        assert found is not None
        assert found.version_id == legacy.version_id

    @pytest.mark.asyncio
    async def test_hashtags_joined_from_post(
        self,
        resolver: MetadataResolver,
        bilingual_post: tuple[Version, Version],
    ) -> None:
        found = await resolver.resolve_by_slug("shared-slug", "en")

        assert found is not None
        assert found.hashtag_ids == ["python"]

    @pytest.mark.asyncio
    async def test_store_failure_propagates(self) -> None:
        store = MagicMock()
        store.find_versions_by_slug = AsyncMock(side_effect=ConnectionError("store down"))
        resolver = MetadataResolver(store)

        with pytest.raises(ConnectionError):
            await resolver.resolve_by_slug("anything")


class TestResolveByIdentity:
    """Tests for identifier resolution across post id, version id and slug."""

    @pytest.mark.asyncio
    async def test_all_identifier_forms_agree(
        self,
        store: InMemoryMetadataStore,
        resolver: MetadataResolver,
        make_version: Callable[..., Version],
    ) -> None:
        version = make_version(version_id="v-1", blog_id="p-1", slug="only-post")
        await store.save_version(version)

        by_post = await resolver.resolve_by_identity("p-1")
        by_version = await resolver.resolve_by_identity("v-1")
        by_slug = await resolver.resolve_by_identity("only-post")

        assert by_post is not None
        assert by_post.version_id == "v-1"
        assert by_version == by_post
        assert by_slug == by_post

    @pytest.mark.asyncio
    async def test_post_id_prefers_primary_language(
        self,
        store: InMemoryMetadataStore,
        resolver: MetadataResolver,
        make_version: Callable[..., Version],
    ) -> None:
        en = make_version(version_id="en-1", blog_id="p-1", language="en", slug="hello")
        vi = make_version(version_id="vi-1", blog_id="p-1", language="vi", slug="xin-chao")
        await store.save_version(en)
        await store.save_version(vi)

        found = await resolver.resolve_by_identity("p-1")

        assert found is not None
        assert found.version_id == "vi-1"

    @pytest.mark.asyncio
    async def test_post_id_falls_back_to_first_variant(
        self,
        store: InMemoryMetadataStore,
        resolver: MetadataResolver,
        make_version: Callable[..., Version],
    ) -> None:
        en = make_version(version_id="en-1", blog_id="p-1", language="en", slug="hello")
        await store.save_version(en)

        found = await resolver.resolve_by_identity("p-1")

        assert found is not None
        assert found.version_id == "en-1"

    @pytest.mark.asyncio
    async def test_post_id_takes_precedence_over_slug(
        self,
        store: InMemoryMetadataStore,
        resolver: MetadataResolver,
        make_version: Callable[..., Version],
    ) -> None:
        """An identifier that is both a post id and another post's slug resolves as post id."""
        owner = make_version(version_id="v-owner", blog_id="ambiguous", slug="owner-slug")
        other = make_version(version_id="v-other", blog_id="p-other", slug="ambiguous")
        await store.save_version(owner)
        await store.save_version(other)

        found = await resolver.resolve_by_identity("ambiguous")

        assert found is not None
        assert found.version_id == "v-owner"

    @pytest.mark.asyncio
    async def test_unknown_identifier(self, resolver: MetadataResolver) -> None:
        assert await resolver.resolve_by_identity("nope") is None


class TestVariants:
    """Tests for language variant enumeration."""

    @pytest.mark.asyncio
    async def test_two_variants(
        self,
        resolver: MetadataResolver,
        bilingual_post: tuple[Version, Version],
    ) -> None:
        variants = await resolver.list_variants("post-shared")

        assert len(variants) == 2
        assert MetadataResolver.variant_flags(variants) == {"vi": True, "en": True}

    @pytest.mark.asyncio
    async def test_missing_tag_counts_as_primary(
        self,
        store: InMemoryMetadataStore,
        resolver: MetadataResolver,
        make_version: Callable[..., Version],
    ) -> None:
        await store.save_version(make_version(blog_id="p-1", language=None, slug="a"))
        await store.save_version(make_version(blog_id="p-1", language="en", slug="b"))

        variants = await resolver.list_variants("p-1")

        assert len(variants) == 2
        assert MetadataResolver.variant_flags(variants) == {"vi": True, "en": True}

    @pytest.mark.asyncio
    async def test_unknown_post_has_no_variants(self, resolver: MetadataResolver) -> None:
        variants = await resolver.list_variants("missing")

        assert variants == []
        assert MetadataResolver.variant_flags(variants) == {"vi": False, "en": False}


class TestFullListing:
    """Tests for the filtered, ordered listing."""

    @pytest.fixture
    async def catalog(
        self,
        store: InMemoryMetadataStore,
        make_version: Callable[..., Version],
    ) -> list[Version]:
        oldest = make_version(slug="oldest", created_at=datetime(2024, 1, 1, tzinfo=UTC))
        newest = make_version(slug="newest", created_at=datetime(2024, 3, 1, tzinfo=UTC))
        middle = make_version(
            slug="middle",
            language="en",
            created_at=datetime(2024, 2, 1, tzinfo=UTC),
        )
        await store.save_version(oldest, ["python"])
        await store.save_version(newest, ["rust"])
        await store.save_version(middle)
        return [oldest, newest, middle]

    @pytest.mark.asyncio
    async def test_sorted_newest_first(
        self,
        resolver: MetadataResolver,
        catalog: list[Version],
    ) -> None:
        listing = await resolver.full_listing()
        assert [v.slug for v in listing] == ["newest", "middle", "oldest"]

    @pytest.mark.asyncio
    async def test_language_filter(
        self,
        resolver: MetadataResolver,
        catalog: list[Version],
    ) -> None:
        listing = await resolver.full_listing("en")
        assert [v.slug for v in listing] == ["middle"]

    @pytest.mark.asyncio
    async def test_hashtag_filter_is_any_match(
        self,
        resolver: MetadataResolver,
        catalog: list[Version],
    ) -> None:
        listing = await resolver.full_listing(hashtag_ids=["python", "rust"])
        assert [v.slug for v in listing] == ["newest", "oldest"]

    @pytest.mark.asyncio
    async def test_empty_hashtag_list_is_no_filter(
        self,
        resolver: MetadataResolver,
        catalog: list[Version],
    ) -> None:
        listing = await resolver.full_listing(hashtag_ids=[])
        assert len(listing) == 3

    @pytest.mark.asyncio
    async def test_no_hashtags_filter(
        self,
        resolver: MetadataResolver,
        catalog: list[Version],
    ) -> None:
        listing = await resolver.full_listing(no_hashtags=True)
        assert [v.slug for v in listing] == ["middle"]
