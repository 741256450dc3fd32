"""Blog slug resolution with a fallback cascade.

Stored slugs are not canonical: editors may have saved duplicated separators,
re-saved posts get a fresh id suffix, and old links keep circulating. The
resolver therefore tries progressively looser matches and returns the newest
published post from the first stage that finds anything.

Stages, in order:

1. ``exact``: stored slug equals the normalized slug.
2. ``partial``: stored slug contains the normalized slug (case-sensitive).
3. ``base_prefix``: stored slug starts with the base slug, i.e. the slug with
   its id-like suffix removed (case-insensitive). Skipped when there is no
   suffix to remove.
4. ``word_fragment``: for each word longer than two characters, the newest
   post whose slug contains that word (case-insensitive). Optional.

A content store failure inside a stage is logged and the cascade moves on.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from app.adapters.content_store.base import AbstractContentStore, SlugMatch
from app.core.errors import ContentStoreAppError
from app.schemas.content import Post
from app.utils.slug_utils import SEPARATOR, cleanup_slug, get_base_slug, normalize_slug

logger = logging.getLogger(__name__)

MIN_WORD_LENGTH = 3


class ResolutionStage(ABC):
    """One step of the cascade: a normalized slug in, candidates out (newest first)."""

    name: str

    @abstractmethod
    async def find(self, store: AbstractContentStore, slug: str) -> list[Post]:
        ...


class ExactStage(ResolutionStage):
    name = "exact"

    async def find(self, store: AbstractContentStore, slug: str) -> list[Post]:
        return await store.find_published_posts_by_slug(SlugMatch("exact", slug), limit=1)


class PartialStage(ResolutionStage):
    name = "partial"

    async def find(self, store: AbstractContentStore, slug: str) -> list[Post]:
        return await store.find_published_posts_by_slug(SlugMatch("contains", slug))


class BasePrefixStage(ResolutionStage):
    name = "base_prefix"

    async def find(self, store: AbstractContentStore, slug: str) -> list[Post]:
        base_slug = get_base_slug(slug)
        if not base_slug or base_slug == slug:
            return []
        return await store.find_published_posts_by_slug(
            SlugMatch("prefix", base_slug, case_sensitive=False)
        )


class WordFragmentStage(ResolutionStage):
    """Broadest stage. Frequently returns an unrelated post for generic words."""

    name = "word_fragment"

    async def find(self, store: AbstractContentStore, slug: str) -> list[Post]:
        if SEPARATOR not in slug:
            return []

        words = [word for word in slug.split(SEPARATOR) if len(word) >= MIN_WORD_LENGTH]
        for word in words:
            try:
                posts = await store.find_published_posts_by_slug(
                    SlugMatch("contains", word, case_sensitive=False),
                    limit=1,
                )
            except ContentStoreAppError as exc:
                logger.warning(
                    "slug_resolver.word_query_failed",
                    extra={"word": word, "error_code": exc.code},
                )
                continue
            if posts:
                logger.info("slug_resolver.word_hit", extra={"word": word})
                return posts
        return []


def default_stages(*, word_fallback: bool = True) -> list[ResolutionStage]:
    stages: list[ResolutionStage] = [ExactStage(), PartialStage(), BasePrefixStage()]
    if word_fallback:
        stages.append(WordFragmentStage())
    return stages


class SlugResolver:
    """Find the single best published post for a raw URL slug."""

    def __init__(
        self,
        store: AbstractContentStore,
        stages: list[ResolutionStage] | None = None,
    ) -> None:
        self.store = store
        self.stages = stages if stages is not None else default_stages()

    async def resolve(self, raw_slug: str) -> Post | None:
        """Run the cascade.

        Args:
            raw_slug: Slug as it appeared in the URL (may be percent-encoded
                or carry a query string).

        Returns:
            The newest published post of the first matching stage, or None.
        """
        slug = normalize_slug(cleanup_slug(raw_slug))
        if not slug:
            logger.info("slug_resolver.empty_slug")
            return None

        for stage in self.stages:
            try:
                candidates = await stage.find(self.store, slug)
            except ContentStoreAppError as exc:
                logger.warning(
                    "slug_resolver.stage_failed",
                    extra={"stage": stage.name, "slug": slug, "error_code": exc.code},
                )
                continue

            if candidates:
                post = candidates[0]
                logger.info(
                    "slug_resolver.hit",
                    extra={
                        "stage": stage.name,
                        "slug": slug,
                        "matched_slug": post.slug,
                        "candidates": len(candidates),
                    },
                )
                return post

        logger.info("slug_resolver.miss", extra={"slug": slug})
        return None
