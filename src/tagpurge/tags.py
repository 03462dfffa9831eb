"""Cache tag derivation and utilities."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence

from tagpurge.config import PurgeSettings
from tagpurge.types import DEFAULT_CONTENT_TYPE, CacheTag, ContentItem

logger = logging.getLogger(__name__)

# Receives the current tag list; may mutate it in place (return None) or
# return a replacement sequence.
TagHook = Callable[[list[CacheTag]], Sequence[CacheTag] | None]


def cache_prefix(settings: PurgeSettings) -> str:
    """Environment prefix for tags, empty on production.

    Example:
        site_scope="acme.example.com" -> "acme-"
        site_scope="staging-local.example.com" -> "staging-local-"
        site_scope="example.com" -> ""
    """
    if settings.is_production:
        return ""

    prefix = settings.site_scope.replace(f".{settings.production_domain}", "")
    prefix = prefix.replace(".", "-")
    return prefix.strip().lower() + "-"


class TagHooks:
    """Ordered callbacks applied to a freshly derived tag list."""

    def __init__(self, hooks: Iterable[TagHook] = ()) -> None:
        self._hooks: list[TagHook] = list(hooks)

    def register(self, hook: TagHook) -> TagHook:
        """Register a hook. Usable as a decorator."""
        self._hooks.append(hook)
        return hook

    def __len__(self) -> int:
        return len(self._hooks)

    def apply(self, tags: list[CacheTag]) -> list[CacheTag]:
        """Run hooks in registration order."""
        for hook in self._hooks:
            try:
                result = hook(tags)
            except Exception:
                logger.exception("Tag hook %r failed, skipping", hook)
                continue
            if result is not None:
                tags = list(result)
        return tags


def derive_tags(
    item: ContentItem,
    settings: PurgeSettings,
    hooks: TagHooks | None = None,
) -> list[CacheTag]:
    """Compute every cache tag affected by a change to ``item``.

    Order is stable: identity, author, taxonomy terms (id then slug, in
    the order supplied), archive tags, then whatever hooks append.
    Archive tags ("blog", "post-type-archive-*") are never prefixed.
    """
    prefix = cache_prefix(settings)
    tags: list[CacheTag] = [f"{prefix}postid-{item.id}"]

    if item.author_id:
        tags.append(f"{prefix}author-{item.author_id}")

    for term in item.terms:
        tags.append(f"{prefix}{term.taxonomy}-{term.term_id}")
        tags.append(f"{prefix}{term.taxonomy}-{term.slug}")

    if item.type == DEFAULT_CONTENT_TYPE:
        tags.append("blog")
    elif item.has_archive:
        tags.append(f"post-type-archive-{item.type}")

    if hooks is not None:
        tags = hooks.apply(tags)
    return tags


def prefix_classes(classes: Sequence[str], settings: PurgeSettings) -> list[str]:
    """Add environment-prefixed copies of page classes outside production."""
    prefix = cache_prefix(settings)
    if not prefix:
        return list(classes)
    return [*classes, *(prefix + cls for cls in classes)]
