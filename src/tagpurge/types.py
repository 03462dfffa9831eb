"""Core types for tagpurge."""

from dataclasses import dataclass
from typing import TypeAlias

# Opaque cache tag token, e.g. "acme-postid-42"
CacheTag: TypeAlias = str

LEVEL_INFO = "info"
LEVEL_PURGE = "purge"

DEFAULT_CONTENT_TYPE = "post"


@dataclass(frozen=True, slots=True)
class TaxonomyTerm:
    """A term associated with a content item."""

    taxonomy: str
    term_id: int
    slug: str


@dataclass(frozen=True, slots=True)
class ContentItem:
    """Read-only snapshot of a published content item."""

    id: int
    type: str = DEFAULT_CONTENT_TYPE
    author_id: int | None = None
    terms: tuple[TaxonomyTerm, ...] = ()
    has_archive: bool = False
    listing_url: str | None = None  # overrides the sitemap fallback


@dataclass(frozen=True, slots=True)
class PurgeRequest:
    """A single purge call: exactly one of tags or files."""

    tags: tuple[CacheTag, ...] = ()
    files: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if bool(self.tags) == bool(self.files):
            raise ValueError("PurgeRequest needs exactly one of tags or files")

    def payload(self) -> dict[str, list[str]]:
        """JSON body sent to the provider."""
        if self.tags:
            return {"tags": list(self.tags)}
        return {"files": list(self.files)}
