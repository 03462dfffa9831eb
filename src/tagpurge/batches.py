"""Partitioning of tags and URLs into provider-sized purge requests."""

from collections.abc import Iterator, Sequence
from typing import TypeVar

from tagpurge.types import CacheTag, PurgeRequest

T = TypeVar("T")

# Provider hard limit per purge call
MAX_TAGS_PER_REQUEST = 30
MAX_FILES_PER_REQUEST = 30


def chunk(items: Sequence[T], size: int) -> Iterator[tuple[T, ...]]:
    """Yield consecutive non-empty slices of at most ``size`` items."""
    if size < 1:
        raise ValueError(f"Invalid chunk size: {size!r}")
    for start in range(0, len(items), size):
        yield tuple(items[start : start + size])


def build_requests(
    tags: Sequence[CacheTag],
    files: Sequence[str] = (),
) -> list[PurgeRequest]:
    """Tag batches first, in derived order, then file batches."""
    requests = [
        PurgeRequest(tags=batch) for batch in chunk(tags, MAX_TAGS_PER_REQUEST)
    ]
    requests.extend(
        PurgeRequest(files=batch) for batch in chunk(files, MAX_FILES_PER_REQUEST)
    )
    return requests
