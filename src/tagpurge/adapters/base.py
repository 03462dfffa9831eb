"""Base protocol for content stores."""

from typing import Protocol, runtime_checkable

from tagpurge.types import ContentItem


@runtime_checkable
class ContentStore(Protocol):
    """Read-only view of the external content store.

    Implementations resolve an item id to a snapshot carrying its author,
    taxonomy terms (in the store's own order) and archive information.
    """

    def get_item(self, item_id: int) -> ContentItem | None:
        """Snapshot of a content item, or None if it does not exist."""
        ...
