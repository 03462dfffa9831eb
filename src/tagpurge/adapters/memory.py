"""In-memory content store."""

import threading
from collections.abc import Iterable

from tagpurge.types import ContentItem


class MemoryContentStore:
    """Thread-safe in-memory content store."""

    def __init__(self, items: Iterable[ContentItem] = ()) -> None:
        self._items: dict[int, ContentItem] = {item.id: item for item in items}
        self._lock = threading.Lock()

    def get_item(self, item_id: int) -> ContentItem | None:
        """Get a content item by id."""
        with self._lock:
            return self._items.get(item_id)

    def put(self, item: ContentItem) -> None:
        """Store or replace a content item."""
        with self._lock:
            self._items[item.id] = item

    def delete(self, item_id: int) -> None:
        """Remove a content item."""
        with self._lock:
            self._items.pop(item_id, None)
