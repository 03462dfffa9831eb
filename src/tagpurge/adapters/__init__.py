"""Content store adapters for tagpurge."""

from tagpurge.adapters.base import ContentStore
from tagpurge.adapters.memory import MemoryContentStore

__all__ = [
    "ContentStore",
    "MemoryContentStore",
]
