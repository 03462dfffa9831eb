"""tagpurge - Cache-tag invalidation for Cloudflare zones."""

# Content store adapters
from tagpurge.adapters import ContentStore, MemoryContentStore
from tagpurge.async_purger import AsyncPurger

# Audit log
from tagpurge.audit import AuditSink, FileAuditSink, MemoryAuditSink
from tagpurge.batches import MAX_TAGS_PER_REQUEST, build_requests, chunk
from tagpurge.config import PurgeSettings

# Dispatchers
from tagpurge.purger import Purger
from tagpurge.sitemap import listing_url, sitemap_url

# Tag derivation
from tagpurge.tags import TagHooks, cache_prefix, derive_tags, prefix_classes

# Core types
from tagpurge.types import CacheTag, ContentItem, PurgeRequest, TaxonomyTerm

__version__ = "0.1.0"

__all__ = [
    "MAX_TAGS_PER_REQUEST",
    "AsyncPurger",
    "AuditSink",
    "CacheTag",
    "ContentItem",
    "ContentStore",
    "FileAuditSink",
    "MemoryAuditSink",
    "MemoryContentStore",
    "PurgeRequest",
    "PurgeSettings",
    "Purger",
    "TagHooks",
    "TaxonomyTerm",
    "build_requests",
    "cache_prefix",
    "chunk",
    "derive_tags",
    "listing_url",
    "prefix_classes",
    "sitemap_url",
]
