"""Sync purge dispatcher."""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from concurrent.futures import Future, ThreadPoolExecutor, wait
from types import TracebackType
from typing import Any

import httpx

from tagpurge.adapters.base import ContentStore
from tagpurge.audit import AuditSink, FileAuditSink, audit_record
from tagpurge.batches import build_requests
from tagpurge.config import PurgeSettings
from tagpurge.sitemap import listing_url
from tagpurge.tags import TagHooks, derive_tags
from tagpurge.types import LEVEL_INFO, LEVEL_PURGE, CacheTag, ContentItem, PurgeRequest

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 4


def write_audit(
    sink: AuditSink,
    level: str,
    data: dict[str, Any],
    settings: PurgeSettings,
) -> None:
    """Write an audit record; sink failures never reach the caller."""
    try:
        sink.write(audit_record(level, data, settings))
    except Exception:
        logger.warning("Audit sink %r failed", sink, exc_info=True)


def check_settings(settings: PurgeSettings, sink: AuditSink) -> bool:
    """Check that credentials and zone are present, logging why not."""
    if not settings.auth_key:
        write_audit(
            sink,
            LEVEL_INFO,
            {"purge": False, "info": "No CloudFlare key available."},
            settings,
        )
        return False

    if not settings.email or not settings.zone_id:
        write_audit(
            sink,
            LEVEL_INFO,
            {"purge": False, "info": "No CloudFlare email or zone ID available."},
            settings,
        )
        return False

    return True


def plan_requests(
    tags: Sequence[CacheTag],
    files: Sequence[str],
    settings: PurgeSettings,
    sink: AuditSink,
    item_id: int | None = None,
) -> list[PurgeRequest]:
    """Batch tags and files into requests, or log why there is nothing to do."""
    if not tags:
        info = "No tags found"
        if item_id is not None:
            info = f"No tags found for post #{item_id}"
        write_audit(
            sink,
            LEVEL_INFO,
            {"purge": False, "info": info, "post_id": item_id},
            settings,
        )
        return []
    return build_requests(tags, files)


def item_files(item: ContentItem, settings: PurgeSettings) -> list[str]:
    """Listing URLs to purge alongside the item's tags."""
    url = listing_url(item, settings)
    return [url] if url else []


class Purger:
    """Derives cache tags for changed content and purges them at Cloudflare.

    Purge calls run on a shared pool of at most ``max_workers`` threads;
    no method waits for the provider. Batches beyond the pool size queue up.
    When ``settings`` is not given the environment is read again for every
    operation. When ``sink`` is not given, records go to ``CF_LOG_PATH``.
    """

    def __init__(
        self,
        *,
        settings: PurgeSettings | None = None,
        sink: AuditSink | None = None,
        store: ContentStore | None = None,
        hooks: TagHooks | None = None,
        client: httpx.Client | None = None,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ) -> None:
        self._settings = settings
        self._sink = sink
        self._store = store
        self.hooks = hooks if hooks is not None else TagHooks()
        self._owns_client = client is None
        self._client = client if client is not None else httpx.Client()
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="tagpurge"
        )
        self._pending: set[Future[None]] = set()
        self._lock = threading.Lock()

    def _resolve(self) -> tuple[PurgeSettings, AuditSink]:
        settings = self._settings if self._settings is not None else PurgeSettings()
        sink = self._sink
        if sink is None:
            sink = FileAuditSink.from_settings(settings)
        return settings, sink

    def on_content_changed(self, item_id: int) -> None:
        """Entry point for save/publish events. Never raises."""
        try:
            if self._store is None:
                logger.error("No content store configured, cannot purge #%s", item_id)
                return
            item = self._store.get_item(item_id)
            if item is None:
                logger.info("Content item #%s not found, nothing to purge", item_id)
                return
            self.purge_item(item)
        except Exception:
            logger.exception("Cache purge for content item #%s failed", item_id)

    def purge_item(self, item: ContentItem) -> None:
        """Purge every cache tag and listing URL affected by ``item``."""
        settings, sink = self._resolve()
        if not check_settings(settings, sink):
            return

        tags = derive_tags(item, settings, self.hooks)
        self._dispatch(tags, item_files(item, settings), settings, sink, item.id)

    def dispatch(
        self,
        tags: Sequence[CacheTag],
        files: Sequence[str] = (),
        *,
        item_id: int | None = None,
    ) -> None:
        """Purge an already derived tag sequence plus optional file URLs."""
        settings, sink = self._resolve()
        if not check_settings(settings, sink):
            return
        self._dispatch(tags, files, settings, sink, item_id)

    def _dispatch(
        self,
        tags: Sequence[CacheTag],
        files: Sequence[str],
        settings: PurgeSettings,
        sink: AuditSink,
        item_id: int | None,
    ) -> None:
        for request in plan_requests(tags, files, settings, sink, item_id):
            write_audit(
                sink,
                LEVEL_PURGE,
                {
                    "purge": True,
                    "payload": request.payload(),
                    "zone_id": settings.zone_id,
                },
                settings,
            )
            self._send_in_background(request, settings)

    def _send_in_background(
        self, request: PurgeRequest, settings: PurgeSettings
    ) -> None:
        """Fire and forget one purge call."""
        future = self._executor.submit(self._send, request, settings)
        with self._lock:
            self._pending.add(future)
        future.add_done_callback(self._forget)

    def _forget(self, future: Future[None]) -> None:
        with self._lock:
            self._pending.discard(future)

    def _send(self, request: PurgeRequest, settings: PurgeSettings) -> None:
        try:
            response = self._client.post(
                settings.purge_url,
                headers=settings.headers(),
                json=request.payload(),
                timeout=settings.timeout,
            )
        except httpx.HTTPError as exc:
            logger.warning(
                "Purge request for zone %s failed: %s", settings.zone_id, exc
            )
            return
        if not response.is_success:
            logger.warning(
                "Purge request for zone %s failed: HTTP %s",
                settings.zone_id,
                response.status_code,
            )

    def flush(self, timeout: float | None = None) -> None:
        """Wait for in-flight purge calls to finish."""
        with self._lock:
            pending = list(self._pending)
        wait(pending, timeout=timeout)

    def close(self) -> None:
        """Wait for in-flight calls and close the HTTP client if we own it."""
        self._executor.shutdown(wait=True)
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> Purger:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
