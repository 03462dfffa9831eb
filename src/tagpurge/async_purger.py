"""Async purge dispatcher."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

import httpx

from tagpurge.adapters.base import ContentStore
from tagpurge.audit import AuditSink, FileAuditSink
from tagpurge.config import PurgeSettings
from tagpurge.purger import check_settings, item_files, plan_requests, write_audit
from tagpurge.tags import TagHooks, derive_tags
from tagpurge.types import LEVEL_PURGE, CacheTag, ContentItem, PurgeRequest

logger = logging.getLogger(__name__)


class AsyncPurger:
    """Async variant of ``Purger``.

    Purge calls are scheduled as tasks on the running loop; the coroutines
    return as soon as every call is scheduled. Audit writes run in a worker
    thread so a file sink never blocks the loop.
    """

    def __init__(
        self,
        *,
        settings: PurgeSettings | None = None,
        sink: AuditSink | None = None,
        store: ContentStore | None = None,
        hooks: TagHooks | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings
        self._sink = sink
        self._store = store
        self.hooks = hooks if hooks is not None else TagHooks()
        self._owns_client = client is None
        self._client = client if client is not None else httpx.AsyncClient()
        self._background_tasks: set[asyncio.Task[None]] = set()

    def _resolve(self) -> tuple[PurgeSettings, AuditSink]:
        settings = self._settings if self._settings is not None else PurgeSettings()
        sink = self._sink
        if sink is None:
            sink = FileAuditSink.from_settings(settings)
        return settings, sink

    async def on_content_changed(self, item_id: int) -> None:
        """Entry point for save/publish events. Never raises."""
        try:
            if self._store is None:
                logger.error("No content store configured, cannot purge #%s", item_id)
                return
            item = self._store.get_item(item_id)
            if item is None:
                logger.info("Content item #%s not found, nothing to purge", item_id)
                return
            await self.purge_item(item)
        except Exception:
            logger.exception("Cache purge for content item #%s failed", item_id)

    async def purge_item(self, item: ContentItem) -> None:
        """Purge every cache tag and listing URL affected by ``item``."""
        settings, sink = self._resolve()
        if not await asyncio.to_thread(check_settings, settings, sink):
            return

        tags = derive_tags(item, settings, self.hooks)
        await self._dispatch(tags, item_files(item, settings), settings, sink, item.id)

    async def dispatch(
        self,
        tags: Sequence[CacheTag],
        files: Sequence[str] = (),
        *,
        item_id: int | None = None,
    ) -> None:
        """Purge an already derived tag sequence plus optional file URLs."""
        settings, sink = self._resolve()
        if not await asyncio.to_thread(check_settings, settings, sink):
            return
        await self._dispatch(tags, files, settings, sink, item_id)

    async def _dispatch(
        self,
        tags: Sequence[CacheTag],
        files: Sequence[str],
        settings: PurgeSettings,
        sink: AuditSink,
        item_id: int | None,
    ) -> None:
        requests = await asyncio.to_thread(
            plan_requests, tags, files, settings, sink, item_id
        )
        for request in requests:
            await asyncio.to_thread(
                write_audit,
                sink,
                LEVEL_PURGE,
                {
                    "purge": True,
                    "payload": request.payload(),
                    "zone_id": settings.zone_id,
                },
                settings,
            )
            # Fire and forget - tracked only so flush() can wait on it
            task = asyncio.create_task(self._send(request, settings))
            self._background_tasks.add(task)
            task.add_done_callback(self._background_tasks.discard)

    async def _send(self, request: PurgeRequest, settings: PurgeSettings) -> None:
        try:
            response = await self._client.post(
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

    async def flush(self) -> None:
        """Wait for in-flight purge calls to finish."""
        if self._background_tasks:
            await asyncio.gather(*self._background_tasks, return_exceptions=True)

    async def aclose(self) -> None:
        """Wait for in-flight calls and close the HTTP client if we own it."""
        await self.flush()
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> AsyncPurger:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
