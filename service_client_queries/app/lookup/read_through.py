"""
Read-through client lookup: Redis first, PostgreSQL on a miss.
"""

import asyncio
import time
from typing import Optional, Set

from shared.errors import CacheError, DurableStoreError
from shared.logging import get_logger, get_or_generate_correlation_id
from shared.metrics import MetricsCollector
from shared.tracing import add_span_attributes, trace_operation

from ..models import ClientRecord
from .context import ExecutionContext, SpawnedFuture, as_awaitable
from .protocols import CacheStore, RecordStore


class ReadThroughLookup:
    """Resolve clients by document, populating the cache on store hits.

    Cache hits are trusted and never re-verified against the store. A
    failed cache read is treated as a miss unless
    ``propagate_cache_read_errors`` is set. Store failures always
    propagate. Cache population runs as a detached task whose failure is
    logged and counted but never reaches the caller.

    There is no request coalescing: concurrent misses on the same key each
    query the store and each write the cache.
    """

    def __init__(
        self,
        cache: CacheStore,
        store: RecordStore,
        *,
        propagate_cache_read_errors: bool = False,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        metrics: Optional[MetricsCollector] = None,
    ):
        self.cache = cache
        self.store = store
        self.propagate_cache_read_errors = propagate_cache_read_errors
        self.metrics = metrics
        self.logger = get_logger("client-queries.lookup")
        self._loop = loop
        self._pending: Set[SpawnedFuture] = set()

    def bind_loop(self, loop: asyncio.AbstractEventLoop) -> None:
        """Pin every lookup step to ``loop`` (the loop owning the store's pool)."""
        self._loop = loop

    @property
    def pending_writes(self) -> int:
        """Number of cache writes still in flight."""
        return len(self._pending)

    async def lookup(self, key: str) -> Optional[ClientRecord]:
        """Return the client for ``key`` or None when neither tier has it."""
        correlation_id = get_or_generate_correlation_id()
        context = ExecutionContext.capture(self._loop)
        start = time.perf_counter()

        try:
            with trace_operation("client.lookup", document=key, correlation_id=correlation_id):
                self.logger.info("Looking up client in cache", document=key)

                cached = await self._get_from_cache(context, key)
                if cached is not None:
                    add_span_attributes(source="cache")
                    self._record_lookup("cache", start)
                    return cached

                record = await self._find_in_store(context, key)
                if record is None:
                    self.logger.warning("Client not found in store", document=key)
                    add_span_attributes(source="none")
                    self._record_lookup("none", start)
                    return None

                self.logger.info("Client found in store, populating cache", document=key)
                self._schedule_cache_write(context, key, record)
                add_span_attributes(source="store")
                self._record_lookup("store", start)
                return record
        except Exception:
            self._record_lookup("error", start)
            raise

    async def drain(self) -> None:
        """Wait for every in-flight cache write. Never raises."""
        pending = list(self._pending)
        if pending:
            await asyncio.gather(*(as_awaitable(f) for f in pending), return_exceptions=True)

    async def _get_from_cache(self, context: ExecutionContext, key: str) -> Optional[ClientRecord]:
        try:
            cached = await context.run(self.cache.get(key))
        except Exception as exc:
            self._record_cache_error("get")
            self.logger.error("Error reading client from cache", document=key, error=str(exc))
            if self.propagate_cache_read_errors:
                if isinstance(exc, CacheError):
                    raise
                raise CacheError("Failed to read client from cache", {"document": key}) from exc
            return None

        if cached is None:
            self.logger.debug("Client not found in cache", document=key)
        else:
            self.logger.debug("Client found in cache", document=key)
        return cached

    async def _find_in_store(self, context: ExecutionContext, key: str) -> Optional[ClientRecord]:
        try:
            return await context.run(self.store.find_by_key(key))
        except DurableStoreError as exc:
            self.logger.error("Error querying client store", document=key, error=exc.message)
            raise
        except Exception as exc:
            self.logger.error(
                "Error querying client store",
                document=key,
                error_type=type(exc).__name__,
                error=str(exc)
            )
            raise DurableStoreError("Failed to query client store", {"document": key}) from exc

    def _schedule_cache_write(self, context: ExecutionContext, key: str, record: ClientRecord) -> None:
        future = context.spawn(self._populate_cache(key, record))
        self._pending.add(future)
        future.add_done_callback(self._pending.discard)

    async def _populate_cache(self, key: str, record: ClientRecord) -> None:
        try:
            await self.cache.put(key, record)
        except Exception as exc:
            self._record_cache_error("put")
            self.logger.error("Error storing client in cache", document=key, error=str(exc))
            return
        self.logger.info("Client stored in cache", document=key)

    def _record_lookup(self, source: str, start: float) -> None:
        if self.metrics:
            self.metrics.record_lookup(source, time.perf_counter() - start)

    def _record_cache_error(self, operation: str) -> None:
        if self.metrics:
            self.metrics.record_cache_error(operation)
