"""Query cache shared by every consumer of CRM data.

Entries are keyed by :class:`QueryKey` (entity kind plus an optional
filter). Each entry carries the last successful result together with
loading/error/stale flags. Writes never patch cached data: a successful
mutation marks whole entity kinds stale and the next read refetches.

Only subscribed entries outlive invalidation, so the map holds the live
subscriptions plus whatever was read since the last write to its kind.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from ..errors import MutationError

log = logging.getLogger(__name__)

Loader = Callable[[], Awaitable[Any]]


@dataclass(frozen=True)
class QueryKey:
    kind: str
    filter: tuple[tuple[str, Any], ...] = ()

    @classmethod
    def of(cls, kind: str, **filters: Any) -> QueryKey:
        pairs = tuple(sorted((k, v) for k, v in filters.items() if v is not None))
        return cls(kind, pairs)

    @property
    def params(self) -> dict[str, Any]:
        return dict(self.filter)

    def __str__(self) -> str:
        if not self.filter:
            return self.kind
        args = ",".join(f"{k}={v}" for k, v in self.filter)
        return f"{self.kind}[{args}]"


@dataclass
class QueryState:
    data: Any = None
    error: BaseException | None = None
    is_loading: bool = False
    is_stale: bool = True
    updated_at: float | None = None
    subscribers: int = 0
    generation: int = 0

    @property
    def has_data(self) -> bool:
        return self.updated_at is not None

    @property
    def is_error(self) -> bool:
        return self.error is not None


class QueryCache:
    def __init__(self) -> None:
        self._entries: dict[QueryKey, QueryState] = {}
        self._inflight: dict[QueryKey, asyncio.Task] = {}

    def __contains__(self, key: QueryKey) -> bool:
        return key in self._entries

    def keys(self) -> list[QueryKey]:
        return list(self._entries)

    def state(self, key: QueryKey) -> QueryState:
        """Current state for ``key``; a detached empty state if never requested."""
        return self._entries.get(key) or QueryState()

    def is_fetching(self, key: QueryKey) -> bool:
        return key in self._inflight

    # ── reads ──────────────────────────────────────────────────────────────

    async def fetch(self, key: QueryKey, loader: Loader, *, force: bool = False) -> Any:
        """Return fresh data for ``key``, loading it at most once concurrently.

        Callers that arrive while a load for the same key is in flight
        await that load instead of starting another one. A failed load
        records the error on the entry and propagates to every waiter.
        """
        entry = self._entries.setdefault(key, QueryState())
        if not force and not entry.is_stale and entry.error is None:
            return entry.data

        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._load(key, entry, loader))
            self._inflight[key] = task
        return await asyncio.shield(task)

    async def _load(self, key: QueryKey, entry: QueryState, loader: Loader) -> Any:
        generation = entry.generation
        entry.is_loading = True
        try:
            data = await loader()
        except Exception as exc:
            if entry.generation == generation:
                entry.error = exc
            log.warning("Query %s failed: %s", key, exc)
            raise
        else:
            # A load superseded by invalidation only answers its own waiters.
            if entry.generation == generation:
                entry.data = data
                entry.error = None
                entry.updated_at = time.monotonic()
                entry.is_stale = False
            return data
        finally:
            if self._inflight.get(key) is asyncio.current_task():
                del self._inflight[key]
            entry.is_loading = key in self._inflight and self._entries.get(key) is entry

    # ── invalidation ───────────────────────────────────────────────────────

    def invalidate(self, target: QueryKey | str) -> int:
        """Mark one key, or every key of an entity kind, stale.

        Entries nobody is subscribed to are evicted rather than kept
        stale; the next fetch loads them into a fresh entry. Returns the
        number of entries invalidated.
        """
        if isinstance(target, QueryKey):
            keys = [target] if target in self._entries else []
        else:
            keys = [k for k in self._entries if k.kind == target]
        for key in keys:
            entry = self._entries[key]
            entry.is_stale = True
            entry.generation += 1
            # Later fetches must not join a load that started before the write.
            self._inflight.pop(key, None)
            if entry.subscribers == 0:
                del self._entries[key]
        if keys:
            log.debug("Invalidated %s", ", ".join(str(k) for k in keys))
        return len(keys)

    def invalidate_many(self, targets: Iterable[QueryKey | str]) -> int:
        return sum(self.invalidate(t) for t in targets)

    def invalidate_all(self) -> int:
        return self.invalidate_many(list(self._entries))

    def drop(self, key: QueryKey) -> None:
        self._entries.pop(key, None)
        self._inflight.pop(key, None)

    # ── subscriptions ──────────────────────────────────────────────────────

    async def subscribe(
        self, key: QueryKey, loader: Loader, *, enabled: bool = True
    ) -> Subscription:
        """Declare interest in ``key``.

        An enabled subscription loads the key if it has no fresh data.
        Load errors are left on the entry for the consumer to render.
        """
        entry = self._entries.setdefault(key, QueryState())
        entry.subscribers += 1
        sub = Subscription(self, key, loader, enabled=enabled)
        if enabled:
            await sub.refresh()
        return sub

    def _release(self, key: QueryKey) -> None:
        entry = self._entries.get(key)
        if entry is None:
            return
        entry.subscribers = max(entry.subscribers - 1, 0)
        if entry.subscribers == 0:
            self.drop(key)

    # ── writes ─────────────────────────────────────────────────────────────

    async def mutate(
        self,
        label: str,
        operation: Loader,
        *,
        invalidates: Iterable[QueryKey | str] = (),
    ) -> Any:
        """Run a write and invalidate ``invalidates`` once it succeeds.

        ``label`` names the operation in failure messages, e.g.
        ``"creating company"`` -> ``"Error creating company: ..."``.
        """
        try:
            result = await operation()
        except Exception as exc:
            log.warning("Error %s: %s", label, exc)
            raise MutationError(label, exc) from exc
        self.invalidate_many(invalidates)
        return result


@dataclass
class Subscription:
    cache: QueryCache
    key: QueryKey
    loader: Loader
    enabled: bool = True
    closed: bool = field(default=False, init=False)

    @property
    def state(self) -> QueryState:
        return self.cache.state(self.key)

    @property
    def data(self) -> Any:
        return self.state.data

    async def refresh(self) -> Any:
        """Read through the cache, refetching if the entry went stale."""
        if self.closed or not self.enabled:
            return self.state.data
        try:
            return await self.cache.fetch(self.key, self.loader)
        except Exception:
            return None

    async def refetch(self) -> Any:
        """Explicit retry: always loads, and raises on failure."""
        return await self.cache.fetch(self.key, self.loader, force=True)

    async def enable(self) -> Any:
        self.enabled = True
        return await self.refresh()

    def disable(self) -> None:
        self.enabled = False

    def close(self) -> None:
        if not self.closed:
            self.closed = True
            self.cache._release(self.key)

    async def __aenter__(self) -> Subscription:
        return self

    async def __aexit__(self, *exc_info) -> None:
        self.close()
