"""Query cache keyed by ``(resource name, serialized params)``.

One instance is shared by the queries, mutations and assignment controllers
of a client.  Invalidation is coarse: it covers every cached page and filter
combination of a resource.  Slots a live query is showing are kept (stale)
and refetched; every other slot of the resource is evicted.  Watchers are
held weakly, so a query nobody references stops being refetched.
"""

from __future__ import annotations

import json
import weakref
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol

import structlog

logger = structlog.get_logger()

CacheKey = tuple[str, str]


class Refetchable(Protocol):
    params: Mapping[str, Any]

    async def refetch(self) -> Any: ...


@dataclass
class CacheEntry:
    value: Any
    stale: bool = False


def serialize_params(params: Mapping[str, Any] | None) -> str:
    """Stable serialization: equal filter dicts produce equal keys."""
    cleaned = {k: v for k, v in (params or {}).items() if v is not None}
    return json.dumps(cleaned, sort_keys=True, default=str, separators=(",", ":"))


class QueryCache:
    def __init__(self) -> None:
        self._entries: dict[CacheKey, CacheEntry] = {}
        self._watchers: dict[str, weakref.WeakSet[Refetchable]] = {}

    @staticmethod
    def key(resource: str, params: Mapping[str, Any] | None = None) -> CacheKey:
        return (resource, serialize_params(params))

    def get(self, key: CacheKey) -> Any | None:
        entry = self._entries.get(key)
        return entry.value if entry is not None else None

    def has_fresh(self, key: CacheKey) -> bool:
        entry = self._entries.get(key)
        return entry is not None and not entry.stale

    def is_stale(self, key: CacheKey) -> bool:
        entry = self._entries.get(key)
        return entry is None or entry.stale

    def set(self, key: CacheKey, value: Any) -> None:
        self._entries[key] = CacheEntry(value=value)

    def keys(self, resource: str | None = None) -> list[CacheKey]:
        return [k for k in self._entries if resource is None or k[0] == resource]

    # ------------------------------------------------------------------
    # Watchers
    # ------------------------------------------------------------------

    def watch(self, resource: str, query: Refetchable) -> None:
        self._watchers.setdefault(resource, weakref.WeakSet()).add(query)

    def unwatch(self, resource: str, query: Refetchable) -> None:
        watchers = self._watchers.get(resource)
        if watchers is not None:
            watchers.discard(query)

    # ------------------------------------------------------------------
    # Invalidation
    # ------------------------------------------------------------------

    async def invalidate(self, resource: str) -> None:
        """Invalidate every entry of *resource* and refetch its live queries."""
        watchers = list(self._watchers.get(resource, ()))
        watched = {self.key(resource, query.params) for query in watchers}

        stale = evicted = 0
        for key in self.keys(resource):
            if key in watched:
                self._entries[key].stale = True
                stale += 1
            else:
                del self._entries[key]
                evicted += 1
        logger.debug(
            "cache_invalidated",
            resource=resource,
            stale=stale,
            evicted=evicted,
            watchers=len(watchers),
        )

        for query in watchers:
            await query.refetch()

    def clear(self) -> None:
        self._entries.clear()
