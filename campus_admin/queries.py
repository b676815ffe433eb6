"""Paginated queries and mutations bound to a :class:`QueryCache`."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import Any, Generic, TypeVar

import structlog

from .cache import QueryCache
from .models import PaginatedResult

logger = structlog.get_logger()

T = TypeVar("T")
R = TypeVar("R")

Fetch = Callable[[dict[str, Any]], Awaitable[PaginatedResult[T]]]


class PaginatedQuery(Generic[T]):
    """A list view's data source.

    Changing the parameters issues a new fetch while the previous page stays
    in :attr:`data`, so paging never flashes an empty table.  When requests
    overlap, only the most recently issued one updates :attr:`data` and
    :attr:`error`; each result still lands in its own cache slot.

    The query refetches whenever its resource is invalidated, until it is
    closed (or used as ``async with`` and the block exits) or garbage
    collected.
    """

    def __init__(
        self,
        cache: QueryCache,
        resource: str,
        fetch: Fetch[T],
        params: Mapping[str, Any] | None = None,
    ) -> None:
        self.resource = resource
        self.params: dict[str, Any] = dict(params or {})
        self.data: PaginatedResult[T] | None = None
        self.error: BaseException | None = None

        self._cache = cache
        self._fetch = fetch
        self._generation = 0
        self._in_flight = 0
        cache.watch(resource, self)

    @property
    def is_fetching(self) -> bool:
        return self._in_flight > 0

    @property
    def is_loading(self) -> bool:
        """True only while nothing, not even a previous page, can be shown."""
        return self.is_fetching and self.data is None

    async def set_params(self, params: Mapping[str, Any]) -> PaginatedResult[T] | None:
        self.params = dict(params)
        return await self._load(force=False)

    async def update_params(self, **changes: Any) -> PaginatedResult[T] | None:
        """Merge *changes* into the current params (``page=2``, ``search="x"``)."""
        return await self.set_params({**self.params, **changes})

    async def load(self) -> PaginatedResult[T] | None:
        return await self._load(force=False)

    async def refetch(self) -> PaginatedResult[T] | None:
        return await self._load(force=True)

    def close(self) -> None:
        """Stop refetching on invalidation."""
        self._cache.unwatch(self.resource, self)

    async def __aenter__(self) -> PaginatedQuery[T]:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.close()

    async def _load(self, *, force: bool) -> PaginatedResult[T] | None:
        params = dict(self.params)
        key = self._cache.key(self.resource, params)

        # bumped before the cache check so a fresh hit also supersedes older requests
        self._generation += 1
        generation = self._generation

        if not force and self._cache.has_fresh(key):
            self.data = self._cache.get(key)
            self.error = None
            return self.data

        self._in_flight += 1
        try:
            result = await self._fetch(params)
        except Exception as exc:
            logger.warning("query_failed", resource=self.resource, params=params, error=str(exc))
            if generation == self._generation:
                self.error = exc
            return self.data
        finally:
            self._in_flight -= 1

        self._cache.set(key, result)
        if generation == self._generation:
            self.data = result
            self.error = None
        else:
            logger.debug("query_result_superseded", resource=self.resource, params=params)
        return self.data


class Mutation(Generic[R]):
    """Create/update/delete call that invalidates its resources on success.

    Failures propagate unchanged; turning them into a message is the
    caller's job (see :func:`campus_admin.errors.describe_error`).
    """

    def __init__(
        self,
        cache: QueryCache,
        resources: str | Sequence[str],
        fn: Callable[..., Awaitable[R]],
    ) -> None:
        self.resources = [resources] if isinstance(resources, str) else list(resources)
        self._cache = cache
        self._fn = fn
        self._pending = 0

    @property
    def is_pending(self) -> bool:
        return self._pending > 0

    async def mutate_async(self, *args: Any, **kwargs: Any) -> R:
        self._pending += 1
        try:
            result = await self._fn(*args, **kwargs)
            for resource in self.resources:
                await self._cache.invalidate(resource)
            return result
        finally:
            self._pending -= 1
