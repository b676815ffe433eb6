"""Tests for campus_admin.queries."""

from __future__ import annotations

import asyncio
import gc

import pytest

from campus_admin.cache import QueryCache
from campus_admin.errors import APIError, TransportError
from campus_admin.models import PaginatedResult
from campus_admin.queries import Mutation, PaginatedQuery


def _page(page: int, total_pages: int = 5) -> PaginatedResult:
    return PaginatedResult(
        items=[f"row-{page}"],
        page=page,
        page_size=1,
        total_items=total_pages,
        total_pages=total_pages,
        has_next=page < total_pages,
        has_previous=page > 1,
    )


class _Backend:
    """Fetch function whose calls can be held open per page."""

    def __init__(self) -> None:
        self.calls: list[dict] = []
        self.gates: dict[int, asyncio.Event] = {}
        self.fail_with: BaseException | None = None

    async def fetch(self, params: dict) -> PaginatedResult:
        self.calls.append(params)
        page = params.get("page", 1)
        gate = self.gates.get(page)
        if gate is not None:
            await gate.wait()
        if self.fail_with is not None:
            raise self.fail_with
        return _page(page)


@pytest.fixture
def cache() -> QueryCache:
    return QueryCache()


@pytest.fixture
def backend() -> _Backend:
    return _Backend()


class TestPaginatedQuery:
    @pytest.mark.asyncio
    async def test_initial_load(self, cache, backend):
        query = PaginatedQuery(cache, "levels", backend.fetch, {"page": 1})
        assert query.data is None
        result = await query.load()
        assert result == _page(1)
        assert query.data == _page(1)
        assert query.error is None
        assert query.is_fetching is False

    @pytest.mark.asyncio
    async def test_fresh_cache_hit_skips_fetch(self, cache, backend):
        first = PaginatedQuery(cache, "levels", backend.fetch, {"page": 1})
        second = PaginatedQuery(cache, "levels", backend.fetch, {"page": 1})
        await first.load()
        await second.load()
        assert len(backend.calls) == 1
        assert second.data == _page(1)

    @pytest.mark.asyncio
    async def test_previous_page_kept_while_next_loads(self, cache, backend):
        query = PaginatedQuery(cache, "levels", backend.fetch, {"page": 1})
        await query.load()

        backend.gates[2] = asyncio.Event()
        task = asyncio.create_task(query.update_params(page=2))
        await asyncio.sleep(0)

        assert query.is_fetching is True
        assert query.is_loading is False
        assert query.data == _page(1)
        assert query.params == {"page": 2}

        backend.gates[2].set()
        await task
        assert query.data == _page(2)
        assert query.is_fetching is False

    @pytest.mark.asyncio
    async def test_is_loading_without_data(self, cache, backend):
        backend.gates[1] = asyncio.Event()
        query = PaginatedQuery(cache, "levels", backend.fetch, {"page": 1})
        task = asyncio.create_task(query.load())
        await asyncio.sleep(0)
        assert query.is_loading is True
        backend.gates[1].set()
        await task
        assert query.is_loading is False

    @pytest.mark.asyncio
    async def test_latest_request_wins(self, cache, backend):
        query = PaginatedQuery(cache, "levels", backend.fetch, {"page": 1})
        backend.gates[2] = asyncio.Event()
        backend.gates[3] = asyncio.Event()

        older = asyncio.create_task(query.update_params(page=2))
        await asyncio.sleep(0)
        newer = asyncio.create_task(query.update_params(page=3))
        await asyncio.sleep(0)

        backend.gates[3].set()
        await newer
        backend.gates[2].set()
        await older

        assert query.data == _page(3)
        assert cache.get(cache.key("levels", {"page": 2})) == _page(2)

    @pytest.mark.asyncio
    async def test_cached_page_supersedes_pending_request(self, cache, backend):
        query = PaginatedQuery(cache, "levels", backend.fetch, {"page": 1})
        await query.load()

        backend.gates[2] = asyncio.Event()
        pending = asyncio.create_task(query.set_params({"page": 2}))
        await asyncio.sleep(0)

        # back to page 1, served from the cache while page 2 is still loading
        await query.set_params({"page": 1})
        backend.gates[2].set()
        await pending

        assert query.params == {"page": 1}
        assert query.data == _page(1)
        assert cache.has_fresh(cache.key("levels", {"page": 2}))

    @pytest.mark.asyncio
    async def test_error_keeps_previous_data(self, cache, backend):
        query = PaginatedQuery(cache, "levels", backend.fetch, {"page": 1})
        await query.load()

        backend.fail_with = TransportError()
        result = await query.update_params(page=2)

        assert result == _page(1)
        assert isinstance(query.error, TransportError)

        backend.fail_with = None
        await query.refetch()
        assert query.error is None
        assert query.data == _page(2)

    @pytest.mark.asyncio
    async def test_invalidation_refetches_active_query(self, cache, backend):
        query = PaginatedQuery(cache, "levels", backend.fetch, {"page": 1})
        await query.load()
        await cache.invalidate("levels")
        assert len(backend.calls) == 2

        query.close()
        await cache.invalidate("levels")
        assert len(backend.calls) == 2

    @pytest.mark.asyncio
    async def test_context_manager_stops_refetching(self, cache, backend):
        async with PaginatedQuery(cache, "levels", backend.fetch, {"page": 1}) as query:
            await query.load()
            await cache.invalidate("levels")
            assert len(backend.calls) == 2

        await cache.invalidate("levels")
        assert len(backend.calls) == 2

    @pytest.mark.asyncio
    async def test_unreferenced_query_is_not_refetched(self, cache, backend):
        query = PaginatedQuery(cache, "levels", backend.fetch, {"page": 1})
        await query.load()
        del query
        gc.collect()

        await cache.invalidate("levels")

        assert len(backend.calls) == 1

    @pytest.mark.asyncio
    async def test_stale_entry_is_refetched_on_load(self, cache, backend):
        query = PaginatedQuery(cache, "levels", backend.fetch, {"page": 1})
        await query.load()
        query.close()
        await cache.invalidate("levels")

        again = PaginatedQuery(cache, "levels", backend.fetch, {"page": 1})
        await again.load()
        assert len(backend.calls) == 2


class TestMutation:
    @pytest.mark.asyncio
    async def test_success_invalidates_resources(self, cache):
        cache.set(cache.key("module_course", {"page": 1}), "rows")
        cache.set(cache.key("courses", {"page": 1}), "rows")
        cache.set(cache.key("levels", {"page": 1}), "rows")

        async def create(payload):
            return {"id": 1, **payload}

        mutation = Mutation(cache, ("module_course", "courses"), create)
        result = await mutation.mutate_async({"title": "x"})

        assert result == {"id": 1, "title": "x"}
        assert cache.is_stale(cache.key("module_course", {"page": 1}))
        assert cache.is_stale(cache.key("courses", {"page": 1}))
        assert cache.has_fresh(cache.key("levels", {"page": 1}))
        assert mutation.is_pending is False

    @pytest.mark.asyncio
    async def test_failure_propagates_without_invalidating(self, cache):
        key = cache.key("levels", {"page": 1})
        cache.set(key, "rows")

        async def fail(*_):
            raise APIError(500, "boom")

        mutation = Mutation(cache, "levels", fail)
        with pytest.raises(APIError, match="boom"):
            await mutation.mutate_async()

        assert cache.has_fresh(key)
        assert mutation.is_pending is False

    @pytest.mark.asyncio
    async def test_pending_while_running(self, cache):
        gate = asyncio.Event()

        async def slow():
            await gate.wait()

        mutation = Mutation(cache, "levels", slow)
        task = asyncio.create_task(mutation.mutate_async())
        await asyncio.sleep(0)
        assert mutation.is_pending is True
        gate.set()
        await task
        assert mutation.is_pending is False
