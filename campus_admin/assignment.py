"""Two-list assignment controller for many-to-many relations.

Backs the "manage courses of a module" screen (and its mirror): an ordered
*assigned* list and an *unassigned* pool.  Every move is applied to the local
state first, then sent to the relation endpoint; a failed call restores the
snapshot taken before the move.

Phases per move::

    IDLE -> PENDING_MOVE -> COMMITTED
                         -> ROLLED_BACK

While a move is pending every other move is ignored, so two optimistic
states never overlap for the same parent.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any, Protocol

import structlog

from .cache import QueryCache
from .errors import CampusAdminError, ConflictError, NotFoundError, describe_error
from .models import AssignmentItem, is_terminal_status
from .validation import raise_for_errors, validate_positive_number

logger = structlog.get_logger()

NOT_FOUND_NOTICE = "Relationship not found. Please refresh and try again."


class Phase(str, Enum):
    IDLE = "idle"
    PENDING_MOVE = "pending_move"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


class MoveOutcome(str, Enum):
    COMMITTED = "committed"
    ALREADY_APPLIED = "already_applied"
    ROLLED_BACK = "rolled_back"
    LOCAL = "local"
    IGNORED = "ignored"


@dataclass(frozen=True)
class MoveResult:
    outcome: MoveOutcome
    notice: str | None = None


class RelationBackend(Protocol):
    resource_names: tuple[str, ...]

    async def create(
        self,
        parent_id: int,
        child_id: int,
        *,
        sort_rank: int,
        volume: float | None = None,
        coefficient: float | None = None,
    ) -> Any: ...

    async def delete(self, parent_id: int, child_id: int) -> Any: ...

    async def update(self, parent_id: int, child_id: int, changes: Mapping[str, Any]) -> Any: ...

    async def load(self, parent_id: int) -> tuple[list[AssignmentItem], list[AssignmentItem]]: ...


@dataclass
class TwoListAssignmentState:
    assigned: list[AssignmentItem] = field(default_factory=list)
    unassigned: list[AssignmentItem] = field(default_factory=list)

    def snapshot(self) -> TwoListAssignmentState:
        return TwoListAssignmentState(
            assigned=[item.model_copy(deep=True) for item in self.assigned],
            unassigned=[item.model_copy(deep=True) for item in self.unassigned],
        )

    def restore(self, snapshot: TwoListAssignmentState) -> None:
        copy = snapshot.snapshot()
        self.assigned = copy.assigned
        self.unassigned = copy.unassigned

    def renumber(self) -> None:
        for rank, item in enumerate(self.assigned):
            item.sort_rank = rank

    def index_of(self, items: list[AssignmentItem], item_id: int) -> int | None:
        for index, item in enumerate(items):
            if item.id == item_id:
                return index
        return None

    def invariant_violations(self) -> list[str]:
        problems: list[str] = []
        ranks = [item.sort_rank for item in self.assigned]
        if ranks != list(range(len(self.assigned))):
            problems.append(f"assigned ranks are not dense: {ranks}")
        overlap = {i.id for i in self.assigned} & {i.id for i in self.unassigned}
        if overlap:
            problems.append(f"items on both sides: {sorted(overlap)}")
        terminal = [i.id for i in (*self.assigned, *self.unassigned) if is_terminal_status(i.status)]
        if terminal:
            problems.append(f"deleted items listed: {terminal}")
        return problems


def build_state(
    assigned: Iterable[AssignmentItem],
    candidates: Iterable[AssignmentItem],
) -> TwoListAssignmentState:
    """Assemble the two lists from relation rows and every child entity.

    Assigned items are ordered by their stored rank (unranked last) and
    renumbered; soft-deleted entities are left out of both lists.
    """
    seen: set[int] = set()
    live: list[AssignmentItem] = []
    for item in sorted(assigned, key=lambda i: (i.sort_rank is None, i.sort_rank or 0)):
        if is_terminal_status(item.status) or item.id in seen:
            continue
        seen.add(item.id)
        live.append(item.model_copy(deep=True))

    pool: list[AssignmentItem] = []
    for item in candidates:
        if is_terminal_status(item.status) or item.id in seen:
            continue
        seen.add(item.id)
        pool.append(item.model_copy(update={"sort_rank": None, "assigned_at": None}))

    state = TwoListAssignmentState(assigned=live, unassigned=pool)
    state.renumber()
    return state


def _utcnow() -> datetime:
    return datetime.now(UTC)


class AssignmentController:
    """Optimistic assign / unassign / reorder for one parent entity.

    *defaults* carries relation attributes copied onto newly assigned items
    (the parent module's ``volume`` and ``coefficient``).
    """

    def __init__(
        self,
        parent_id: int,
        backend: RelationBackend,
        cache: QueryCache | None = None,
        *,
        defaults: Mapping[str, Any] | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.parent_id = parent_id
        self.state = TwoListAssignmentState()
        self.phase = Phase.IDLE
        self.notice: str | None = None
        self.pending_item_id: int | None = None

        self._backend = backend
        self._cache = cache
        self._defaults = dict(defaults or {})
        self._clock = clock

    @property
    def is_locked(self) -> bool:
        return self.phase is Phase.PENDING_MOVE

    async def load(self) -> TwoListAssignmentState:
        assigned, candidates = await self._backend.load(self.parent_id)
        self.state = build_state(assigned, candidates)
        return self.state

    async def refetch(self) -> TwoListAssignmentState:
        return await self.load()

    # ------------------------------------------------------------------
    # Moves
    # ------------------------------------------------------------------

    async def assign(self, item_id: int) -> MoveResult:
        """Move an unassigned item to the end of the assigned list."""
        if self.is_locked:
            return MoveResult(MoveOutcome.IGNORED)
        index = self.state.index_of(self.state.unassigned, item_id)
        if index is None:
            return MoveResult(MoveOutcome.IGNORED)

        snapshot = self.state.snapshot()
        item = self.state.unassigned.pop(index)
        moved = item.model_copy(
            update={
                "sort_rank": len(self.state.assigned),
                "assigned_at": self._clock(),
                "volume": self._defaults.get("volume"),
                "coefficient": self._defaults.get("coefficient"),
            }
        )
        self.state.assigned.append(moved)

        return await self._sync(
            "assign",
            snapshot,
            item_id,
            lambda: self._backend.create(
                self.parent_id,
                item_id,
                sort_rank=moved.sort_rank,
                volume=moved.volume,
                coefficient=moved.coefficient,
            ),
        )

    async def unassign(self, item_id: int) -> MoveResult:
        """Move an assigned item back to the pool and close the rank gap."""
        if self.is_locked:
            return MoveResult(MoveOutcome.IGNORED)
        index = self.state.index_of(self.state.assigned, item_id)
        if index is None:
            return MoveResult(MoveOutcome.IGNORED)

        snapshot = self.state.snapshot()
        item = self.state.assigned.pop(index)
        self.state.renumber()
        self.state.unassigned.append(
            item.model_copy(
                update={"sort_rank": None, "assigned_at": None, "volume": None, "coefficient": None}
            )
        )

        return await self._sync(
            "unassign",
            snapshot,
            item_id,
            lambda: self._backend.delete(self.parent_id, item_id),
        )

    async def reorder_assigned(self, source: int, destination: int) -> MoveResult:
        """Splice-move inside the assigned list; only the moved rank is sent."""
        if self.is_locked:
            return MoveResult(MoveOutcome.IGNORED)
        size = len(self.state.assigned)
        if source == destination or not (0 <= source < size) or not (0 <= destination < size):
            return MoveResult(MoveOutcome.IGNORED)

        snapshot = self.state.snapshot()
        item = self.state.assigned.pop(source)
        self.state.assigned.insert(destination, item)
        self.state.renumber()

        return await self._sync(
            "reorder",
            snapshot,
            item.id,
            lambda: self._backend.update(self.parent_id, item.id, {"sort_rank": destination}),
        )

    def reorder_unassigned(self, source: int, destination: int) -> MoveResult:
        """Pool order is not persisted, so this never touches the backend."""
        if self.is_locked:
            return MoveResult(MoveOutcome.IGNORED)
        size = len(self.state.unassigned)
        if source == destination or not (0 <= source < size) or not (0 <= destination < size):
            return MoveResult(MoveOutcome.IGNORED)
        item = self.state.unassigned.pop(source)
        self.state.unassigned.insert(destination, item)
        return MoveResult(MoveOutcome.LOCAL)

    async def edit_assignment(
        self,
        item_id: int,
        *,
        volume: float | None = None,
        coefficient: float | None = None,
    ) -> MoveResult:
        """Change the relation's own volume/coefficient (not the child entity's)."""
        raise_for_errors(
            {
                "volume": validate_positive_number(volume, "Volume"),
                "coefficient": validate_positive_number(coefficient, "Coefficient"),
            }
        )
        if self.is_locked:
            return MoveResult(MoveOutcome.IGNORED)
        index = self.state.index_of(self.state.assigned, item_id)
        if index is None:
            return MoveResult(MoveOutcome.IGNORED)

        snapshot = self.state.snapshot()
        changes = {"volume": volume, "coefficient": coefficient}
        self.state.assigned[index] = self.state.assigned[index].model_copy(update=changes)

        return await self._sync(
            "edit",
            snapshot,
            item_id,
            lambda: self._backend.update(self.parent_id, item_id, changes),
        )

    # ------------------------------------------------------------------
    # Network round-trip
    # ------------------------------------------------------------------

    async def _sync(
        self,
        action: str,
        snapshot: TwoListAssignmentState,
        item_id: int,
        call: Callable[[], Awaitable[Any]],
    ) -> MoveResult:
        self.phase = Phase.PENDING_MOVE
        self.pending_item_id = item_id
        self.notice = None
        log = logger.bind(action=action, parent_id=self.parent_id, item_id=item_id)

        try:
            await call()
        except ConflictError:
            # the relation already exists server-side: the move stands
            log.info("assignment_already_applied")
            result = MoveResult(MoveOutcome.ALREADY_APPLIED)
        except NotFoundError:
            log.warning("assignment_relation_missing")
            return self._rollback(snapshot, NOT_FOUND_NOTICE)
        except CampusAdminError as exc:
            log.warning("assignment_failed", error=str(exc))
            return self._rollback(snapshot, f"Error: {describe_error(exc, f'Failed to {action} item')}")
        except BaseException:
            self.state.restore(snapshot)
            self.phase = Phase.ROLLED_BACK
            raise
        else:
            log.info("assignment_committed")
            result = MoveResult(MoveOutcome.COMMITTED)
        finally:
            self.pending_item_id = None

        self.phase = Phase.COMMITTED
        await self._refresh(log)
        return result

    def _rollback(self, snapshot: TwoListAssignmentState, notice: str) -> MoveResult:
        self.state.restore(snapshot)
        self.phase = Phase.ROLLED_BACK
        self.notice = notice
        return MoveResult(MoveOutcome.ROLLED_BACK, notice)

    async def _refresh(self, log: Any) -> None:
        """Invalidate cached lists touched by the relation and reload both lists."""
        try:
            if self._cache is not None:
                for resource in self._backend.resource_names:
                    await self._cache.invalidate(resource)
            await self.load()
        except CampusAdminError as exc:
            # the move is committed; the optimistic lists stay until the next load
            log.warning("assignment_reload_failed", error=str(exc))
