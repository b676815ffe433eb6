"""Data models shared by the resource modules, queries and assignment controller."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from enum import IntEnum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")
U = TypeVar("U")


class Status(IntEnum):
    """Record status convention used by every backend entity."""

    DELETED = -2
    ARCHIVED = -1
    DISABLED = 0
    ACTIVE = 1
    PENDING = 2

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @property
    def is_terminal(self) -> bool:
        return self is Status.DELETED


def is_terminal_status(value: Any) -> bool:
    """True when *value* is the soft-deleted status (accepts ints or numeric strings)."""
    try:
        return int(value) == Status.DELETED
    except (TypeError, ValueError):
        return False


class PaginatedResult(BaseModel, Generic[T]):
    """Canonical page of results, whatever shape the backend replied with."""

    items: list[T] = Field(default_factory=list)
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=10, ge=1)
    total_items: int = Field(default=0, ge=0)
    total_pages: int = Field(default=1, ge=1)
    has_next: bool = False
    has_previous: bool = False

    def to_envelope(self) -> dict[str, Any]:
        """Render the ``{data, meta}`` wire shape with every meta key present."""
        return {
            "data": list(self.items),
            "meta": {
                "page": self.page,
                "limit": self.page_size,
                "total": self.total_items,
                "totalPages": self.total_pages,
                "hasNext": self.has_next,
                "hasPrevious": self.has_previous,
            },
        }

    def map_items(self, fn: Callable[[T], U]) -> PaginatedResult[U]:
        return PaginatedResult[Any](
            items=[fn(item) for item in self.items],
            page=self.page,
            page_size=self.page_size,
            total_items=self.total_items,
            total_pages=self.total_pages,
            has_next=self.has_next,
            has_previous=self.has_previous,
        )


class ListParams(BaseModel):
    """Pagination, search and filter parameters for list endpoints.

    Entity-specific filters (``specialization_id``, ``student_id`` ...) are
    accepted as extra fields; each resource decides which ones it forwards.
    """

    model_config = ConfigDict(extra="allow")

    page: int | None = None
    limit: int | None = None
    search: str | None = None
    status: int | None = None

    def as_dict(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


# ----------------------------------------------------------------------
# Entities
# ----------------------------------------------------------------------


class Record(BaseModel):
    """Permissive base for backend entities; unknown fields are preserved."""

    model_config = ConfigDict(extra="allow")

    id: int | None = None
    status: int | None = None
    company_id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class Course(Record):
    title: str = ""
    description: str | None = None
    volume: float | None = None
    coefficient: float | None = None


class Module(Record):
    title: str = ""
    description: str | None = None
    volume: float | None = None
    coefficient: float | None = None


class ModuleCourse(BaseModel):
    """One row of the module <-> course relation."""

    model_config = ConfigDict(extra="allow")

    module_id: int
    course_id: int
    tri: int | None = None
    volume: float | None = None
    coefficient: float | None = None
    status: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    module: dict[str, Any] | None = None
    course: dict[str, Any] | None = None


class Level(Record):
    title: str = ""
    description: str | None = None
    level: int | None = None
    specialization_id: int | None = None


class Teacher(Record):
    first_name: str = ""
    last_name: str = ""
    email: str | None = None
    picture: str | None = None


class Student(Record):
    first_name: str = ""
    last_name: str = ""
    email: str | None = None
    picture: str | None = None


# ----------------------------------------------------------------------
# Assignment
# ----------------------------------------------------------------------


class AssignmentItem(BaseModel):
    """An entity on either side of a two-list assignment screen.

    ``sort_rank`` and ``assigned_at`` describe the relation row and are
    ``None`` while the item sits in the unassigned list.
    """

    id: int
    title: str = ""
    status: int | None = None
    sort_rank: int | None = None
    assigned_at: datetime | None = None
    volume: float | None = None
    coefficient: float | None = None
