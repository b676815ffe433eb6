"""List response normalization.

List endpoints reply with either a bare JSON array or a ``{data, meta}``
envelope whose ``meta`` may be partial.  The payload is decoded once, here,
into one of two tagged shapes and then folded into a
:class:`~campus_admin.models.PaginatedResult`; nothing past this module ever
sees the raw union.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .models import PaginatedResult

DEFAULT_PAGE_SIZE = 10


class ListMeta(BaseModel):
    """Pagination metadata as the backend spells it.

    Every field is optional and a value that does not coerce is dropped
    instead of failing the whole payload.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    page: int | None = Field(default=None, ge=1)
    limit: int | None = Field(default=None, ge=1)
    total: int | None = Field(default=None, ge=0)
    total_pages: int | None = Field(default=None, ge=1, alias="totalPages")
    last_page: int | None = Field(default=None, ge=1, alias="lastPage")
    has_next: bool | None = Field(default=None, alias="hasNext")
    has_previous: bool | None = Field(default=None, alias="hasPrevious")

    @field_validator("*", mode="wrap")
    @classmethod
    def _lenient(cls, value: Any, handler: Any) -> Any:
        try:
            return handler(value)
        except ValidationError:
            return None


class ListEnvelope(BaseModel):
    """The ``{data, meta}`` shape."""

    model_config = ConfigDict(extra="ignore")

    kind: Literal["envelope"] = "envelope"
    data: list[Any] = Field(default_factory=list)
    meta: ListMeta = Field(default_factory=ListMeta)

    @field_validator("data", mode="wrap")
    @classmethod
    def _data_or_empty(cls, value: Any, handler: Any) -> Any:
        if value is None:
            return []
        try:
            return handler(value)
        except ValidationError:
            return []

    @field_validator("meta", mode="wrap")
    @classmethod
    def _meta_or_empty(cls, value: Any, handler: Any) -> Any:
        if not isinstance(value, dict):
            return ListMeta()
        return handler(value)


@dataclass(frozen=True)
class BareList:
    """A plain JSON array of entities."""

    items: list[Any]
    kind: Literal["bare"] = "bare"


def decode_list_response(raw: Any) -> BareList | ListEnvelope | None:
    """Decode *raw* into one of the accepted shapes, or ``None`` if it is neither."""
    if isinstance(raw, (str, bytes)) or raw is None:
        return None
    if isinstance(raw, Sequence):
        return BareList(items=list(raw))
    if isinstance(raw, dict):
        try:
            return ListEnvelope.model_validate(raw)
        except ValidationError:
            return None
    return None


def normalize_list_response(raw: Any) -> PaginatedResult[Any]:
    """Fold any accepted list payload into a :class:`PaginatedResult`.

    Pure and total: malformed input yields an empty first page.
    """
    decoded = decode_list_response(raw)

    if decoded is None:
        return PaginatedResult[Any](items=[], page=1, page_size=DEFAULT_PAGE_SIZE)

    if isinstance(decoded, BareList):
        size = len(decoded.items)
        return PaginatedResult[Any](
            items=decoded.items,
            page=1,
            # an empty array has no natural page size; use the envelope default
            page_size=size or DEFAULT_PAGE_SIZE,
            total_items=size,
            total_pages=1,
            has_next=False,
            has_previous=False,
        )

    items = decoded.data
    meta = decoded.meta

    page = meta.page if meta.page is not None else 1
    page_size = meta.limit if meta.limit is not None else (len(items) or DEFAULT_PAGE_SIZE)
    total_items = meta.total if meta.total is not None else len(items)

    if meta.total_pages is not None:
        total_pages = meta.total_pages
    elif meta.last_page is not None:
        total_pages = meta.last_page
    else:
        total_pages = max(1, math.ceil(total_items / page_size))

    has_next = meta.has_next if meta.has_next is not None else page < total_pages
    has_previous = meta.has_previous if meta.has_previous is not None else page > 1

    return PaginatedResult[Any](
        items=items,
        page=page,
        page_size=page_size,
        total_items=total_items,
        total_pages=total_pages,
        has_next=has_next,
        has_previous=has_previous,
    )
