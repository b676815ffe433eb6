"""Base class shared by every per-entity API module."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, ClassVar

import structlog
from pydantic import BaseModel

from ..http import APIClient, Files
from ..models import ListParams, PaginatedResult, Record, Status
from ..pagination import normalize_list_response
from ..session import SessionStore
from ..validation import (
    raise_for_errors,
    validate_date_order,
    validate_positive_number,
    validate_required,
    validate_time_order,
)

logger = structlog.get_logger()

BASE_FILTER_KEYS: tuple[str, ...] = ("page", "limit", "search", "status")


class TenantPolicy:
    """Decides which tenant id is stamped on outgoing payloads.

    The logged-in user's company wins; the configured default is only used
    when the session does not carry one.  Caller-supplied values are
    overwritten because the backend rejects cross-tenant writes anyway.
    """

    def __init__(self, session_store: SessionStore, default_tenant_id: int) -> None:
        self._sessions = session_store
        self._default = default_tenant_id

    @property
    def tenant_id(self) -> int:
        return self._sessions.tenant_id(self._default)

    def stamp(self, payload: Mapping[str, Any], field: str | None) -> dict[str, Any]:
        body = dict(payload)
        if field is not None:
            body[field] = self.tenant_id
        return body


class ResourceAPI:
    """CRUD access to one backend resource.

    Subclasses only declare class attributes:

    * ``name``: resource name used for cache keys and invalidation
    * ``path``: collection path (``/levels``)
    * ``filter_keys``: query parameters forwarded by :meth:`list`
    * ``create_defaults``: values a create payload is merged over
    * ``tenant_field``: payload key carrying the tenant id (``None`` to skip)
    * ``model``: pydantic model the backend records are parsed into
    * ``required_fields`` / ``positive_fields``: field -> label for validation
    * ``create_only_fields``: required on create, optional on update
    * ``date_ranges`` / ``time_ranges``: ``(start_field, end_field)`` pairs that must be ordered
    """

    name: ClassVar[str]
    path: ClassVar[str]
    filter_keys: ClassVar[tuple[str, ...]] = BASE_FILTER_KEYS
    create_defaults: ClassVar[dict[str, Any]] = {"status": int(Status.ACTIVE)}
    tenant_field: ClassVar[str | None] = "company_id"
    model: ClassVar[type[BaseModel]] = Record
    required_fields: ClassVar[dict[str, str]] = {}
    create_only_fields: ClassVar[dict[str, str]] = {}
    positive_fields: ClassVar[dict[str, str]] = {}
    date_ranges: ClassVar[tuple[tuple[str, str], ...]] = ()
    time_ranges: ClassVar[tuple[tuple[str, str], ...]] = ()

    def __init__(self, client: APIClient, tenant: TenantPolicy) -> None:
        self._client = client
        self._tenant = tenant

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def item_path(self, item_id: int | str) -> str:
        return f"{self.path}/{item_id}"

    def build_query(self, params: ListParams | Mapping[str, Any] | None = None) -> dict[str, str]:
        """Keep the allow-listed, non-empty params, stringified.

        ``search`` is trimmed and dropped when blank.  Paging values and ids of
        0 are dropped, while ``status=0`` (disabled) is a real filter.
        """
        if isinstance(params, ListParams):
            raw = params.as_dict()
        else:
            raw = dict(params or {})

        query: dict[str, str] = {}
        for key in self.filter_keys:
            value = raw.get(key)
            if value is None:
                continue
            if isinstance(value, bool):
                value = "true" if value else "false"
            elif key == "search":
                value = str(value).strip()
                if not value:
                    continue
            elif (key in ("page", "limit") or key.endswith(("_id", "Id"))) and not value:
                continue
            elif value == "":
                continue
            query[key] = str(value)
        return query

    def parse(self, data: Any) -> Any:
        if isinstance(data, dict):
            # some endpoints wrap single records as {"data": {...}}
            if "data" in data and isinstance(data["data"], dict) and "id" not in data:
                data = data["data"]
            return self.model.model_validate(data)
        return data

    def validate(self, payload: Mapping[str, Any], *, partial: bool = False) -> None:
        """Raise :class:`~campus_admin.errors.ValidationError` before any request."""
        checks: dict[str, str] = {}
        for field, label in self.required_fields.items():
            if partial and field not in payload:
                continue
            checks[field] = validate_required(payload.get(field), label)
        if not partial:
            for field, label in self.create_only_fields.items():
                checks[field] = validate_required(payload.get(field), label)
        for field, label in self.positive_fields.items():
            if not checks.get(field):
                checks[field] = validate_positive_number(payload.get(field), label)
        for start, end in self.date_ranges:
            checks.setdefault(end, "")
            if not checks[end]:
                checks[end] = validate_date_order(payload.get(start), payload.get(end))
        for start, end in self.time_ranges:
            checks.setdefault(end, "")
            if not checks[end]:
                checks[end] = validate_time_order(payload.get(start), payload.get(end))
        raise_for_errors(checks)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def list(
        self,
        params: ListParams | Mapping[str, Any] | None = None,
        **filters: Any,
    ) -> PaginatedResult[Any]:
        merged = params.as_dict() if isinstance(params, ListParams) else dict(params or {})
        merged.update(filters)
        raw = await self._client.get(self.path, params=self.build_query(merged))
        return normalize_list_response(raw).map_items(self.parse)

    async def get(self, item_id: int | str) -> Any:
        return self.parse(await self._client.get(self.item_path(item_id)))

    async def create(self, payload: Mapping[str, Any], *, files: Files | None = None) -> Any:
        body = {**self.create_defaults, **payload}
        for key, value in self.create_defaults.items():
            if body.get(key) is None:
                body[key] = value
        body = self._tenant.stamp(body, self.tenant_field)
        self.validate(body)

        created = self.parse(await self._client.post(self.path, body, files=files))
        logger.info("resource_created", resource=self.name, id=getattr(created, "id", None))
        return created

    async def update(
        self,
        item_id: int | str,
        payload: Mapping[str, Any],
        *,
        files: Files | None = None,
    ) -> Any:
        body = self._tenant.stamp(payload, self.tenant_field)
        self.validate(body, partial=True)

        updated = self.parse(await self._client.patch(self.item_path(item_id), body, files=files))
        logger.info("resource_updated", resource=self.name, id=item_id)
        return updated

    async def delete(self, item_id: int | str) -> None:
        """Remove the row (hard delete)."""
        await self._client.delete(self.item_path(item_id))
        logger.info("resource_deleted", resource=self.name, id=item_id)

    async def soft_delete(self, item_id: int | str) -> Any:
        """Mark the row deleted (``status=-2``) and keep it."""
        result = await self.update(item_id, {"status": int(Status.DELETED)})
        logger.info("resource_soft_deleted", resource=self.name, id=item_id)
        return result
