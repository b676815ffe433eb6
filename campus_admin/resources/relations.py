"""Relation endpoints: module <-> course (with its assignment adapter) and class enrolment."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal

import structlog

from ..http import Files
from ..models import AssignmentItem, ModuleCourse, PaginatedResult, Status, is_terminal_status
from .base import BASE_FILTER_KEYS, ResourceAPI

logger = structlog.get_logger()


class ModuleCourseAPI(ResourceAPI):
    """Rows are addressed by the ``(module_id, course_id)`` pair, not an id.

    ``tri`` is the backend's name for the zero-based rank of a course inside
    its module.
    """

    name = "module_course"
    path = "/module-course"
    model = ModuleCourse
    filter_keys = ("page", "limit", "module_id", "course_id")
    create_defaults = {}
    tenant_field = None
    required_fields = {"module_id": "Select a module", "course_id": "Select a course"}
    positive_fields = {"tri": "Rank", "volume": "Volume", "coefficient": "Coefficient"}

    def relation_path(self, module_id: int, course_id: int) -> str:
        return f"{self.path}/{module_id}/{course_id}"

    async def get(self, module_id: int, course_id: int) -> ModuleCourse:  # type: ignore[override]
        return self.parse(await self._client.get(self.relation_path(module_id, course_id)))

    async def update(  # type: ignore[override]
        self,
        module_id: int,
        course_id: int,
        payload: Mapping[str, Any],
    ) -> ModuleCourse:
        body = dict(payload)
        self.validate(body, partial=True)
        updated = self.parse(await self._client.patch(self.relation_path(module_id, course_id), body))
        logger.info("relation_updated", module_id=module_id, course_id=course_id, fields=sorted(body))
        return updated

    async def delete(self, module_id: int, course_id: int) -> None:  # type: ignore[override]
        await self._client.delete(self.relation_path(module_id, course_id))
        logger.info("relation_deleted", module_id=module_id, course_id=course_id)

    async def courses_for_module(self, module_id: int, **params: Any) -> PaginatedResult[Any]:
        return await self.list(params, module_id=module_id)

    async def modules_for_course(self, course_id: int, **params: Any) -> PaginatedResult[Any]:
        return await self.list(params, course_id=course_id)


class ClassStudentAPI(ResourceAPI):
    """Enrolment of a student in a class.

    Unlike module-course rows these have their own id.  ``tri`` is 1-based.
    """

    name = "class_students"
    path = "/class-student"
    filter_keys = (*BASE_FILTER_KEYS, "class_id", "student_id", "company_id")
    create_defaults = {"status": int(Status.ACTIVE), "tri": 1}
    required_fields = {"class_id": "Select a class", "student_id": "Select a student"}

    async def create(self, payload: Mapping[str, Any], *, files: Files | None = None) -> Any:
        body = dict(payload)
        if body.get("tri") is not None and body["tri"] < 1:
            body["tri"] = 1
        return await super().create(body, files=files)


class ModuleCourseRelations:
    """Drives :class:`~campus_admin.assignment.AssignmentController` for one side.

    With ``side="module"`` the parent is a module and the items are courses
    (the "manage courses of a module" screen); ``side="course"`` is the
    mirror image.
    """

    def __init__(
        self,
        relations: ModuleCourseAPI,
        children: ResourceAPI,
        *,
        side: Literal["module", "course"] = "module",
        page_size: int = 1000,
    ) -> None:
        self._relations = relations
        self._children = children
        self._side = side
        self._page_size = page_size

    @property
    def resource_names(self) -> tuple[str, ...]:
        return (self._relations.name, "courses", "modules")

    def _pair(self, parent_id: int, child_id: int) -> tuple[int, int]:
        if self._side == "module":
            return parent_id, child_id
        return child_id, parent_id

    async def create(
        self,
        parent_id: int,
        child_id: int,
        *,
        sort_rank: int,
        volume: float | None = None,
        coefficient: float | None = None,
    ) -> None:
        module_id, course_id = self._pair(parent_id, child_id)
        body: dict[str, Any] = {"module_id": module_id, "course_id": course_id, "tri": sort_rank}
        if volume is not None:
            body["volume"] = volume
        if coefficient is not None:
            body["coefficient"] = coefficient
        await self._relations.create(body)

    async def delete(self, parent_id: int, child_id: int) -> None:
        await self._relations.delete(*self._pair(parent_id, child_id))

    async def update(self, parent_id: int, child_id: int, changes: Mapping[str, Any]) -> None:
        body = dict(changes)
        if "sort_rank" in body:
            body["tri"] = body.pop("sort_rank")
        await self._relations.update(*self._pair(parent_id, child_id), body)

    async def load(self, parent_id: int) -> tuple[list[AssignmentItem], list[AssignmentItem]]:
        """Return ``(assigned, candidates)`` for *parent_id*.

        Candidates are every entity of the child type; the caller removes
        the assigned ones and anything soft-deleted.
        """
        if self._side == "module":
            page = await self._relations.courses_for_module(parent_id, limit=self._page_size)
        else:
            page = await self._relations.modules_for_course(parent_id, limit=self._page_size)
        children = await self._children.list(limit=self._page_size)

        by_id = {child.id: child for child in children.items if getattr(child, "id", None) is not None}
        child_key = "course" if self._side == "module" else "module"

        assigned: list[AssignmentItem] = []
        for row in page.items:
            if is_terminal_status(row.status):
                continue
            child_id = row.course_id if self._side == "module" else row.module_id
            embedded = getattr(row, child_key) or {}
            record = by_id.get(child_id)
            assigned.append(
                AssignmentItem(
                    id=child_id,
                    title=getattr(record, "title", None) or embedded.get("title") or "",
                    status=getattr(record, "status", None),
                    sort_rank=row.tri,
                    assigned_at=row.created_at,
                    volume=row.volume,
                    coefficient=row.coefficient,
                )
            )

        candidates = [
            AssignmentItem(id=child.id, title=getattr(child, "title", "") or "", status=child.status)
            for child in by_id.values()
        ]
        logger.debug(
            "assignments_loaded",
            side=self._side,
            parent_id=parent_id,
            assigned=len(assigned),
            candidates=len(candidates),
        )
        return assigned, candidates