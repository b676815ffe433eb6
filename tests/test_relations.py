"""Tests for campus_admin.resources.relations."""

from __future__ import annotations

import json

import pytest
import respx

from campus_admin.http import APIClient
from campus_admin.models import AssignmentItem
from campus_admin.resources import CourseAPI, ModuleAPI, ModuleCourseAPI, ModuleCourseRelations, TenantPolicy

BASE_URL = "http://test-api:3000"


@pytest.fixture
def http(api_config, session_store) -> APIClient:
    return APIClient(api_config, session_store)


@pytest.fixture
def relation_api(http, session_store) -> ModuleCourseAPI:
    return ModuleCourseAPI(http, TenantPolicy(session_store, 1))


@pytest.fixture
def courses_of_module(http, session_store, relation_api) -> ModuleCourseRelations:
    return ModuleCourseRelations(relation_api, CourseAPI(http, TenantPolicy(session_store, 1)), side="module")


@pytest.fixture
def modules_of_course(http, session_store, relation_api) -> ModuleCourseRelations:
    return ModuleCourseRelations(relation_api, ModuleAPI(http, TenantPolicy(session_store, 1)), side="course")


class TestModuleCourseAPI:
    @pytest.mark.asyncio
    @respx.mock
    async def test_update_addresses_pair(self, http, relation_api):
        route = respx.patch(f"{BASE_URL}/module-course/3/8").respond(
            200, json={"module_id": 3, "course_id": 8, "tri": 1}
        )

        await http.start()
        try:
            row = await relation_api.update(3, 8, {"tri": 1})
        finally:
            await http.stop()

        assert row.tri == 1
        assert json.loads(route.calls.last.request.content) == {"tri": 1}

    @pytest.mark.asyncio
    @respx.mock
    async def test_create_is_not_tenant_stamped(self, http, relation_api):
        route = respx.post(f"{BASE_URL}/module-course").respond(201, json={"module_id": 3, "course_id": 8})

        await http.start()
        try:
            await relation_api.create({"module_id": 3, "course_id": 8, "tri": 0})
        finally:
            await http.stop()

        assert json.loads(route.calls.last.request.content) == {"module_id": 3, "course_id": 8, "tri": 0}

    @pytest.mark.asyncio
    @respx.mock
    async def test_courses_for_module_filters(self, http, relation_api):
        route = respx.get(f"{BASE_URL}/module-course").respond(200, json=[])

        await http.start()
        try:
            await relation_api.courses_for_module(3, limit=50)
        finally:
            await http.stop()

        assert dict(route.calls.last.request.url.params) == {"module_id": "3", "limit": "50"}


class TestModuleCourseRelations:
    @pytest.mark.asyncio
    @respx.mock
    async def test_load_module_side(self, http, courses_of_module):
        respx.get(f"{BASE_URL}/module-course").respond(
            200,
            json={
                "data": [
                    {"module_id": 3, "course_id": 8, "tri": 1, "volume": 20, "coefficient": 2, "status": 1},
                    {"module_id": 3, "course_id": 9, "tri": 0, "status": 1, "course": {"title": "Embedded"}},
                    {"module_id": 3, "course_id": 10, "tri": 2, "status": -2},
                ],
                "meta": {"page": 1, "limit": 1000, "total": 3},
            },
        )
        respx.get(f"{BASE_URL}/course").respond(
            200,
            json=[
                {"id": 8, "title": "Algebra", "status": 1},
                {"id": 11, "title": "Geometry", "status": 1},
                {"id": 12, "title": "Old", "status": -2},
            ],
        )

        await http.start()
        try:
            assigned, candidates = await courses_of_module.load(3)
        finally:
            await http.stop()

        assert [(i.id, i.title, i.sort_rank) for i in assigned] == [(8, "Algebra", 1), (9, "Embedded", 0)]
        assert assigned[0].volume == 20
        assert [i.id for i in candidates] == [8, 11, 12]

    @pytest.mark.asyncio
    @respx.mock
    async def test_course_side_swaps_pair(self, http, modules_of_course):
        create = respx.post(f"{BASE_URL}/module-course").respond(201, json={"module_id": 4, "course_id": 8})
        update = respx.patch(f"{BASE_URL}/module-course/4/8").respond(200, json={"module_id": 4, "course_id": 8})
        delete = respx.delete(f"{BASE_URL}/module-course/4/8").respond(204)

        await http.start()
        try:
            await modules_of_course.create(8, 4, sort_rank=2)
            await modules_of_course.update(8, 4, {"sort_rank": 0})
            await modules_of_course.delete(8, 4)
        finally:
            await http.stop()

        assert json.loads(create.calls.last.request.content) == {"module_id": 4, "course_id": 8, "tri": 2}
        assert json.loads(update.calls.last.request.content) == {"tri": 0}
        assert delete.called

    def test_resource_names(self, courses_of_module):
        assert courses_of_module.resource_names == ("module_course", "courses", "modules")

    @pytest.mark.asyncio
    @respx.mock
    async def test_create_sends_relation_attributes(self, http, courses_of_module):
        route = respx.post(f"{BASE_URL}/module-course").respond(201, json={"module_id": 3, "course_id": 8})

        await http.start()
        try:
            await courses_of_module.create(3, 8, sort_rank=0, volume=12.5, coefficient=3)
        finally:
            await http.stop()

        assert json.loads(route.calls.last.request.content) == {
            "module_id": 3,
            "course_id": 8,
            "tri": 0,
            "volume": 12.5,
            "coefficient": 3,
        }


def test_assignment_item_defaults():
    item = AssignmentItem(id=1)
    assert item.sort_rank is None
    assert item.assigned_at is None
