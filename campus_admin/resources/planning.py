"""Timetable resources: session types, planned sessions and attendance."""

from __future__ import annotations

from ..models import Status
from .base import ResourceAPI


class PlanningSessionTypeAPI(ResourceAPI):
    name = "planning_session_types"
    path = "/planning-session-types"
    # status is "active" / "inactive" here, not the numeric convention
    filter_keys = ("page", "limit", "status")
    create_defaults = {"status": "active"}
    required_fields = {"title": "Title", "type": "Type"}
    positive_fields = {"coefficient": "Coefficient"}


class PlanningStudentAPI(ResourceAPI):
    """Planned class sessions (a teacher, a class and a room over a time slot)."""

    name = "planning_students"
    path = "/planning-student"
    filter_keys = (
        "page",
        "limit",
        "status",
        "class_id",
        "class_room_id",
        "teacher_id",
        "specialization_id",
        "order",
    )
    create_defaults = {"status": "planned"}
    required_fields = {
        "period": "Period",
        "date_day": "Day",
        "hour_start": "Start time",
        "hour_end": "End time",
        "teacher_id": "Select a teacher",
        "specialization_id": "Select a specialization",
        "class_id": "Select a class",
        "class_room_id": "Select a class room",
    }
    time_ranges = (("hour_start", "hour_end"),)


class StudentPresenceAPI(ResourceAPI):
    name = "student_presences"
    path = "/student-presence"
    filter_keys = ("page", "limit", "status", "student_id", "student_planning_id")
    # note=-1 means "not graded yet"
    create_defaults = {"presence": "absent", "note": -1, "status": int(Status.PENDING)}
    required_fields = {"student_planning_id": "Select a session", "student_id": "Select a student"}
