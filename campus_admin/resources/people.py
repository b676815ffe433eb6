"""Accounts, staff and students.

Teachers and students carry a profile picture, so their create/update calls
are usually made with ``files={"picture": (...)}``, which switches the
request to multipart form data.
"""

from __future__ import annotations

from ..models import Student, Teacher
from .base import BASE_FILTER_KEYS, ResourceAPI

PEOPLE_FILTER_KEYS = (*BASE_FILTER_KEYS, "class_room_id")


class UserAPI(ResourceAPI):
    name = "users"
    path = "/users"
    required_fields = {"username": "Username", "email": "Email"}
    create_only_fields = {"password": "Password"}


class AdministratorAPI(ResourceAPI):
    name = "administrators"
    path = "/administrators"
    filter_keys = PEOPLE_FILTER_KEYS
    required_fields = {"first_name": "First name", "last_name": "Last name"}


class TeacherAPI(ResourceAPI):
    name = "teachers"
    path = "/teachers"
    model = Teacher
    filter_keys = PEOPLE_FILTER_KEYS
    required_fields = {"first_name": "First name", "last_name": "Last name"}


class StudentAPI(ResourceAPI):
    name = "students"
    path = "/students"
    model = Student
    filter_keys = PEOPLE_FILTER_KEYS
    required_fields = {"first_name": "First name", "last_name": "Last name"}
