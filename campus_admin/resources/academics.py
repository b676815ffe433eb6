"""Curriculum and calendar resources."""

from __future__ import annotations

from ..models import Course, Level, Module, Status
from .base import BASE_FILTER_KEYS, ResourceAPI


class CompanyAPI(ResourceAPI):
    name = "companies"
    path = "/company"
    tenant_field = None
    required_fields = {"name": "Name", "email": "Email"}


class CourseAPI(ResourceAPI):
    name = "courses"
    path = "/course"
    model = Course
    required_fields = {"title": "Title"}
    positive_fields = {"volume": "Volume", "coefficient": "Coefficient"}


class ModuleAPI(ResourceAPI):
    name = "modules"
    path = "/module"
    model = Module
    required_fields = {"title": "Title"}
    positive_fields = {"volume": "Volume", "coefficient": "Coefficient"}


class ProgramAPI(ResourceAPI):
    name = "programs"
    path = "/programs"
    required_fields = {"title": "Title"}


class SpecializationAPI(ResourceAPI):
    name = "specializations"
    path = "/specializations"
    filter_keys = (*BASE_FILTER_KEYS, "program_id")
    required_fields = {"title": "Title", "program_id": "Select a program"}


class LevelAPI(ResourceAPI):
    name = "levels"
    path = "/levels"
    model = Level
    filter_keys = (*BASE_FILTER_KEYS, "specialization_id")
    required_fields = {"title": "Title", "specialization_id": "Select a specialization"}
    positive_fields = {"level": "Level"}


class LevelPricingAPI(ResourceAPI):
    name = "level_pricings"
    path = "/level-pricings"
    filter_keys = (*BASE_FILTER_KEYS, "level_id")
    # new pricings wait for review before they apply
    create_defaults = {"status": int(Status.PENDING), "occurrences": 1, "every_month": 1}
    required_fields = {"title": "Title", "level_id": "Select a level", "amount": "Amount"}
    positive_fields = {"amount": "Amount", "occurrences": "Occurrences", "every_month": "Every month"}


class SchoolYearAPI(ResourceAPI):
    name = "school_years"
    path = "/school-years"
    tenant_field = "companyId"
    required_fields = {"title": "Title", "start_date": "Start date", "end_date": "End date"}
    date_ranges = (("start_date", "end_date"),)


class SchoolYearPeriodAPI(ResourceAPI):
    name = "school_year_periods"
    path = "/school-year-periods"
    filter_keys = (*BASE_FILTER_KEYS, "schoolYearId")
    tenant_field = None
    required_fields = {
        "title": "Title",
        "schoolYearId": "Select a school year",
        "start_date": "Start date",
        "end_date": "End date",
    }
    date_ranges = (("start_date", "end_date"),)


class ClassAPI(ResourceAPI):
    name = "classes"
    path = "/classes"
    filter_keys = (
        *BASE_FILTER_KEYS,
        "program_id",
        "specialization_id",
        "level_id",
        "school_year_id",
        "school_year_period_id",
    )
    required_fields = {
        "title": "Title",
        "program_id": "Select a program",
        "specialization_id": "Select a specialization",
        "level_id": "Select a level",
        "school_year_id": "Select a school year",
    }


class ClassRoomAPI(ResourceAPI):
    name = "class_rooms"
    path = "/class-rooms"
    required_fields = {"code": "Code", "title": "Title", "capacity": "Capacity"}
    positive_fields = {"capacity": "Capacity"}
