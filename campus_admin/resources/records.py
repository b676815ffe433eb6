"""Student records: attestations, payments, report cards, contacts and diplomas."""

from __future__ import annotations

from ..models import Status
from .base import BASE_FILTER_KEYS, ResourceAPI


class AttestationAPI(ResourceAPI):
    name = "attestations"
    path = "/attestation"
    tenant_field = "companyid"
    required_fields = {"title": "Title"}


class StudentAttestationAPI(ResourceAPI):
    name = "student_attestations"
    path = "/studentattestation"
    # this endpoint spells its columns differently from the rest of the API
    filter_keys = ("page", "limit", "search", "Status", "Idstudent", "Idattestation")
    create_defaults = {"Status": int(Status.ACTIVE)}
    tenant_field = "companyid"
    required_fields = {"Idstudent": "Select a student", "Idattestation": "Select an attestation"}
    date_ranges = (("dateask", "datedelivery"),)


class StudentPaymentAPI(ResourceAPI):
    name = "student_payments"
    path = "/student-payments"
    filter_keys = (
        *BASE_FILTER_KEYS,
        "student_id",
        "school_year_id",
        "level_id",
        "level_pricing_id",
        "date",
        "mode",
    )
    required_fields = {
        "student_id": "Select a student",
        "school_year_id": "Select a school year",
        "level_id": "Select a level",
        "amount": "Amount",
        "date": "Date",
        "mode": "Mode",
    }
    positive_fields = {"amount": "Amount", "payment": "Payment"}


class StudentReportAPI(ResourceAPI):
    name = "student_reports"
    path = "/student-reports"
    filter_keys = (
        *BASE_FILTER_KEYS,
        "student_id",
        "school_year_id",
        "school_year_period_id",
        "passed",
    )
    # scoped by the student's company on the server
    tenant_field = None
    required_fields = {
        "student_id": "Select a student",
        "school_year_id": "Select a school year",
        "school_year_period_id": "Select a period",
    }


class StudentReportDetailAPI(ResourceAPI):
    name = "student_report_details"
    path = "/student-report-details"
    filter_keys = (*BASE_FILTER_KEYS, "student_report_id", "teacher_id", "course_id")
    tenant_field = None
    required_fields = {
        "student_report_id": "Select a report",
        "teacher_id": "Select a teacher",
        "course_id": "Select a course",
    }
    positive_fields = {"note": "Note"}


class StudentLinkTypeAPI(ResourceAPI):
    """Kinds of relationship between a student and a contact (mother, tutor ...)."""

    name = "student_link_types"
    path = "/studentlinktype"
    filter_keys = ("page", "limit", "search")
    required_fields = {"title": "Title"}


class StudentContactAPI(ResourceAPI):
    name = "student_contacts"
    path = "/student-contact"
    filter_keys = (*BASE_FILTER_KEYS, "student_id", "studentlinktypeId")
    required_fields = {"firstname": "First name", "lastname": "Last name"}


class StudentDiplomeAPI(ResourceAPI):
    """Diplomas a student already holds.

    Scans go in ``files={"diplome_picture_1": ..., "diplome_picture_2": ...}``.
    """

    name = "student_diplomes"
    path = "/student-diplome"
    filter_keys = ("page", "limit", "search", "student_id", "annee")
    required_fields = {"title": "Title", "school": "School", "student_id": "Select a student"}
    positive_fields = {"annee": "Year"}
