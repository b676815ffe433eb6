"""Per-entity API modules."""

from .academics import (
    ClassAPI,
    ClassRoomAPI,
    CompanyAPI,
    CourseAPI,
    LevelAPI,
    LevelPricingAPI,
    ModuleAPI,
    ProgramAPI,
    SchoolYearAPI,
    SchoolYearPeriodAPI,
    SpecializationAPI,
)
from .base import ResourceAPI, TenantPolicy
from .people import AdministratorAPI, StudentAPI, TeacherAPI, UserAPI
from .planning import PlanningSessionTypeAPI, PlanningStudentAPI, StudentPresenceAPI
from .records import (
    AttestationAPI,
    StudentAttestationAPI,
    StudentContactAPI,
    StudentDiplomeAPI,
    StudentLinkTypeAPI,
    StudentPaymentAPI,
    StudentReportAPI,
    StudentReportDetailAPI,
)
from .registry import ResourceRegistry
from .relations import ClassStudentAPI, ModuleCourseAPI, ModuleCourseRelations

RESOURCE_CLASSES: tuple[type[ResourceAPI], ...] = (
    UserAPI,
    AdministratorAPI,
    CompanyAPI,
    CourseAPI,
    ModuleAPI,
    ModuleCourseAPI,
    ProgramAPI,
    SpecializationAPI,
    LevelAPI,
    LevelPricingAPI,
    SchoolYearAPI,
    SchoolYearPeriodAPI,
    ClassAPI,
    ClassRoomAPI,
    ClassStudentAPI,
    PlanningSessionTypeAPI,
    PlanningStudentAPI,
    TeacherAPI,
    StudentAPI,
    StudentPresenceAPI,
    StudentLinkTypeAPI,
    StudentContactAPI,
    StudentDiplomeAPI,
    AttestationAPI,
    StudentAttestationAPI,
    StudentPaymentAPI,
    StudentReportAPI,
    StudentReportDetailAPI,
)

__all__ = [
    "RESOURCE_CLASSES",
    "AdministratorAPI",
    "AttestationAPI",
    "ClassAPI",
    "ClassRoomAPI",
    "ClassStudentAPI",
    "CompanyAPI",
    "CourseAPI",
    "LevelAPI",
    "LevelPricingAPI",
    "ModuleAPI",
    "ModuleCourseAPI",
    "ModuleCourseRelations",
    "PlanningSessionTypeAPI",
    "PlanningStudentAPI",
    "ProgramAPI",
    "ResourceAPI",
    "ResourceRegistry",
    "SchoolYearAPI",
    "SchoolYearPeriodAPI",
    "SpecializationAPI",
    "StudentAPI",
    "StudentAttestationAPI",
    "StudentContactAPI",
    "StudentDiplomeAPI",
    "StudentLinkTypeAPI",
    "StudentPaymentAPI",
    "StudentPresenceAPI",
    "StudentReportAPI",
    "StudentReportDetailAPI",
    "TeacherAPI",
    "TenantPolicy",
    "UserAPI",
]
