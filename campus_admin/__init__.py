"""Async client for the school-management administration API.

Public API re-exported here for convenience::

    from campus_admin import AdminClient, ClientConfig, normalize_list_response
"""

from .assignment import (
    AssignmentController,
    MoveOutcome,
    MoveResult,
    Phase,
    TwoListAssignmentState,
    build_state,
)
from .auth import AuthAPI
from .cache import QueryCache
from .client import AdminClient
from .config import APIConfig, ClientConfig
from .errors import (
    APIError,
    CampusAdminError,
    ConflictError,
    NotFoundError,
    TransportError,
    UnauthorizedError,
    ValidationError,
    describe_error,
)
from .http import APIClient
from .logging import setup_logging
from .models import AssignmentItem, ListParams, PaginatedResult, Record, Status
from .pagination import normalize_list_response
from .queries import Mutation, PaginatedQuery
from .session import FileSessionStore, MemorySessionStore, Session, SessionStore

__all__ = [
    "APIClient",
    "APIConfig",
    "APIError",
    "AdminClient",
    "AssignmentController",
    "AssignmentItem",
    "AuthAPI",
    "CampusAdminError",
    "ClientConfig",
    "ConflictError",
    "FileSessionStore",
    "ListParams",
    "MemorySessionStore",
    "MoveOutcome",
    "MoveResult",
    "Mutation",
    "NotFoundError",
    "PaginatedQuery",
    "PaginatedResult",
    "Phase",
    "QueryCache",
    "Record",
    "Session",
    "SessionStore",
    "Status",
    "TransportError",
    "TwoListAssignmentState",
    "UnauthorizedError",
    "ValidationError",
    "build_state",
    "describe_error",
    "normalize_list_response",
    "setup_logging",
]
