"""Exception taxonomy and user-facing error messages.

Validation errors are raised before any request is built.  Everything the
transport raises is translated into an :class:`APIError` subclass (or
:class:`TransportError`) by :mod:`campus_admin.http`; callers catch at the
call site and render :func:`describe_error`.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

GENERIC_MESSAGE = "Something went wrong. Please try again."
NETWORK_MESSAGE = "Network error. Please check your connection and try again."


class CampusAdminError(Exception):
    """Base class for every error raised by this package."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(CampusAdminError):
    """Client-side validation failed; carries one message per field."""

    def __init__(self, errors: Mapping[str, str]) -> None:
        self.errors = dict(errors)
        super().__init__("; ".join(f"{field}: {msg}" for field, msg in self.errors.items()))


class TransportError(CampusAdminError):
    """The request never produced an HTTP response (DNS, refused, timeout)."""

    def __init__(self, message: str = NETWORK_MESSAGE) -> None:
        super().__init__(message)


class APIError(CampusAdminError):
    """The backend answered with a non-2xx status."""

    def __init__(
        self,
        status_code: int,
        message: str | None = None,
        payload: Any = None,
    ) -> None:
        self.status_code = status_code
        self.payload = payload
        self.server_message = message
        super().__init__(message or f"Request failed with status {status_code}")


class UnauthorizedError(APIError):
    """401: the session was cleared and the user must log in again."""


class NotFoundError(APIError):
    """404: the record or relationship no longer exists."""


class ConflictError(APIError):
    """409: the record or relationship already exists."""


_STATUS_ERRORS: dict[int, type[APIError]] = {
    401: UnauthorizedError,
    404: NotFoundError,
    409: ConflictError,
}


def server_message(payload: Any) -> str | None:
    """Extract the backend's ``message`` field, joining lists with commas."""
    if not isinstance(payload, Mapping):
        return None
    message = payload.get("message")
    if isinstance(message, str):
        return message or None
    if isinstance(message, (list, tuple)):
        parts = [str(part) for part in message if part not in (None, "")]
        return ", ".join(parts) or None
    return None


def error_for_status(status_code: int, payload: Any = None) -> APIError:
    """Build the :class:`APIError` subclass matching *status_code*."""
    cls = _STATUS_ERRORS.get(status_code, APIError)
    return cls(status_code, server_message(payload), payload)


def describe_error(exc: BaseException, fallback: str = GENERIC_MESSAGE) -> str:
    """Render *exc* as a single user-facing line."""
    if isinstance(exc, ValidationError):
        return ", ".join(exc.errors.values()) or fallback
    if isinstance(exc, APIError):
        return exc.server_message or fallback
    if isinstance(exc, TransportError):
        return exc.message
    return fallback
