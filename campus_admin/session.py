"""Authenticated session: bearer token plus the logged-in user and tenant."""

from __future__ import annotations

import abc
from pathlib import Path
from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict, ValidationError

logger = structlog.get_logger()


class SessionUser(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int | None = None
    email: str = ""
    username: str = ""
    role: str = ""
    company_id: int | None = None


class Session(BaseModel):
    token: str | None = None
    user: SessionUser | None = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    @property
    def tenant_id(self) -> int | None:
        return self.user.company_id if self.user is not None else None


class SessionStore(abc.ABC):
    """Where the session lives between requests (and, optionally, runs)."""

    @abc.abstractmethod
    def load(self) -> Session: ...

    @abc.abstractmethod
    def save(self, session: Session) -> None: ...

    @abc.abstractmethod
    def clear(self) -> None: ...

    def token(self) -> str | None:
        return self.load().token

    def tenant_id(self, default: int) -> int:
        """Tenant of the logged-in user, or *default* when it is unknown."""
        return self.load().tenant_id or default


class MemorySessionStore(SessionStore):
    def __init__(self, session: Session | None = None) -> None:
        self._session = session or Session()

    def load(self) -> Session:
        return self._session

    def save(self, session: Session) -> None:
        self._session = session

    def clear(self) -> None:
        self._session = Session()


class FileSessionStore(SessionStore):
    """Persists the session as JSON so the command line can reuse a login."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    def load(self) -> Session:
        if not self._path.exists():
            return Session()
        try:
            return Session.model_validate_json(self._path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as exc:
            logger.warning("session_file_unreadable", path=str(self._path), error=str(exc))
            return Session()

    def save(self, session: Session) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(session.model_dump_json(), encoding="utf-8")

    def clear(self) -> None:
        self._path.unlink(missing_ok=True)


def session_from_login(payload: dict[str, Any]) -> Session:
    """Build a session from the ``/auth/login`` response body."""
    user = payload.get("user")
    return Session(
        token=payload.get("token"),
        user=SessionUser.model_validate(user) if isinstance(user, dict) else None,
    )
