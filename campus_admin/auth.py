"""Login, registration and password flows."""

from __future__ import annotations

from typing import Any

import structlog

from .http import APIClient
from .session import Session, SessionStore, SessionUser, session_from_login
from .validation import raise_for_errors, validate_required

logger = structlog.get_logger()

MIN_PASSWORD_LENGTH = 6


def _password_error(password: str | None, label: str = "Password") -> str:
    message = validate_required(password, label)
    if message:
        return message
    if len(password or "") < MIN_PASSWORD_LENGTH:
        return f"{label} must be at least {MIN_PASSWORD_LENGTH} characters"
    return ""


class AuthAPI:
    def __init__(self, client: APIClient, session_store: SessionStore) -> None:
        self._client = client
        self._sessions = session_store

    async def login(self, email: str, password: str) -> Session:
        """Authenticate and persist the returned token and user."""
        raise_for_errors(
            {
                "email": validate_required(email, "Email"),
                "password": validate_required(password, "Password"),
            }
        )
        payload = await self._client.post("/auth/login", {"email": email, "password": password})
        session = session_from_login(payload or {})
        self._sessions.save(session)
        logger.info("logged_in", email=email, tenant_id=session.tenant_id)
        return session

    def logout(self) -> None:
        self._sessions.clear()
        logger.info("logged_out")

    async def register(
        self,
        email: str,
        password: str,
        username: str,
        role: str = "user",
    ) -> dict[str, Any]:
        raise_for_errors(
            {
                "email": validate_required(email, "Email"),
                "username": validate_required(username, "Username"),
                "password": _password_error(password),
            }
        )
        body = {"email": email, "password": password, "username": username, "role": role}
        return await self._client.post("/auth/register", body)

    async def forgot_password(self, email: str) -> dict[str, Any]:
        raise_for_errors({"email": validate_required(email, "Email")})
        return await self._client.post("/auth/forgot-password", {"email": email})

    async def reset_password(self, token: str, password: str) -> dict[str, Any]:
        raise_for_errors({"password": _password_error(password)})
        return await self._client.post(
            "/auth/reset-password",
            {"password": password},
            params={"token": token},
        )

    async def change_password(
        self,
        current_password: str,
        new_password: str,
        confirm_password: str,
    ) -> dict[str, Any]:
        mismatch = "Passwords do not match" if new_password != confirm_password else ""
        raise_for_errors(
            {
                "currentPassword": validate_required(current_password, "Current password"),
                "newPassword": _password_error(new_password, "New password"),
                "confirmPassword": validate_required(confirm_password, "Confirmation") or mismatch,
            }
        )
        body = {
            "currentPassword": current_password,
            "newPassword": new_password,
            "confirmPassword": confirm_password,
        }
        return await self._client.post("/auth/change-password", body)

    async def profile(self) -> SessionUser:
        """Fetch the current user and refresh the stored copy."""
        user = SessionUser.model_validate(await self._client.get("/profile") or {})
        session = self._sessions.load()
        self._sessions.save(session.model_copy(update={"user": user}))
        return user
