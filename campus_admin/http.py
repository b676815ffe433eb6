"""Async HTTP client for the school-management API."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

import httpx
import structlog

from .config import APIConfig
from .errors import TransportError, UnauthorizedError, error_for_status
from .session import SessionStore

logger = structlog.get_logger()

Files = Mapping[str, Any]


class APIClient:
    """Sends authenticated JSON (or multipart) requests to the backend.

    Attaches the session's bearer token, translates error statuses into
    :mod:`campus_admin.errors` exceptions, and on 401 clears the session and
    calls *on_unauthorized* with the configured login URL.
    """

    def __init__(
        self,
        config: APIConfig,
        session_store: SessionStore,
        *,
        on_unauthorized: Callable[[str], None] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._sessions = session_store
        self._on_unauthorized = on_unauthorized
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def start(self) -> None:
        self._client = httpx.AsyncClient(
            base_url=self._config.base_url,
            timeout=httpx.Timeout(self._config.timeout_seconds),
            transport=self._transport,
        )
        logger.info("api_client_started", base_url=self._config.base_url)

    async def stop(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            logger.info("api_client_stopped")

    async def __aenter__(self) -> APIClient:
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.stop()

    # ------------------------------------------------------------------
    # Verbs
    # ------------------------------------------------------------------

    async def get(self, path: str, *, params: Mapping[str, Any] | None = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(
        self,
        path: str,
        json: Any = None,
        *,
        files: Files | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> Any:
        return await self.request("POST", path, json=json, files=files, params=params)

    async def patch(self, path: str, json: Any = None, *, files: Files | None = None) -> Any:
        return await self.request("PATCH", path, json=json, files=files)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)

    # ------------------------------------------------------------------
    # Core
    # ------------------------------------------------------------------

    def _headers(self, *, multipart: bool) -> dict[str, str]:
        headers: dict[str, str] = {}
        # multipart bodies get their boundary content-type from httpx
        if not multipart:
            headers["Content-Type"] = "application/json"
        token = self._sessions.token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        files: Files | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> Any:
        """Send one request and return the decoded JSON body (``None`` if empty).

        With *files*, *json* must be a flat mapping and is sent as the form
        fields of a multipart body.
        """
        if self._client is None:
            raise AssertionError("Client not started")

        multipart = bool(files)
        kwargs: dict[str, Any] = {"headers": self._headers(multipart=multipart)}
        if params:
            kwargs["params"] = params
        if multipart:
            kwargs["data"] = {
                key: str(value) for key, value in (json or {}).items() if value is not None
            }
            kwargs["files"] = files
        elif json is not None:
            kwargs["json"] = json

        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.TransportError as exc:
            logger.warning("api_request_failed", method=method, path=path, error=str(exc))
            raise TransportError() from exc

        if response.status_code == 401:
            self._handle_unauthorized()

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            payload = _decode(response)
            logger.info(
                "api_request_rejected",
                method=method,
                path=path,
                status_code=response.status_code,
            )
            raise error_for_status(response.status_code, payload) from exc

        logger.debug("api_request_ok", method=method, path=path, status_code=response.status_code)
        return _decode(response)

    def _handle_unauthorized(self) -> None:
        self._sessions.clear()
        logger.warning("session_expired", redirect=self._config.login_url)
        if self._on_unauthorized is not None:
            self._on_unauthorized(self._config.login_url)
        raise UnauthorizedError(401, "Session expired. Please log in again.")


def _decode(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text
