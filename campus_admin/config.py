"""Client configuration loaded from environment variables.

Uses pydantic-settings so every field can be overridden via env vars,
the same way the dashboard read its ``VITE_API_URL`` at build time.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class APIConfig(BaseSettings):
    """Backend REST API connection settings."""

    model_config = {"env_prefix": "CAMPUS_API_"}

    base_url: str = Field(
        default="http://localhost:3000",
        description="Base URL of the school-management API",
    )
    timeout_seconds: float = Field(
        default=10.0,
        description="Fixed request timeout applied to every call",
    )
    login_url: str = Field(
        default="/login",
        description="Where the user is sent after the session is cleared on 401",
    )


class ClientConfig(BaseSettings):
    """Root configuration for an :class:`~campus_admin.client.AdminClient`.

    Nested configs are populated from their own env-var prefixes.
    """

    model_config = {"env_prefix": "CAMPUS_"}

    default_tenant_id: int = Field(
        default=1,
        description="Tenant (company) id stamped on payloads when the session has none",
    )
    default_page_size: int = Field(default=10, description="Page size for list queries")
    relation_page_size: int = Field(
        default=1000,
        description="Page size used when loading every relation of an assignment parent",
    )
    session_path: str | None = Field(
        default=None,
        description="JSON file persisting the token and user between runs (memory only if unset)",
    )
    log_level: str = Field(default="INFO", description="Log level")
    log_json: bool = Field(
        default=False,
        description="Use JSON log output instead of the console renderer",
    )

    api: APIConfig = Field(default_factory=APIConfig)
