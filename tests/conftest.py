"""Shared test fixtures for the campus_admin test suite."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

import pytest

from campus_admin.config import APIConfig, ClientConfig
from campus_admin.models import AssignmentItem
from campus_admin.session import MemorySessionStore, Session, SessionUser

BASE_URL = "http://test-api:3000"


@pytest.fixture
def api_config() -> APIConfig:
    return APIConfig(base_url=BASE_URL, timeout_seconds=5.0)


@pytest.fixture
def client_config(api_config: APIConfig) -> ClientConfig:
    return ClientConfig(default_tenant_id=1, default_page_size=10, api=api_config)


@pytest.fixture
def session() -> Session:
    return Session(
        token="tok-123",
        user=SessionUser(id=7, email="admin@school.test", username="admin", role="admin", company_id=42),
    )


@pytest.fixture
def session_store(session: Session) -> MemorySessionStore:
    return MemorySessionStore(session)


@pytest.fixture
def anonymous_store() -> MemorySessionStore:
    return MemorySessionStore()


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2025, 9, 1, 8, 30, tzinfo=UTC)


@pytest.fixture
def item_factory():
    """Factory to create AssignmentItem instances with overrides."""

    def _make(item_id: int, title: str | None = None, **overrides: Any) -> AssignmentItem:
        defaults: dict[str, Any] = dict(id=item_id, title=title or f"Course {item_id}", status=1)
        defaults.update(overrides)
        return AssignmentItem(**defaults)

    return _make
