"""Tests for campus_admin.session."""

from __future__ import annotations

from campus_admin.session import (
    FileSessionStore,
    MemorySessionStore,
    Session,
    SessionUser,
    session_from_login,
)


class TestSession:
    def test_anonymous(self):
        session = Session()
        assert session.is_authenticated is False
        assert session.tenant_id is None

    def test_tenant_from_user(self, session):
        assert session.is_authenticated is True
        assert session.tenant_id == 42


class TestMemoryStore:
    def test_tenant_default(self, anonymous_store):
        assert anonymous_store.tenant_id(1) == 1

    def test_tenant_from_session(self, session_store):
        assert session_store.tenant_id(1) == 42
        assert session_store.token() == "tok-123"

    def test_clear(self, session_store):
        session_store.clear()
        assert session_store.token() is None


class TestFileStore:
    def test_round_trip(self, tmp_path, session):
        store = FileSessionStore(tmp_path / "nested" / "session.json")
        store.save(session)
        again = FileSessionStore(tmp_path / "nested" / "session.json")
        assert again.load() == session

    def test_missing_file(self, tmp_path):
        assert FileSessionStore(tmp_path / "none.json").load() == Session()

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text("{not json", encoding="utf-8")
        assert FileSessionStore(path).load() == Session()

    def test_clear_is_idempotent(self, tmp_path, session):
        store = FileSessionStore(tmp_path / "session.json")
        store.save(session)
        store.clear()
        store.clear()
        assert store.load().token is None


class TestSessionFromLogin:
    def test_full_payload(self):
        session = session_from_login(
            {"token": "abc", "user": {"id": 1, "email": "a@b.c", "company_id": 3, "extra": "kept"}}
        )
        assert session.token == "abc"
        assert session.user == SessionUser(id=1, email="a@b.c", company_id=3, extra="kept")
        assert session.tenant_id == 3

    def test_without_user(self):
        session = session_from_login({"token": "abc"})
        assert session.user is None
        assert session.tenant_id is None
