"""Tests for the campus-admin command line."""

from __future__ import annotations

import pytest
import respx

from campus_admin.__main__ import main

BASE_URL = "http://test-api:3000"


@pytest.fixture(autouse=True)
def _env(monkeypatch):
    monkeypatch.setenv("CAMPUS_API_BASE_URL", BASE_URL)
    monkeypatch.delenv("CAMPUS_SESSION_PATH", raising=False)


def _run(monkeypatch, *args: str) -> int:
    monkeypatch.setattr("sys.argv", ["campus-admin", *args])
    with pytest.raises(SystemExit) as excinfo:
        main()
    return excinfo.value.code


class TestMain:
    def test_usage(self, monkeypatch, capsys):
        assert _run(monkeypatch) == 1
        assert "Usage" in capsys.readouterr().err

    def test_resources(self, monkeypatch, capsys):
        assert _run(monkeypatch, "resources") == 0
        out = capsys.readouterr().out.splitlines()
        assert "levels" in out
        assert "module_course" in out

    @respx.mock
    def test_list(self, monkeypatch, capsys):
        respx.get(f"{BASE_URL}/levels").respond(200, json=[{"id": 1, "title": "L1"}])
        assert _run(monkeypatch, "list", "levels") == 0
        assert '"title": "L1"' in capsys.readouterr().out

    @respx.mock
    def test_list_failure(self, monkeypatch, capsys):
        respx.get(f"{BASE_URL}/levels").respond(500, json={"message": "Database unavailable"})
        assert _run(monkeypatch, "list", "levels") == 1
        assert "Error: Database unavailable" in capsys.readouterr().err

    def test_unknown_resource(self, monkeypatch, capsys):
        assert _run(monkeypatch, "list", "nope") == 1
        assert "Unknown resource" in capsys.readouterr().err
