"""Tests for main.py -- the administration CLI.

Covers migrate, rollback and truncate against a throwaway SQLite file, and
the --yes guard on the destructive commands.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest
from sqlalchemy.exc import OperationalError

import main as cli
from auth.store import UserStore
from core.config import Settings


@pytest.fixture
def db_url(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> str:
    url = f"sqlite:///{tmp_path / 'cli.db'}"
    settings = Settings(_env_file=None, debug=True, database_url=url)
    monkeypatch.setattr(cli, "get_settings", lambda: settings)
    return url


def test_no_command_prints_help(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main([]) == 0
    assert "migrate" in capsys.readouterr().out


def test_migrate_creates_schema(db_url: str) -> None:
    assert cli.main(["migrate"]) == 0
    store = UserStore(db_url)
    try:
        assert store.count_users() == 0
    finally:
        store.close()


def test_truncate_requires_confirmation(db_url: str) -> None:
    cli.main(["migrate"])
    store = UserStore(db_url)
    try:
        asyncio.run(store.create_user("testuser", "v"))
        assert cli.main(["truncate"]) == 1
        assert store.count_users() == 1
        assert cli.main(["truncate", "--yes"]) == 0
        assert store.count_users() == 0
    finally:
        store.close()


def test_rollback_requires_confirmation(db_url: str) -> None:
    cli.main(["migrate"])
    assert cli.main(["rollback"]) == 1
    assert cli.main(["rollback", "--yes"]) == 0
    store = UserStore(db_url)
    try:
        assert store.ping() is True
        with pytest.raises(OperationalError):
            store.count_users()
    finally:
        store.close()
