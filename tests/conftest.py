"""
tests/conftest.py -- Shared test fixtures for JokeVault.

This module provides:
  - make_test_store(): migrated store on a throwaway SQLite file
  - _patch_lifespan(): wires test components into app.state, bypassing real startup
  - api_client: module-scoped TestClient over the assembled ASGI app
  - client: api_client with the users table truncated before each test
  - store / hasher / tokens / service: unit-level components

DEBUG and BCRYPT_ROUNDS must be set before any app import so get_settings()
auto-generates SECRET_KEY and hashing stays fast.
"""

from __future__ import annotations

import os
from collections.abc import Generator
from contextlib import asynccontextmanager
from pathlib import Path

# CRITICAL: Set DEBUG before any auth/core/api import so get_settings() can
# auto-generate SECRET_KEY in dev mode instead of raising ValueError.
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient

from asgi import app
from auth.passwords import PasswordHasher
from auth.service import AuthService
from auth.store import UserStore
from auth.tokens import TokenService

TEST_SECRET = "test-secret-key-that-is-at-least-32-characters"


# ---------------------------------------------------------------------------
# Store helpers
# ---------------------------------------------------------------------------


def make_test_store(db_path: Path) -> UserStore:
    """Create a migrated store on a throwaway SQLite file.

    A real file (not :memory:) because UserStore runs its queries on worker
    threads, and concurrent writers need SQLite's busy timeout rather than
    the immediate "table is locked" failures of a shared-cache memory DB.
    """
    store = UserStore(f"sqlite:///{db_path}")
    store.migrate()
    return store


def _patch_lifespan(store: UserStore, hasher: PasswordHasher, tokens: TokenService):
    """Return an async context manager that replaces the real lifespan.

    Wires pre-created test components into app.state so TestClient routes see
    an isolated test DB and a fixed signing secret.
    """

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.user_store = store
        app.state.hasher = hasher
        app.state.tokens = tokens
        app.state.auth_service = AuthService(store, hasher, tokens)
        yield

    return test_lifespan


# ---------------------------------------------------------------------------
# Integration fixtures -- one TestClient per test module for speed
# ---------------------------------------------------------------------------


@pytest.fixture(scope="module")
def api_client(tmp_path_factory: pytest.TempPathFactory) -> Generator[TestClient, None, None]:
    """Yield a TestClient running the real app against an isolated store.

    Tests hit real route handlers, the real access gate and real bcrypt; only
    the lifespan is replaced.
    """
    store = make_test_store(tmp_path_factory.mktemp("api") / "users.db")
    hasher = PasswordHasher(rounds=4)
    tokens = TokenService(secret_key=TEST_SECRET, expire_seconds=3600)

    app.router.lifespan_context = _patch_lifespan(store, hasher, tokens)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield client

    store.close()


@pytest.fixture
def client(api_client: TestClient) -> TestClient:
    """api_client with an empty users table, mirroring a truncate between tests."""
    api_client.app.state.user_store.truncate()
    return api_client


# ---------------------------------------------------------------------------
# Unit fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def store(tmp_path: Path) -> Generator[UserStore, None, None]:
    s = make_test_store(tmp_path / "users.db")
    yield s
    s.close()


@pytest.fixture(scope="session")
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


@pytest.fixture
def tokens() -> TokenService:
    return TokenService(secret_key=TEST_SECRET, expire_seconds=3600)


@pytest.fixture
def service(store: UserStore, hasher: PasswordHasher, tokens: TokenService) -> AuthService:
    return AuthService(store, hasher, tokens)
