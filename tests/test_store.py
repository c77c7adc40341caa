"""Unit tests for auth/store.py -- the credential store.

Covers:
- create_user() assigns an id and get_by_username() finds it
- lookups are exact and return None for unknown usernames
- the UNIQUE(username) constraint surfaces as UsernameTaken
- concurrent inserts of one username admit exactly one row
- database failures surface as StoreUnavailable
- truncate / rollback / migrate / ping / count_users
"""

from __future__ import annotations

import asyncio

import pytest

from auth.errors import StoreUnavailable, UsernameTaken
from auth.store import UserStore


def test_create_then_find(store: UserStore) -> None:
    created = asyncio.run(store.create_user("testuser", "$2b$04$verifier"))
    assert created.id is not None
    assert created.created_at

    found = asyncio.run(store.get_by_username("testuser"))
    assert found is not None
    assert found.id == created.id
    assert found.username == "testuser"
    assert found.password == "$2b$04$verifier"


def test_unknown_username_returns_none(store: UserStore) -> None:
    assert asyncio.run(store.get_by_username("nobody")) is None


def test_lookup_is_case_sensitive(store: UserStore) -> None:
    asyncio.run(store.create_user("TestUser", "v"))
    assert asyncio.run(store.get_by_username("testuser")) is None


def test_duplicate_username_raises_username_taken(store: UserStore) -> None:
    asyncio.run(store.create_user("testuser", "first"))
    with pytest.raises(UsernameTaken):
        asyncio.run(store.create_user("testuser", "second"))
    assert store.count_users() == 1


def test_concurrent_inserts_admit_one_row(store: UserStore) -> None:
    async def race() -> list:
        return await asyncio.gather(
            *(store.create_user("racer", f"v{i}") for i in range(8)),
            return_exceptions=True,
        )

    results = asyncio.run(race())
    winners = [r for r in results if not isinstance(r, Exception)]
    losers = [r for r in results if isinstance(r, Exception)]
    assert len(winners) == 1
    assert all(isinstance(e, UsernameTaken) for e in losers)
    assert store.count_users() == 1


def test_truncate_removes_every_user(store: UserStore) -> None:
    asyncio.run(store.create_user("a", "v"))
    asyncio.run(store.create_user("b", "v"))
    assert store.truncate() == 2
    assert store.count_users() == 0


def test_missing_table_raises_store_unavailable(store: UserStore) -> None:
    store.rollback()
    with pytest.raises(StoreUnavailable):
        asyncio.run(store.get_by_username("testuser"))
    with pytest.raises(StoreUnavailable):
        asyncio.run(store.create_user("testuser", "v"))


def test_migrate_is_idempotent(store: UserStore) -> None:
    store.migrate()
    store.migrate()
    assert store.count_users() == 0


def test_rollback_then_migrate_restores_empty_schema(store: UserStore) -> None:
    asyncio.run(store.create_user("testuser", "v"))
    store.rollback()
    store.migrate()
    assert store.count_users() == 0


def test_ping(store: UserStore) -> None:
    assert store.ping() is True
