"""
auth/store.py -- SQLAlchemy Core persistence layer for user credentials.

Pattern: Repository + Data Mapper.
UserStore is the repository; _row_to_user is the mapper. Service and route
code never touches SQL directly.

Uniqueness:
  UNIQUE(username) in the schema is the enforcement point. The registration
  flow does a friendly pre-check, but two concurrent registrations can both
  pass it; the second INSERT then fails with IntegrityError, which
  create_user() raises as UsernameTaken.

Concurrency:
  The lookup and insert methods are coroutines. The blocking SQL runs on a
  worker thread via asyncio.to_thread so the event loop keeps serving other
  requests while SQLite (or any other SQLAlchemy backend) does its work.

Errors:
  Any SQLAlchemyError other than the uniqueness violation is raised as
  StoreUnavailable. The original exception is chained for the server log.

Security:
  All queries use bound parameters. No f-strings in SQL.

Layer rule: no imports from api/ or jokes/.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, MetaData, String, Table, Text, create_engine, event, func, select, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from auth.errors import StoreUnavailable, UsernameTaken
from auth.models import User

logger = logging.getLogger("jokevault.auth.store")

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_metadata = MetaData()

_users = Table(
    "users",
    _metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("username", String(128), nullable=False, unique=True),
    Column("password", Text, nullable=False),  # bcrypt verifier
    Column("created_at", String(32), nullable=False),
)


# ---------------------------------------------------------------------------
# WAL mode
# ---------------------------------------------------------------------------


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode so readers are not blocked during writes.

    Set per-connection because SQLite PRAGMAs are not inherited by new
    connections from the pool.
    """
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class UserStore:
    """Repository for User records.

    Usage:
        store = UserStore("sqlite:///jokevault.db")
        store.migrate()
        user = await store.create_user("alice", hasher.hash("secret"))
        found = await store.get_by_username("alice")
        store.close()
    """

    def __init__(self, db_url: str) -> None:
        connect_args: dict = {}
        if db_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self.engine: Engine = create_engine(db_url, connect_args=connect_args)
        if db_url.startswith("sqlite"):
            event.listen(self.engine, "connect", _set_wal_mode)

    # ------------------------------------------------------------------
    # Schema management
    # ------------------------------------------------------------------

    def migrate(self) -> None:
        """Create the users table if it does not exist. Idempotent."""
        _metadata.create_all(self.engine)
        logger.info("Schema up to date")

    def rollback(self) -> None:
        """Drop the users table and everything in it."""
        _metadata.drop_all(self.engine)
        logger.info("Schema rolled back")

    def truncate(self) -> int:
        """Delete every user row. Used by the test harness and the CLI."""
        with self.engine.connect() as conn:
            result = conn.execute(_users.delete())
            conn.commit()
        return result.rowcount

    def ping(self) -> bool:
        """Return True if the database answers a trivial query."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError:
            logger.exception("Database ping failed")
            return False
        return True

    def count_users(self) -> int:
        with self.engine.connect() as conn:
            result = conn.execute(select(func.count()).select_from(_users)).scalar()
        return result or 0

    # ------------------------------------------------------------------
    # User queries
    # ------------------------------------------------------------------

    async def get_by_username(self, username: str) -> User | None:
        """Look up a user by exact username (case-sensitive). Returns None if not found."""

        def fetch_sync():
            with self.engine.connect() as conn:
                return conn.execute(_users.select().where(_users.c.username == username)).fetchone()

        try:
            row = await asyncio.to_thread(fetch_sync)
        except SQLAlchemyError as exc:
            raise StoreUnavailable() from exc
        return _row_to_user(row) if row is not None else None

    async def create_user(self, username: str, password: str) -> User:
        """Insert a new user and return it with its assigned id.

        Raises UsernameTaken if the UNIQUE(username) constraint rejects the
        row, StoreUnavailable on any other database failure.
        """
        created_at = _now_iso()

        def insert_sync() -> int:
            with self.engine.connect() as conn:
                result = conn.execute(
                    _users.insert().values(username=username, password=password, created_at=created_at)
                )
                conn.commit()
                return result.inserted_primary_key[0]

        try:
            user_id = await asyncio.to_thread(insert_sync)
        except IntegrityError as exc:
            raise UsernameTaken() from exc
        except SQLAlchemyError as exc:
            raise StoreUnavailable() from exc
        return User(id=user_id, username=username, password=password, created_at=created_at)

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mapper
# ---------------------------------------------------------------------------


def _row_to_user(row) -> User:
    return User(
        id=row.id,
        username=row.username,
        password=row.password,
        created_at=row.created_at,
    )
