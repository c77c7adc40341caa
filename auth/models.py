"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Stores and services do
the work; these only own the shape.

Layer rule: no imports from api/ or jokes/.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class User:
    """A registered account as persisted by UserStore.

    password holds the bcrypt verifier, never the plaintext. The record is
    immutable once created; nothing in the auth flows updates or deletes it.
    """

    username: str
    password: str  # bcrypt verifier
    id: int | None = None
    created_at: str | None = None


@dataclass(frozen=True)
class PublicUser:
    """The only projection of a User that leaves the service layer."""

    username: str


@dataclass(frozen=True)
class Identity:
    """Claims recovered from a verified token.

    Attached to request.state.identity by the access gate and discarded when
    the request completes.
    """

    user_id: int
    username: str
    issued_at: datetime
    expires_at: datetime


@dataclass(frozen=True)
class LoginResult:
    message: str
    token: str
