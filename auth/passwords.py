"""
auth/passwords.py -- bcrypt password hashing.

Security design decisions:
  bcrypt directly, no passlib wrapper. Its cost factor makes brute force
  expensive, and checkpw compares in constant time. Each hash() call draws a
  fresh salt, so hashing the same password twice yields different verifiers.

  bcrypt only looks at the first 72 bytes of a password, and bcrypt 5.x
  raises instead of truncating silently. _encode() truncates explicitly so
  hash() and verify() always see the same bytes.

  Hashing is CPU-bound and slow on purpose. The *_async variants run it on a
  worker thread so one login does not stall every other request on the
  event loop.

  dummy_verify_async() runs a full bcrypt check against a verifier computed
  once at construction. The login flow calls it for unknown usernames so the
  response time does not reveal whether a username exists.
"""

from __future__ import annotations

import asyncio
import logging

import bcrypt

from auth.errors import CorruptVerifier

logger = logging.getLogger("jokevault.auth.passwords")

_BCRYPT_MAX_BYTES = 72


def _encode(plain: str) -> bytes:
    return plain.encode("utf-8")[:_BCRYPT_MAX_BYTES]


class PasswordHasher:
    """Salted one-way password hashing with a configurable cost factor.

    Usage:
        hasher = PasswordHasher(rounds=12)
        verifier = hasher.hash("password123")
        hasher.verify("password123", verifier)   # True
    """

    def __init__(self, rounds: int = 12) -> None:
        self.rounds = rounds
        self._dummy_verifier = self.hash("jokevault_timing_dummy")

    def hash(self, plain: str) -> str:
        """Return a bcrypt verifier for the plaintext password."""
        return bcrypt.hashpw(_encode(plain), bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    def verify(self, plain: str, verifier: str) -> bool:
        """Return True if plain matches the verifier.

        Raises CorruptVerifier if the stored verifier is not a bcrypt hash.
        That is a data-corruption problem, not a wrong password, so it is not
        folded into a False result.
        """
        try:
            return bcrypt.checkpw(_encode(plain), verifier.encode("utf-8"))
        except ValueError as exc:
            logger.error("Stored password verifier is malformed: %s", exc)
            raise CorruptVerifier() from exc

    async def hash_async(self, plain: str) -> str:
        return await asyncio.to_thread(self.hash, plain)

    async def verify_async(self, plain: str, verifier: str) -> bool:
        return await asyncio.to_thread(self.verify, plain, verifier)

    async def dummy_verify_async(self, plain: str) -> None:
        """Spend one bcrypt check's worth of time and discard the result."""
        await asyncio.to_thread(self.verify, plain, self._dummy_verifier)
