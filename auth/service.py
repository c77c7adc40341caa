"""
auth/service.py -- Registration and login orchestration.

Both flows are single-pass and strictly sequential within a request:
validate -> look up / hash -> store / issue. Nothing retries; every failure
is an AuthError raised straight to the caller.

Security:
  Unknown username and wrong password both end in InvalidCredentials with
  the same message. An unknown username still pays for one bcrypt check
  (PasswordHasher.dummy_verify_async) so timing does not tell them apart.

  Plaintext passwords are never logged. Log lines carry the username only.
"""

from __future__ import annotations

import logging

from auth.errors import InvalidCredentials, UsernameTaken, ValidationError
from auth.models import LoginResult, PublicUser
from auth.passwords import PasswordHasher
from auth.store import UserStore
from auth.tokens import TokenService

logger = logging.getLogger("jokevault.auth")


def _require_credentials(username: object, password: object) -> tuple[str, str]:
    """Return (username, password) or raise ValidationError if either is missing or empty."""
    if not isinstance(username, str) or not isinstance(password, str) or not username or not password:
        raise ValidationError()
    return username, password


class AuthService:
    """Entry points for the two credential flows.

    Usage:
        service = AuthService(store, PasswordHasher(), TokenService(secret))
        await service.register("alice", "password123")
        result = await service.login("alice", "password123")
        result.token
    """

    def __init__(self, store: UserStore, hasher: PasswordHasher, tokens: TokenService) -> None:
        self.store = store
        self.hasher = hasher
        self.tokens = tokens

    async def register(self, username: object, password: object) -> PublicUser:
        """Create a new account and return its public projection.

        The existence check gives the common case a clean answer without
        paying for a bcrypt hash. The store's UNIQUE constraint still decides
        races: a concurrent insert of the same username surfaces from
        create_user() as UsernameTaken too.
        """
        username, password = _require_credentials(username, password)

        if await self.store.get_by_username(username) is not None:
            logger.info("Registration rejected: username %r taken", username)
            raise UsernameTaken()

        verifier = await self.hasher.hash_async(password)
        try:
            user = await self.store.create_user(username, verifier)
        except UsernameTaken:
            logger.info("Registration lost a race: username %r taken", username)
            raise

        logger.info("Registered user %r (id=%s)", user.username, user.id)
        return PublicUser(username=user.username)

    async def login(self, username: object, password: object) -> LoginResult:
        """Check credentials and issue a token bound to the user's identity."""
        username, password = _require_credentials(username, password)

        user = await self.store.get_by_username(username)
        if user is None:
            # Equalize timing -- do NOT return before running bcrypt
            await self.hasher.dummy_verify_async(password)
            logger.info("Login failed for %r", username)
            raise InvalidCredentials()

        if not await self.hasher.verify_async(password, user.password):
            logger.info("Login failed for %r", username)
            raise InvalidCredentials()

        token = self.tokens.issue(user)
        logger.info("Login succeeded for %r", user.username)
        return LoginResult(message=f"welcome, {user.username}", token=token)
