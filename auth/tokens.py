"""
auth/tokens.py -- JWT issuance and verification.

Security design decisions:
  JWT: python-jose with HS256. Tokens carry sub (username), user_id, iat and
       exp. Nothing is stored server-side; a token is valid iff its signature
       verifies with the configured secret and the clock is before exp.

  The secret, lifetime and clock are constructor arguments rather than
  module-level state, so tests can build a TokenService with a fixed secret
  and a frozen clock. The application builds exactly one instance at startup
  from get_settings().

  Expiry is checked here against the injected clock instead of inside
  jwt.decode(), which always reads the wall clock.

  verify() raises TokenInvalid with a reason (malformed, signature, expired,
  claims). The reason goes to the server log; the client only ever sees
  "token invalid".
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone

from jose import JWTError, jwt
from jose.exceptions import JWTClaimsError

from auth.errors import TokenInvalid
from auth.models import Identity, User

ALGORITHM = "HS256"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    """Issue and verify signed, time-bounded identity tokens.

    Usage:
        tokens = TokenService(secret_key=settings.secret_key, expire_seconds=3600)
        token = tokens.issue(user)
        identity = tokens.verify(token)   # raises TokenInvalid on any failure
    """

    def __init__(
        self,
        secret_key: str,
        expire_seconds: int = 86400,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if not secret_key:
            raise ValueError("TokenService requires a non-empty secret_key.")
        self._secret_key = secret_key
        self.expire_seconds = expire_seconds
        self._clock = clock

    def issue(self, user: User) -> str:
        """Encode a signed JWT for the given user."""
        issued_at = int(self._clock().timestamp())
        payload = {
            "sub": user.username,
            "user_id": user.id,
            "iat": issued_at,
            "exp": issued_at + self.expire_seconds,
        }
        return jwt.encode(payload, self._secret_key, algorithm=ALGORITHM)

    def verify(self, token: str) -> Identity:
        """Validate signature and expiry and return the embedded identity."""
        try:
            jwt.get_unverified_header(token)
        except JWTError as exc:
            raise TokenInvalid("malformed") from exc

        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[ALGORITHM],
                options={"verify_exp": False},
            )
        except JWTClaimsError as exc:
            raise TokenInvalid("claims") from exc
        except JWTError as exc:
            raise TokenInvalid("signature") from exc

        username = payload.get("sub")
        user_id = payload.get("user_id")
        issued_at = payload.get("iat")
        expires_at = payload.get("exp")
        if (
            not isinstance(username, str)
            or not isinstance(user_id, int)
            or not isinstance(issued_at, (int, float))
            or not isinstance(expires_at, (int, float))
        ):
            raise TokenInvalid("claims")

        if self._clock().timestamp() >= expires_at:
            raise TokenInvalid("expired")

        return Identity(
            user_id=user_id,
            username=username,
            issued_at=datetime.fromtimestamp(issued_at, tz=timezone.utc),
            expires_at=datetime.fromtimestamp(expires_at, tz=timezone.utc),
        )
