"""
auth/errors.py -- Exception taxonomy for the auth subsystem.

Every failure the flows and the access gate can produce is an AuthError
subclass carrying the HTTP status and the exact client-facing message. The
API layer maps them to responses in one exception handler, so route code
never builds error bodies by hand.

Client-facing errors (expose=True) are returned verbatim. Infrastructure
errors (expose=False) are logged server-side and answered with a generic
message.

Deliberate conflations:
  InvalidCredentials covers both "unknown username" and "wrong password".
  TokenInvalid covers malformed, forged and expired tokens. Its reason
  attribute is for server logs only and must never reach the response body.
"""

from __future__ import annotations


class AuthError(Exception):
    """Base class for all auth failures."""

    status_code: int = 400
    code: str = "auth_error"
    expose: bool = True
    default_message: str = "authentication error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AuthError):
    """A required credential field is missing or empty."""

    code = "validation_error"
    default_message = "username and password required"


class UsernameTaken(AuthError):
    code = "username_taken"
    default_message = "username taken"


class InvalidCredentials(AuthError):
    code = "invalid_credentials"
    default_message = "invalid credentials"


class TokenRequired(AuthError):
    status_code = 401
    code = "token_required"
    default_message = "token required"


class TokenInvalid(AuthError):
    """The presented token failed verification.

    reason is one of: malformed, signature, expired, claims.
    """

    status_code = 401
    code = "token_invalid"
    default_message = "token invalid"

    def __init__(self, reason: str, message: str | None = None) -> None:
        super().__init__(message)
        self.reason = reason


class StoreUnavailable(AuthError):
    """The credential store could not be reached or failed unexpectedly."""

    status_code = 503
    code = "store_unavailable"
    expose = False
    default_message = "service unavailable"


class CorruptVerifier(AuthError):
    """A stored password verifier could not be parsed. Fatal for that record."""

    status_code = 500
    code = "corrupt_verifier"
    expose = False
    default_message = "internal server error"
