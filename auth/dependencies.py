"""
auth/dependencies.py -- The access gate for protected routes.

A request is classified into exactly one of three outcomes:
  1. No Authorization header (or a blank one)  -> TokenRequired (401)
     ("Bearer" with no token after it is a present header, so case 2)
  2. Header present, token fails verification  -> TokenInvalid  (401)
  3. Header present, token verifies             -> Identity attached to
     request.state.identity and the handler runs

The header may carry the raw token ("Authorization: <token>") or the
conventional "Authorization: Bearer <token>" form.

authorize() is the pure classifier and can be tested without a request.
require_token() is the FastAPI dependency that wraps it:

    @router.get("/jokes")
    async def jokes(identity: Identity = Depends(require_token)): ...

Layer rule: auth/dependencies.py may import from fastapi because it is part
of the FastAPI dependency injection system. No imports from api/ or jokes/.
"""

from __future__ import annotations

import logging

from fastapi import Request

from auth.errors import TokenInvalid, TokenRequired
from auth.models import Identity
from auth.tokens import TokenService

logger = logging.getLogger("jokevault.auth.gate")

_BEARER_SCHEME = "bearer"


def _extract_token(header_value: str | None) -> str | None:
    """Return the token carried by an Authorization header value.

    None means no credential was presented at all (header absent or blank).
    A scheme word with nothing after it is a presented but empty token, which
    the verifier rejects as malformed.
    """
    if header_value is None or not header_value.strip():
        return None
    parts = header_value.split(None, 1)
    if parts[0].lower() == _BEARER_SCHEME:
        return parts[1].strip() if len(parts) > 1 else ""
    return header_value.strip()


def authorize(header_value: str | None, tokens: TokenService) -> Identity:
    """Classify an Authorization header value and return the verified identity."""
    token = _extract_token(header_value)
    if token is None:
        raise TokenRequired()
    try:
        return tokens.verify(token)
    except TokenInvalid as exc:
        logger.info("Rejected token (%s)", exc.reason)
        raise


def require_token(request: Request) -> Identity:
    """Require a valid token. Raises TokenRequired or TokenInvalid otherwise."""
    tokens: TokenService = request.app.state.tokens
    identity = authorize(request.headers.get("Authorization"), tokens)
    request.state.identity = identity
    return identity
