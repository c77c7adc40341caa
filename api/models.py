"""
API request and response models for JokeVault REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py, which
own the internal domain representation. Route handlers map between the two.

Credential fields are Optional on purpose: a missing username or password is
a flow-level ValidationError ("username and password required", 400), not a
schema failure, so the request model must accept the body first.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict

# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class CredentialsRequest(BaseModel):
    """Request body for POST /api/auth/register and POST /api/auth/login."""

    username: Optional[str] = None
    password: Optional[str] = None


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class RegisterResponse(BaseModel):
    """Public projection of a newly created user. Never includes the verifier."""

    model_config = ConfigDict(frozen=True)

    username: str


class LoginResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str
    token: str


class MessageResponse(BaseModel):
    """Envelope for every error response: {"message": "..."}."""

    model_config = ConfigDict(frozen=True)

    message: str


class HealthResponse(BaseModel):
    """Response for GET /api/health."""

    model_config = ConfigDict(frozen=True)

    status: str = "healthy"
    version: str
    components: dict[str, str]
