"""
api/routes/auth.py -- Registration and login REST endpoints.

Routes:
  POST /api/auth/register  -- create an account; 201 {username}
  POST /api/auth/login     -- exchange credentials for a token; 200 {message, token}

Both routes are public. Failures are raised as AuthError subclasses by
AuthService and turned into {"message": ...} bodies by the exception handler
in api/main.py, so these handlers only describe the happy path.

Security:
  Cache-Control: no-store on login responses -- the body carries a token.
  The request body is never logged.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from api.models import CredentialsRequest, LoginResponse, RegisterResponse
from auth.service import AuthService

router = APIRouter()


@router.post("/auth/register", response_model=RegisterResponse, status_code=201)
async def register(request: Request, body: Optional[CredentialsRequest] = None) -> RegisterResponse:
    """Register a username/password pair. The password is stored only as a bcrypt verifier."""
    service: AuthService = request.app.state.auth_service
    body = body or CredentialsRequest()
    user = await service.register(body.username, body.password)
    return RegisterResponse(username=user.username)


@router.post("/auth/login", response_model=LoginResponse)
async def login(request: Request, body: Optional[CredentialsRequest] = None) -> JSONResponse:
    """Authenticate with username and password and return a signed token.

    Unknown username and wrong password produce the same 400 "invalid
    credentials" response.
    """
    service: AuthService = request.app.state.auth_service
    body = body or CredentialsRequest()
    result = await service.login(body.username, body.password)
    resp = JSONResponse(
        status_code=200,
        content=LoginResponse(message=result.message, token=result.token).model_dump(),
    )
    resp.headers["Cache-Control"] = "no-store"
    return resp
