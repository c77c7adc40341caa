"""
api/main.py -- FastAPI application entry point for JokeVault.

Run with:  uvicorn asgi:app --reload
           python main.py serve

Middleware stack (outermost to innermost):
  1. CORSMiddleware -- adds CORS headers for allowed browser origins
  2. log_requests   -- one log line per request with status and latency

Lifespan builds the auth components once at startup and stores them on
app.state; shutdown closes the credential store. The signing secret is read
from get_settings() here and injected into TokenService -- no other module
reads it.

The protected jokes router is mounted by asgi.py, not here. api/ knows
nothing about jokes/.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.models import HealthResponse, MessageResponse
from api.routes.auth import router as auth_router
from auth.errors import AuthError
from auth.passwords import PasswordHasher
from auth.service import AuthService
from auth.store import UserStore
from auth.tokens import TokenService
from core.config import get_settings

VERSION = "1.0.0"

_settings = get_settings()

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=_settings.log_level.upper(),
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("jokevault.api")


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application-level resources across the full server lifetime.

    Everything before yield runs on startup; everything after yield runs on
    shutdown.

    Startup order matters:
      1. Store first -- migrate() must run before any request touches users.
      2. Hasher second -- computes its timing-equalization verifier once.
      3. Token service and auth service last -- they depend on the above.
    """
    logger.info("JokeVault API starting up")
    store = UserStore(_settings.database_url)
    store.migrate()
    app.state.user_store = store
    app.state.hasher = PasswordHasher(rounds=_settings.bcrypt_rounds)
    app.state.tokens = TokenService(
        secret_key=_settings.secret_key,
        expire_seconds=_settings.token_expire_seconds,
    )
    app.state.auth_service = AuthService(store, app.state.hasher, app.state.tokens)
    logger.info(
        "Auth initialized (users=%d, bcrypt_rounds=%d, token_expire_seconds=%d)",
        store.count_users(),
        _settings.bcrypt_rounds,
        _settings.token_expire_seconds,
    )

    yield

    store.close()
    logger.info("JokeVault API shutdown complete")


# ---------------------------------------------------------------------------
# App instantiation
# ---------------------------------------------------------------------------

app = FastAPI(
    title="JokeVault API",
    description="Register, log in, and read jokes with a signed token.",
    version=VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.cors_origins,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type", "Authorization"],
    max_age=3600,
)


# ---------------------------------------------------------------------------
# Request logging middleware
#
# Every request passes through this coroutine before reaching any route
# handler. Wall-clock time around call_next gives per-response latency.
# ---------------------------------------------------------------------------


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s %d %.1fms %s",
        request.method,
        request.url.path,
        response.status_code,
        ms,
        request.client.host if request.client else "unknown",
    )
    return response


# ---------------------------------------------------------------------------
# Router registration
# ---------------------------------------------------------------------------

app.include_router(auth_router, prefix="/api", tags=["Auth"])
# Jokes router is mounted by asgi.py, not here.


# ---------------------------------------------------------------------------
# Exception handlers
#
# Every error response uses the same {"message": "..."} body.
# ---------------------------------------------------------------------------


def _message(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=MessageResponse(message=message).model_dump())


@app.exception_handler(AuthError)
async def auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
    """Map flow and gate errors to their status code and message.

    Infrastructure errors (expose=False) are logged with their traceback and
    answered with the class's generic message only.
    """
    if not exc.expose:
        logger.error(
            "%s on %s %s",
            exc.code,
            request.method,
            request.url.path,
            exc_info=exc,
        )
    return _message(exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 400 when the request body is not valid JSON or has the wrong types."""
    # Log locations and types only: error entries echo the raw input, which may hold a password.
    problems = [(".".join(str(p) for p in e.get("loc", ())), e.get("type")) for e in exc.errors()]
    logger.info("Request validation failed on %s: %s", request.url.path, problems)
    return _message(400, "invalid request body")


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Return 404/405 and friends in the same {"message"} shape."""
    return _message(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unexpected server errors.

    The raw exception is written to the log only, never to the response body.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return _message(500, "internal server error")


# ---------------------------------------------------------------------------
# Health endpoint
#
# Defined directly in main.py (not in a router) so it is always reachable
# regardless of router registration state.
# ---------------------------------------------------------------------------


@app.get("/api/health", tags=["Health"])
async def health(request: Request) -> HealthResponse:
    """Return API liveness, version and database connectivity."""
    store: UserStore = request.app.state.user_store
    database = "ok" if await asyncio.to_thread(store.ping) else "error"
    return HealthResponse(version=VERSION, components={"app": "ok", "database": database})
