"""
jokes/routes.py -- Protected jokes endpoint.

Routes:
  GET /api/jokes -- list every joke; requires a valid token

Every route on this router goes through require_token, attached at the
router level so a new route cannot be added without the gate.

Layer rule: jokes/ imports from auth/, never from api/. asgi.py mounts this
router onto the API app.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, ConfigDict

from auth.dependencies import require_token
from auth.models import Identity
from jokes.data import JokeProvider

logger = logging.getLogger("jokevault.jokes")

router = APIRouter(dependencies=[Depends(require_token)])

_provider = JokeProvider()


class JokeResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    joke: str


@router.get("/jokes", response_model=list[JokeResponse])
async def list_jokes(request: Request) -> list[JokeResponse]:
    """Return the joke collection to an authenticated caller."""
    identity: Identity = request.state.identity
    jokes = _provider.list_jokes()
    logger.debug("Serving %d jokes to %r", len(jokes), identity.username)
    return [JokeResponse(id=j.id, joke=j.joke) for j in jokes]
