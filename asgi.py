"""
asgi.py -- Application assembly for JokeVault.

This is the ONLY file that imports from both api/ and jokes/. It joins the
two independent layers into a single ASGI app without coupling them to each
other. api/main.py knows nothing about jokes/; jokes/routes.py knows nothing
about api/.

Run with:  uvicorn asgi:app --reload
           python main.py serve
"""

from api.main import app
from jokes.routes import router as jokes_router

app.include_router(jokes_router, prefix="/api", tags=["Jokes"])
