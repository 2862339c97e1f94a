"""FastAPI application factory."""

from fastapi import FastAPI

from psdforge import __version__
from psdforge.api import api_router


def create_api_app() -> FastAPI:
    """Create the psdforge API application.

    Routes:
        GET  /health
        POST /generate
        POST /inspect
    """
    app = FastAPI(title="psdforge", version=__version__)
    app.include_router(api_router)
    return app
