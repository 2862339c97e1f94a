"""Main API router."""

from fastapi import APIRouter

from psdforge import __version__

from .templates import router as templates_router

api_router = APIRouter()


@api_router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


api_router.include_router(templates_router)
