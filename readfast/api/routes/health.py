"""Health check API route."""

from fastapi import APIRouter

from readfast import __version__

router = APIRouter()


@router.get("/health")
def health_check() -> dict:
    """Health check endpoint."""
    return {
        "status": "ok",
        "version": __version__,
    }
