"""Health check route."""

from typing import Annotated

from fastapi import APIRouter, Depends

from api.deps import get_settings
from config import Settings

router = APIRouter()


@router.get("/health")
async def health(settings: Annotated[Settings, Depends(get_settings)]) -> dict:
    """Reports liveness and the library being served."""
    return {
        "status": "ok",
        "movies_dir": str(settings.movies_dir),
        "extensions": settings.movie_extensions,
        "window_bytes": settings.default_window_bytes,
        "chunk_bytes": settings.chunk_size_bytes,
    }
