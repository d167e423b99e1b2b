"""API route for the HTML player page."""

from typing import Annotated
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import HTMLResponse

from api.deps import get_library, get_settings
from config import Settings
from core.errors import MovieNotFoundError, TemplateError, UnsupportedMediaError
from core.protocols import MovieResolver
from core.utils.templates import render_template

router = APIRouter()

PLAYER_TEMPLATE = "player.html"


@router.get("/stream/{movie}", response_class=HTMLResponse)
async def player_page(
    movie: str,
    library: Annotated[MovieResolver, Depends(get_library)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> HTMLResponse:
    """Renders a page with an HTML5 video element pointing at /video/{movie}."""
    try:
        movie_file = library.locate(movie)
    except MovieNotFoundError as e:
        raise HTTPException(status_code=404, detail="Movie not found.") from e
    except UnsupportedMediaError as e:
        raise HTTPException(status_code=403, detail="Unsupported file format.") from e

    try:
        page = render_template(
            PLAYER_TEMPLATE,
            settings.template_dir,
            title=f"Streaming {movie}",
            movie_name=movie,
            content_type=movie_file.content_type,
            video_url=f"/video/{quote(movie, safe='')}",
        )
    except TemplateError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e

    return HTMLResponse(page)
