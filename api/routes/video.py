"""API routes for streaming movie bytes with Range support."""

import os
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import Response

from api.deps import get_library, get_settings
from api.responses import WindowResponse
from config import Settings
from core.errors import (
    MalformedHeaderError,
    MovieNotFoundError,
    RangeNotSatisfiableError,
    UnsupportedMediaError,
)
from core.protocols import MovieResolver
from core.streaming import resolve_range
from core.utils.logger import logger

router = APIRouter()


@router.api_route("/video/{movie}", methods=["GET", "HEAD"], response_model=None)
async def stream_video(
    movie: str,
    request: Request,
    library: Annotated[MovieResolver, Depends(get_library)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> Response:
    """Streams a window of a movie file, honouring the Range header.

    Without a Range header the first window of the file is sent with
    status 200; with one, the requested (window-capped) bytes are sent with
    status 206 and a Content-Range header.

    Args:
        movie: Movie identifier (file name without extension).
        request: The incoming HTTP request containing Range headers.
        library: Resolver mapping the identifier to a file.
        settings: Streaming configuration.

    Returns:
        A WindowResponse streaming the resolved byte interval.

    Raises:
        HTTPException: If the movie is missing, unsupported, unreadable, or
            the Range header is invalid.
    """
    try:
        movie_file = library.locate(movie)
    except MovieNotFoundError as e:
        raise HTTPException(status_code=404, detail="Movie not found.") from e
    except UnsupportedMediaError as e:
        raise HTTPException(status_code=403, detail="Unsupported file format.") from e

    try:
        source = open(movie_file.path, "rb")  # closed by WindowResponse
    except OSError as e:
        logger.error(f"Could not open {movie_file.path}: {e}")
        raise HTTPException(status_code=500, detail="Could not open video file.") from e

    try:
        file_size = os.fstat(source.fileno()).st_size
        range_header = request.headers.get("range")

        if file_size == 0 and not range_header:
            source.close()
            return Response(
                status_code=200,
                headers={"Accept-Ranges": "bytes"},
                media_type=movie_file.content_type,
            )

        interval = resolve_range(range_header, file_size, settings.default_window_bytes)
    except OSError as e:
        source.close()
        logger.error(f"Could not stat {movie_file.path}: {e}")
        raise HTTPException(status_code=500, detail="Could not get file info.") from e
    except MalformedHeaderError as e:
        source.close()
        raise HTTPException(status_code=400, detail=str(e)) from e
    except RangeNotSatisfiableError as e:
        source.close()
        headers = None
        if settings.unsatisfiable_range_status == 416:
            headers = {"Content-Range": f"bytes */{file_size}"}
        raise HTTPException(
            status_code=settings.unsatisfiable_range_status,
            detail=str(e),
            headers=headers,
        ) from e

    logger.debug(
        f"Serving {movie_file.path.name} bytes {interval.start}-{interval.end}/{file_size}"
    )
    return WindowResponse(
        source,
        interval,
        file_size,
        partial=bool(range_header),
        chunk_size=settings.chunk_size_bytes,
        media_type=movie_file.content_type,
        send_body=request.method != "HEAD",
    )
