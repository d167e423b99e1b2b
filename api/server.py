"""FastAPI application factory for the movie streaming server."""

from __future__ import annotations

import time
from contextlib import asynccontextmanager
from uuid import uuid4

from fastapi import FastAPI, Request

from api.routes import player, system, video
from config import Settings, settings as default_settings
from core.library import MovieLibrary
from core.protocols import MovieResolver
from core.utils.logger import bind_context, clear_context, logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    cfg: Settings = app.state.settings
    logger.info("startup")
    if not cfg.movies_dir.is_dir():
        logger.warning(f"Movies directory does not exist: {cfg.movies_dir}")
    else:
        logger.info(
            f"Serving movies from {cfg.movies_dir.resolve()} "
            f"({', '.join(cfg.movie_extensions)})"
        )

    yield

    logger.info("shutdown")


def create_app(
    settings: Settings | None = None,
    library: MovieResolver | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Configuration override; defaults to the environment.
        library: Movie resolver override; defaults to a MovieLibrary over
            ``settings.movies_dir``.
    """
    cfg = settings or default_settings
    app = FastAPI(
        title="Movie Range Streamer",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = cfg
    app.state.library = library or MovieLibrary(cfg.movies_dir, cfg.movie_extensions)

    @app.middleware("http")
    async def access_log_middleware(request: Request, call_next):
        trace_id = request.headers.get("x-trace-id", uuid4().hex[:12])
        bind_context(trace_id=trace_id, component="api")
        started = time.perf_counter()
        try:
            response = await call_next(request)
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.info(
                f"{response.status_code} - {request.method} {request.url.path} "
                f"({elapsed_ms:.1f}ms)"
            )
            return response
        except Exception as exc:
            logger.error(f"{request.method} {request.url.path} failed: {exc}")
            raise
        finally:
            clear_context()

    app.include_router(video.router)
    app.include_router(player.router)
    app.include_router(system.router)

    return app


app = create_app()
