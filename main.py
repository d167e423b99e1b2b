"""Command-line entrypoint for the movie streaming server.

Serves ``<movies-dir>/<name>.mp4`` (or ``.mkv``) at ``/video/<name>`` with
HTTP Range support, and a player page at ``/stream/<name>``.

Usage:
    uv run python main.py --movies-dir ./movies --port 3000
"""

from __future__ import annotations

import argparse
from pathlib import Path

import uvicorn

from api.server import create_app
from config import settings
from core.utils.logger import setup_logger


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Serve local movies over HTTP with Range support.")
    parser.add_argument("--host", default=settings.host, help="Interface to bind")
    parser.add_argument("--port", type=int, default=settings.port, help="Port to listen on")
    parser.add_argument(
        "--movies-dir",
        type=Path,
        default=settings.movies_dir,
        help="Directory containing <name>.mp4 / <name>.mkv files",
    )
    parser.add_argument("--log-level", default=settings.log_level, help="Console log level")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Parse arguments and run the server under uvicorn."""
    args = _parse_args(argv)
    cfg = settings.model_copy(
        update={
            "host": args.host,
            "port": args.port,
            "movies_dir": args.movies_dir,
            "log_level": args.log_level,
        }
    )
    setup_logger(cfg.log_level)
    app = create_app(cfg)
    uvicorn.run(app, host=cfg.host, port=cfg.port, log_config=None)


if __name__ == "__main__":
    main()
