"""Logging configuration and utilities."""

from __future__ import annotations

import inspect
import logging
import sys
from contextvars import ContextVar
from pathlib import Path

from loguru import logger

from config import settings

trace_id_ctx: ContextVar[str | None] = ContextVar("trace_id", default=None)
component_ctx: ContextVar[str | None] = ContextVar("component", default=None)


class InterceptHandler(logging.Handler):
    """Redirects standard logging into Loguru while preserving correct caller info."""

    def emit(self, record: logging.LogRecord) -> None:
        """Log the specified logging record."""
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = inspect.currentframe(), 0
        while frame and (depth == 0 or frame.f_code.co_filename == logging.__file__):
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level,
            record.getMessage(),
        )


def setup_logger(level: str | None = None) -> None:
    """Configure Loguru for console and file logging.

    Features:
    - Human-friendly console logs
    - Structured JSON file logs
    - Full interception of stdlib logging (uvicorn included)
    """
    logger.remove()

    def _patcher(record):
        record["extra"].setdefault("trace_id", trace_id_ctx.get())
        record["extra"].setdefault("component", component_ctx.get())

    # Ensure trace_id always exists to prevent KeyErrors in format string
    logger.configure(patcher=_patcher)

    log_dir: Path = settings.log_dir
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "app.log"

    logger.add(
        sys.stderr,
        level=(level or settings.log_level).upper(),
        colorize=True,
        backtrace=True,
        diagnose=False,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level:<8}</level> | "
            "trace=<cyan>{extra[trace_id]}</cyan> "
            "comp=<cyan>{extra[component]}</cyan> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        ),
    )

    logger.add(
        str(log_file),
        level="DEBUG",
        rotation="10 MB",
        retention="7 days",
        compression="zip",
        serialize=True,
        enqueue=True,
        backtrace=True,
        diagnose=False,
    )

    logging.basicConfig(
        handlers=[InterceptHandler()],
        level=0,
        force=True,
    )

    for noisy in (
        "uvicorn",
        "uvicorn.access",
        "uvicorn.error",
        "asyncio",
    ):
        _logger = logging.getLogger(noisy)
        _logger.handlers = [InterceptHandler()]
        _logger.propagate = False


def bind_context(
    *,
    trace_id: str | None = None,
    component: str | None = None,
) -> None:
    """Bind context vars for the current request task."""
    if trace_id is not None:
        trace_id_ctx.set(trace_id)
    if component is not None:
        component_ctx.set(component)


def clear_context() -> None:
    """Clear all context variables."""
    trace_id_ctx.set(None)
    component_ctx.set(None)


setup_logger()


def get_logger(name: str | None = None):
    """Get a logger instance (optionally bound to a name)."""
    return logger.bind(name=name)
