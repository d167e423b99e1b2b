"""API dependency injection components."""

from fastapi import Request

from config import Settings
from core.protocols import MovieResolver


def get_settings(request: Request) -> Settings:
    """Retrieve the settings the app was built with."""
    return request.app.state.settings


def get_library(request: Request) -> MovieResolver:
    """Retrieve the movie resolver from app state."""
    return request.app.state.library
