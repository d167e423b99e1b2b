"""API route definitions and exports."""
from api.routes import player, system, video

__all__ = ["player", "system", "video"]
