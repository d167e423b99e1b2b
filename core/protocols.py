"""Core protocols for the pluggable collaborators.

The HTTP layer depends on these narrow interfaces rather than on a
filesystem layout, so a movie library can be swapped (database-backed
catalogue, object-store mount, test double) without touching the routes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from core.library import MovieFile


@runtime_checkable
class MovieResolver(Protocol):
    """Maps a movie identifier to a readable file.

    Implementations raise ``MovieNotFoundError`` when nothing matches and
    ``UnsupportedMediaError`` when the match cannot be served.
    """

    def locate(self, movie_id: str) -> MovieFile:
        """Return the file backing ``movie_id``."""
        ...
