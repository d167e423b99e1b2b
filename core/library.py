"""Movie file lookup by identifier and extension."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from core.errors import MovieNotFoundError, UnsupportedMediaError
from core.utils.logger import get_logger

log = get_logger(__name__)

CONTENT_TYPES = {
    ".mp4": "video/mp4",
    ".mkv": "video/x-matroska",
}


@dataclass(frozen=True, slots=True)
class MovieFile:
    """A resolved movie on disk."""

    movie_id: str
    path: Path
    size: int
    content_type: str


def content_type_for(path: Path) -> str:
    """Return the Content-Type for a movie file.

    Raises:
        UnsupportedMediaError: If the extension is not a servable format.
    """
    suffix = path.suffix.lower()
    try:
        return CONTENT_TYPES[suffix]
    except KeyError:
        raise UnsupportedMediaError(
            "Unsupported file format.", context={"path": str(path)}
        ) from None


def _is_safe_id(movie_id: str) -> bool:
    if not movie_id or movie_id in {".", ".."}:
        return False
    return not any(ch in movie_id for ch in ("/", "\\", "\x00"))


class MovieLibrary:
    """Finds ``<root>/<movie_id>.<ext>`` trying each extension in order."""

    def __init__(self, root: Path | str, extensions: Sequence[str] = ("mp4", "mkv")):
        self.root = Path(root)
        self.extensions = tuple(ext.lower().lstrip(".") for ext in extensions)
        if not self.extensions:
            raise ValueError("At least one movie extension is required")

    def locate(self, movie_id: str) -> MovieFile:
        """Resolve ``movie_id`` to the first existing file.

        Args:
            movie_id: Bare movie name, without directory or extension.

        Returns:
            The matching MovieFile.

        Raises:
            MovieNotFoundError: If the identifier is invalid or no file
                exists for any configured extension.
            UnsupportedMediaError: If the match has no known Content-Type.
        """
        if not _is_safe_id(movie_id):
            log.warning(f"Rejected movie identifier: {movie_id!r}")
            raise MovieNotFoundError("Movie not found.", context={"movie": movie_id})

        for ext in self.extensions:
            candidate = self.root / f"{movie_id}.{ext}"
            if candidate.is_file():
                return MovieFile(
                    movie_id=movie_id,
                    path=candidate,
                    size=candidate.stat().st_size,
                    content_type=content_type_for(candidate),
                )

        raise MovieNotFoundError("Movie not found.", context={"movie": movie_id})
