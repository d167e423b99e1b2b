"""Configuration settings for the movie streaming server."""

from pathlib import Path
from typing import Literal

from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_WINDOW_BYTES = 2 * 1024 * 1024
DEFAULT_CHUNK_BYTES = 6 * 1024


class Settings(BaseSettings):
    """Server, library and streaming configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_parse_none_str="null",
    )

    @staticmethod
    def project_root(start: Path | None = None) -> Path:
        """Find the project root directory."""
        start = start or Path(__file__).resolve()
        for parent in start.parents:
            if (parent / ".git").exists() or (parent / "pyproject.toml").exists():
                return parent
        return Path.cwd()

    @computed_field
    @property
    def log_dir(self) -> Path:
        """Path to project_root/logs."""
        path = self.project_root() / "logs"
        path.mkdir(exist_ok=True)
        return path

    #  Library
    movies_dir: Path = Field(default=Path("movies"), description="Movie files root")
    movie_extensions: list[str] = Field(
        default=["mp4", "mkv"],
        description="Extensions probed in order when locating a movie",
    )
    template_dir: Path = Field(
        default_factory=lambda: Settings.project_root() / "templates",
        description="Directory holding HTML templates",
    )

    #  Streaming
    default_window_bytes: int | None = Field(
        default=DEFAULT_WINDOW_BYTES,
        gt=0,
        description="Max bytes served per response; None serves to end of file",
    )
    chunk_size_bytes: int = Field(default=DEFAULT_CHUNK_BYTES, gt=0)
    unsatisfiable_range_status: Literal[400, 416] = 400

    #  Server
    host: str = "0.0.0.0"
    port: int = Field(default=3000, ge=1, le=65535)
    log_level: str = "INFO"

    @field_validator("movie_extensions")
    @classmethod
    def _normalize_extensions(cls, value: list[str]) -> list[str]:
        return [ext.lower().lstrip(".") for ext in value]


settings = Settings()
