import pytest
from pathlib import Path

from fastapi.testclient import TestClient

from api.server import create_app
from config import Settings
from core.utils.templates import reload_templates

# Test Data & Media Fixtures

_PATTERN = bytes(range(251))


def pattern_bytes(size: int) -> bytes:
    """Deterministic, non-repeating-per-KB content so offsets are checkable."""
    return (_PATTERN * (size // len(_PATTERN) + 1))[:size]


@pytest.fixture
def pattern():
    return pattern_bytes


@pytest.fixture
def movies_dir(tmp_path) -> Path:
    """
    A temporary movie library:
      - big.mp4    10,000,000 bytes
      - small.mp4  100 bytes
      - clip.mkv   50,000 bytes
      - empty.mp4  0 bytes
    """
    root = tmp_path / "movies"
    root.mkdir()
    (root / "big.mp4").write_bytes(pattern_bytes(10_000_000))
    (root / "small.mp4").write_bytes(pattern_bytes(100))
    (root / "clip.mkv").write_bytes(pattern_bytes(50_000))
    (root / "empty.mp4").write_bytes(b"")
    return root


@pytest.fixture
def app_settings(movies_dir) -> Settings:
    return Settings(movies_dir=movies_dir)


@pytest.fixture
def client(app_settings):
    with TestClient(create_app(app_settings)) as c:
        yield c


# Mocks & Environment

@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """
    Auto-used so no test picks up a developer's .env overrides.
    """
    for var in (
        "MOVIES_DIR",
        "MOVIE_EXTENSIONS",
        "DEFAULT_WINDOW_BYTES",
        "CHUNK_SIZE_BYTES",
        "UNSATISFIABLE_RANGE_STATUS",
        "TEMPLATE_DIR",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("LOG_LEVEL", "ERROR")
    reload_templates()
    yield
    reload_templates()
