"""Range resolution and bounded-window streaming."""

from core.streaming.ranges import DEFAULT_WINDOW, ByteInterval, resolve_range
from core.streaming.window import (
    DEFAULT_CHUNK_SIZE,
    AsyncByteSink,
    ByteSink,
    ByteSource,
    StreamOutcome,
    StreamStop,
    WindowReader,
    astream_window,
    stream_window,
)

__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "DEFAULT_WINDOW",
    "AsyncByteSink",
    "ByteInterval",
    "ByteSink",
    "ByteSource",
    "StreamOutcome",
    "StreamStop",
    "WindowReader",
    "astream_window",
    "resolve_range",
    "stream_window",
]
