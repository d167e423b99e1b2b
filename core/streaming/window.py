"""Bounded-window chunked copy from a seekable source to a sink."""

from __future__ import annotations

import asyncio
import os
from dataclasses import dataclass
from enum import Enum
from typing import Protocol, runtime_checkable

from core.errors import SinkError, SourceError
from core.streaming.ranges import ByteInterval
from core.utils.logger import get_logger

log = get_logger(__name__)

DEFAULT_CHUNK_SIZE = 6 * 1024


@runtime_checkable
class ByteSource(Protocol):
    """Seekable binary reader, e.g. a file opened in ``rb`` mode."""

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int: ...

    def read(self, size: int = -1) -> bytes: ...


@runtime_checkable
class ByteSink(Protocol):
    """Blocking writer. Returning fewer bytes than given is a short write."""

    def write(self, data: bytes) -> int | None: ...


@runtime_checkable
class AsyncByteSink(Protocol):
    """Cooperative writer, e.g. an HTTP response body."""

    async def write(self, data: bytes) -> None: ...


class StreamStop(str, Enum):
    """Why the copy loop stopped."""

    COMPLETE = "complete"
    END_OF_SOURCE = "end_of_source"
    SOURCE_ERROR = "source_error"
    SINK_ERROR = "sink_error"


@dataclass(frozen=True, slots=True)
class StreamOutcome:
    """Result of copying one interval."""

    expected: int
    bytes_sent: int
    stop: StreamStop
    error: Exception | None = None

    @property
    def complete(self) -> bool:
        return self.stop is StreamStop.COMPLETE

    def raise_for_error(self) -> None:
        """Re-raise a source or sink failure as the matching StreamError."""
        context = {"bytes_sent": self.bytes_sent, "expected": self.expected}
        if self.stop is StreamStop.SOURCE_ERROR:
            raise SourceError(
                f"Reading the source failed after {self.bytes_sent} bytes",
                original_error=self.error,
                context=context,
            )
        if self.stop is StreamStop.SINK_ERROR:
            raise SinkError(
                f"Writing to the sink failed after {self.bytes_sent} bytes",
                original_error=self.error,
                context=context,
            )


class WindowReader:
    """Sequential chunked reader over one interval of a seekable source.

    Never asks the source for more than ``chunk_size`` bytes or more than
    what is left of the interval. A zero-byte read is the end-of-stream
    signal and makes :meth:`read_chunk` return ``b""``.
    """

    def __init__(self, source: ByteSource, interval: ByteInterval, chunk_size: int):
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self.source = source
        self.interval = interval
        self.chunk_size = chunk_size
        self.remaining = interval.length
        self.reads = 0
        self.exhausted = False

    def seek(self) -> None:
        """Position the source at the interval start (absolute)."""
        try:
            self.source.seek(self.interval.start, os.SEEK_SET)
        except (OSError, ValueError) as e:
            raise SourceError(
                f"Seek to byte {self.interval.start} failed: {e}",
                original_error=e,
            ) from e

    def read_chunk(self) -> bytes:
        """Read the next chunk, or ``b""`` once the interval or source ends."""
        if self.remaining <= 0 or self.exhausted:
            return b""

        read_size = min(self.chunk_size, self.remaining)
        self.reads += 1
        try:
            data = self.source.read(read_size)
        except (OSError, ValueError) as e:
            raise SourceError(f"Read failed: {e}", original_error=e) from e

        if not data:
            self.exhausted = True
            return b""

        self.remaining -= len(data)
        return data


def _stopped(
    interval: ByteInterval,
    sent: int,
    stop: StreamStop,
    error: Exception | None = None,
) -> StreamOutcome:
    outcome = StreamOutcome(interval.length, sent, stop, error)
    if stop is StreamStop.SOURCE_ERROR:
        log.error(f"Source failed at {interval.start + sent} after {sent}/{interval.length} bytes: {error}")
    elif stop is StreamStop.SINK_ERROR:
        log.warning(f"Sink failed after {sent}/{interval.length} bytes: {error}")
    elif stop is StreamStop.END_OF_SOURCE:
        log.warning(f"Source ended early after {sent}/{interval.length} bytes")
    return outcome


def stream_window(
    source: ByteSource,
    interval: ByteInterval,
    sink: ByteSink,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> StreamOutcome:
    """Copy ``interval`` from ``source`` to ``sink`` in bounded chunks.

    The source is borrowed: it is neither opened nor closed here. Source and
    sink failures are reported through the returned outcome rather than
    raised, since the caller has usually committed response headers already.

    Args:
        source: Seekable binary reader.
        interval: Bytes to copy.
        sink: Blocking writer.
        chunk_size: Upper bound on each read.

    Returns:
        A StreamOutcome with the number of bytes written and why copying
        stopped.
    """
    reader = WindowReader(source, interval, chunk_size)
    sent = 0

    try:
        reader.seek()
    except SourceError as e:
        return _stopped(interval, sent, StreamStop.SOURCE_ERROR, e)

    while sent < interval.length:
        try:
            data = reader.read_chunk()
        except SourceError as e:
            return _stopped(interval, sent, StreamStop.SOURCE_ERROR, e)
        if not data:
            return _stopped(interval, sent, StreamStop.END_OF_SOURCE)

        try:
            written = sink.write(data)
        except (OSError, ValueError, SinkError) as e:
            return _stopped(interval, sent, StreamStop.SINK_ERROR, e)

        if written is not None and written < len(data):
            sent += max(written, 0)
            short = SinkError(f"Short write: {written} of {len(data)} bytes")
            return _stopped(interval, sent, StreamStop.SINK_ERROR, short)

        sent += len(data)

    return StreamOutcome(interval.length, sent, StreamStop.COMPLETE)


async def astream_window(
    source: ByteSource,
    interval: ByteInterval,
    sink: AsyncByteSink,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> StreamOutcome:
    """Async variant of :func:`stream_window`.

    Seeks and reads run in a worker thread so a slow disk never blocks the
    event loop; writes are awaited on the loop. A disconnected client
    surfaces as a failing write and stops the copy before the next read.
    """
    reader = WindowReader(source, interval, chunk_size)
    sent = 0

    try:
        await asyncio.to_thread(reader.seek)
    except SourceError as e:
        return _stopped(interval, sent, StreamStop.SOURCE_ERROR, e)

    while sent < interval.length:
        try:
            data = await asyncio.to_thread(reader.read_chunk)
        except SourceError as e:
            return _stopped(interval, sent, StreamStop.SOURCE_ERROR, e)
        if not data:
            return _stopped(interval, sent, StreamStop.END_OF_SOURCE)

        try:
            await sink.write(data)
        except (OSError, ValueError, SinkError) as e:
            return _stopped(interval, sent, StreamStop.SINK_ERROR, e)

        sent += len(data)

    return StreamOutcome(interval.length, sent, StreamStop.COMPLETE)
