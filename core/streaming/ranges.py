"""HTTP Range header resolution.

Turns the raw value of a ``Range`` request header plus a known file size
into a single inclusive byte interval. Only the single-range form
``bytes=<start>-[<end>]`` is accepted; suffix ranges (``bytes=-500``) and
multi-range lists are rejected as malformed.

Every response is capped to a fixed window of bytes (2 MiB by default),
including requests without a ``Range`` header and unterminated ranges such
as ``bytes=5000000-``. Browsers follow up with further range requests as
playback advances, so the cap bounds the latency of each response.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from core.errors import MalformedHeaderError, RangeNotSatisfiableError

DEFAULT_WINDOW = 2 * 1024 * 1024
RANGE_UNIT = "bytes"

_DIGITS = re.compile(r"[0-9]+")


@dataclass(frozen=True, slots=True)
class ByteInterval:
    """Inclusive byte interval ``[start, end]`` within a file."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0:
            raise ValueError(f"Interval start must be >= 0, got {self.start}")
        if self.end < self.start:
            raise ValueError(
                f"Interval end {self.end} precedes start {self.start}"
            )

    @property
    def length(self) -> int:
        """Number of bytes covered by the interval."""
        return self.end - self.start + 1

    def content_range(self, file_size: int) -> str:
        """Format the interval as a ``Content-Range`` header value."""
        return f"{RANGE_UNIT} {self.start}-{self.end}/{file_size}"


def _parse_offset(raw: str, header: str, label: str) -> int:
    if not raw:
        raise MalformedHeaderError(
            f"Invalid Range header: missing {label} byte.",
            context={"range": header},
        )
    if not _DIGITS.fullmatch(raw):
        raise MalformedHeaderError(
            f"Invalid {label} byte in Range header.",
            context={"range": header},
        )
    return int(raw)


def resolve_range(
    range_header: str | None,
    file_size: int,
    default_window: int | None = DEFAULT_WINDOW,
) -> ByteInterval:
    """Resolve a Range header against a file of ``file_size`` bytes.

    Args:
        range_header: Raw header value. ``None`` or an empty string means
            the client sent no Range header.
        file_size: Total size of the file in bytes.
        default_window: Maximum number of bytes a single response may
            cover. ``None`` disables the cap.

    Returns:
        The interval to serve. Its length is always at least one byte.

    Raises:
        MalformedHeaderError: If the header is not ``bytes=<start>-[<end>]``.
        RangeNotSatisfiableError: If ``start`` lies at or beyond the end of
            the file, or the file is empty.
        ValueError: If ``default_window`` or ``file_size`` is invalid.
    """
    if default_window is not None and default_window <= 0:
        raise ValueError(f"default_window must be positive, got {default_window}")
    if file_size < 0:
        raise ValueError(f"file_size must be >= 0, got {file_size}")

    if not range_header:
        if file_size == 0:
            raise RangeNotSatisfiableError(
                "File is empty.", context={"file_size": file_size}
            )
        window = file_size if default_window is None else min(default_window, file_size)
        return ByteInterval(0, window - 1)

    unit, eq, range_set = range_header.partition("=")
    if not eq or unit != RANGE_UNIT:
        raise MalformedHeaderError(
            "Invalid Range header.", context={"range": range_header}
        )

    first, dash, last = range_set.partition("-")
    if not dash:
        raise MalformedHeaderError(
            "Invalid Range header: missing '-' separator.",
            context={"range": range_header},
        )

    start = _parse_offset(first, range_header, "start")
    end = _parse_offset(last, range_header, "end") if last else None

    if end is not None and end < start:
        raise MalformedHeaderError(
            "Invalid Range header: end byte precedes start byte.",
            context={"range": range_header},
        )

    if start >= file_size:
        raise RangeNotSatisfiableError(
            "Invalid start byte in Range header.",
            context={"range": range_header, "file_size": file_size},
        )

    if default_window is not None:
        capped = start + default_window - 1
        end = capped if end is None else min(end, capped)
    elif end is None:
        end = file_size - 1

    return ByteInterval(start, min(end, file_size - 1))
