import pytest

from core.errors import MalformedHeaderError, RangeError, RangeNotSatisfiableError
from core.streaming.ranges import DEFAULT_WINDOW, ByteInterval, resolve_range

MiB = 1024 * 1024


def test_default_window_is_two_mib():
    assert DEFAULT_WINDOW == 2 * MiB


@pytest.mark.parametrize("file_size", [1, 100, DEFAULT_WINDOW - 1, DEFAULT_WINDOW, DEFAULT_WINDOW + 1, 10_000_000])
def test_absent_header_serves_leading_window(file_size):
    interval = resolve_range(None, file_size)
    assert interval == ByteInterval(0, min(DEFAULT_WINDOW, file_size) - 1)


def test_empty_header_is_treated_as_absent():
    assert resolve_range("", 10_000_000) == ByteInterval(0, 2097151)


def test_scenario_no_range_large_file():
    interval = resolve_range(None, 10_000_000)
    assert (interval.start, interval.end) == (0, 2097151)
    assert interval.length == 2097152


def test_scenario_open_range_capped_to_window():
    interval = resolve_range("bytes=5000000-", 10_000_000)
    assert (interval.start, interval.end) == (5000000, 7097151)
    assert interval.content_range(10_000_000) == "bytes 5000000-7097151/10000000"


@pytest.mark.parametrize(
    "start,end,file_size",
    [
        (0, 0, 1),
        (0, 99, 100),
        (10, 20, 100),
        (99, 99, 100),
        (0, 5 * MiB, 10 * MiB),
        (1000, 1000 + DEFAULT_WINDOW, 10 * MiB),
        (9 * MiB, 10 * MiB - 1, 10 * MiB),
    ],
)
def test_explicit_range_end_is_min_of_end_window_and_file(start, end, file_size):
    interval = resolve_range(f"bytes={start}-{end}", file_size)
    assert interval.start == start
    assert interval.end == min(end, start + DEFAULT_WINDOW - 1, file_size - 1)


def test_explicit_end_beyond_file_is_clamped():
    assert resolve_range("bytes=50-500", 100) == ByteInterval(50, 99)


def test_open_range_near_end_of_file_is_clamped():
    assert resolve_range("bytes=90-", 100) == ByteInterval(90, 99)


@pytest.mark.parametrize("start", [100, 101, 200, 10**12])
def test_start_at_or_beyond_file_size_is_not_satisfiable(start):
    with pytest.raises(RangeNotSatisfiableError):
        resolve_range(f"bytes={start}-", 100)


def test_scenario_small_file_start_beyond_end():
    with pytest.raises(RangeNotSatisfiableError):
        resolve_range("bytes=200-", 100)


def test_empty_file_has_no_satisfiable_interval():
    with pytest.raises(RangeNotSatisfiableError):
        resolve_range(None, 0)
    with pytest.raises(RangeNotSatisfiableError):
        resolve_range("bytes=0-", 0)


@pytest.mark.parametrize(
    "header",
    [
        "bytes=foo-bar",
        "items=0-10",
        "Bytes=0-10",
        "bytes 0-10",
        "bytes0-10",
        "bytes=-500",
        "bytes=",
        "bytes=100",
        "bytes=abc-",
        "bytes=10-x",
        "bytes=+5-10",
        "bytes= 5-10",
        "bytes=0-10,20-30",
        "bytes=0-10-20",
        "bytes=20-10",
        "=0-10",
    ],
)
def test_malformed_headers(header):
    with pytest.raises(MalformedHeaderError):
        resolve_range(header, 10_000)


def test_range_errors_share_a_base_class():
    with pytest.raises(RangeError):
        resolve_range("bytes=foo-bar", 100)
    with pytest.raises(RangeError):
        resolve_range("bytes=200-", 100)


def test_malformed_error_carries_header_context():
    with pytest.raises(MalformedHeaderError) as exc_info:
        resolve_range("bytes=foo-bar", 100)
    assert exc_info.value.context["range"] == "bytes=foo-bar"


def test_custom_window():
    assert resolve_range(None, 1000, default_window=10) == ByteInterval(0, 9)
    assert resolve_range("bytes=100-", 1000, default_window=10) == ByteInterval(100, 109)
    assert resolve_range("bytes=100-104", 1000, default_window=10) == ByteInterval(100, 104)


def test_window_disabled_serves_to_end_of_file():
    assert resolve_range(None, 10_000_000, default_window=None) == ByteInterval(0, 9_999_999)
    assert resolve_range("bytes=5000000-", 10_000_000, default_window=None) == ByteInterval(5_000_000, 9_999_999)
    assert resolve_range("bytes=5-9", 100, default_window=None) == ByteInterval(5, 9)


@pytest.mark.parametrize("window", [0, -1])
def test_non_positive_window_is_a_programming_error(window):
    with pytest.raises(ValueError):
        resolve_range(None, 100, default_window=window)


def test_resolution_is_idempotent():
    first = resolve_range("bytes=123-456", 10_000)
    second = resolve_range("bytes=123-456", 10_000)
    assert first == second
    assert resolve_range(None, 10_000) == resolve_range(None, 10_000)


def test_byte_interval_validation():
    with pytest.raises(ValueError):
        ByteInterval(-1, 5)
    with pytest.raises(ValueError):
        ByteInterval(10, 9)
    assert ByteInterval(5, 5).length == 1


def test_byte_interval_is_immutable():
    interval = ByteInterval(0, 9)
    with pytest.raises(AttributeError):
        interval.start = 3  # type: ignore[misc]
