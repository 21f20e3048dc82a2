"""ISO Dates — verifies strict Zulu timestamp parsing and query windows.

Tests:
    - Only YYYY-MM-DDTHH:MM:SS.mmmZ is accepted, impossible dates rejected
    - format_zulu round-trips parse_zulu
    - parse_time_window requires both ends and end > start
"""

from datetime import datetime, timezone

import pytest

from app.core.errors import InvalidInputError
from app.core.iso_dates import format_zulu, is_iso_zulu, parse_time_window, parse_zulu


def test_parse_zulu_valid():
    parsed = parse_zulu("2024-03-01T10:15:30.250Z")
    assert parsed == datetime(2024, 3, 1, 10, 15, 30, 250_000, tzinfo=timezone.utc)


@pytest.mark.parametrize("value", [
    "2024-03-01T10:15:30Z",
    "2024-03-01 10:15:30.000Z",
    "2024-03-01T10:15:30.000+00:00",
    "2024-02-30T00:00:00.000Z",
    "not a date",
])
def test_parse_zulu_rejects(value):
    assert parse_zulu(value) is None
    assert not is_iso_zulu(value)


def test_format_zulu_round_trip():
    value = "2023-12-31T23:59:59.999Z"
    assert format_zulu(parse_zulu(value)) == value


def test_format_zulu_naive_treated_as_utc():
    assert format_zulu(datetime(2024, 1, 2, 3, 4, 5)) == "2024-01-02T03:04:05.000Z"


def test_window_optional_when_absent():
    assert parse_time_window(None, None) is None


def test_window_required_when_asked():
    with pytest.raises(InvalidInputError):
        parse_time_window(None, None, required=True)


def test_window_start_needs_end():
    with pytest.raises(InvalidInputError) as exc:
        parse_time_window("2024-01-01T00:00:00.000Z", None)
    assert exc.value.field == "end"


def test_window_rejects_bad_format():
    with pytest.raises(InvalidInputError) as exc:
        parse_time_window("2024-01-01", "2024-01-02T00:00:00.000Z")
    assert exc.value.field == "start"


def test_window_rejects_inverted_range():
    with pytest.raises(InvalidInputError):
        parse_time_window("2024-01-02T00:00:00.000Z", "2024-01-01T00:00:00.000Z")


def test_window_parses_both_ends():
    start, end = parse_time_window("2024-01-01T00:00:00.000Z", "2024-01-02T00:00:00.000Z")
    assert (end - start).days == 1
