"""ISO-8601 Zulu Timestamps — strict parsing for query time windows.

Invariants:
    - Accepted format is exactly YYYY-MM-DDTHH:MM:SS.mmmZ (millisecond precision, UTC)
    - A string is valid only if it round-trips through parse + format unchanged
      (rejects impossible dates such as 2024-02-30)
    - Returned datetimes are timezone-aware UTC

Design Decisions:
    - Strict single format over dateutil-style leniency: clients generate these with
      Date.toISOString(), anything else is a client bug worth surfacing
"""

import re
from datetime import datetime, timezone

from app.core.errors import InvalidInputError

_ZULU_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")
_ZULU_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


def format_zulu(value: datetime) -> str:
    """Format an aware or naive-UTC datetime as YYYY-MM-DDTHH:MM:SS.mmmZ."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def parse_zulu(value: str) -> datetime | None:
    """Parse a strict Zulu timestamp. None when the string is not one."""
    if not isinstance(value, str) or not _ZULU_PATTERN.match(value):
        return None
    try:
        parsed = datetime.strptime(value, _ZULU_FORMAT).replace(tzinfo=timezone.utc)
    except ValueError:
        return None
    if format_zulu(parsed) != value:
        return None
    return parsed


def is_iso_zulu(value: str) -> bool:
    return parse_zulu(value) is not None


def parse_time_window(
    start: str | None, end: str | None, required: bool = False,
) -> tuple[datetime, datetime] | None:
    """Validate an optional [start, end) window. end is mandatory once start is given."""
    if not start and not end:
        if required:
            raise InvalidInputError(
                "start parameter empty. Must be supplied", "start",
            )
        return None
    if not start:
        raise InvalidInputError(
            "start parameter empty. Must be supplied with end parameter", "start",
        )
    if not end:
        raise InvalidInputError(
            "end parameter empty. Must be supplied with start parameter", "end",
        )
    start_dt = parse_zulu(start)
    if start_dt is None:
        raise InvalidInputError(
            "start parameter must be an ISO 8601 string in Zulu time", "start",
        )
    end_dt = parse_zulu(end)
    if end_dt is None:
        raise InvalidInputError(
            "end parameter must be an ISO 8601 string in Zulu time", "end",
        )
    if end_dt <= start_dt:
        raise InvalidInputError("end must be after start", "end")
    return start_dt, end_dt
