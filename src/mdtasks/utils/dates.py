"""Utilities for date handling.

Task dates are stored as epoch milliseconds at local midnight, which keeps
them comparable with plain integer arithmetic in the sort engine.
"""

import re
from datetime import date, datetime

# Moment-style tokens used in daily note formats, longest first
_FORMAT_TOKENS = {
    "YYYY": "%Y",
    "yyyy": "%Y",
    "MMMM": "%B",
    "MMM": "%b",
    "dddd": "%A",
    "ddd": "%a",
    "YY": "%y",
    "yy": "%y",
    "MM": "%m",
    "DD": "%d",
    "dd": "%d",
}
_TOKEN_PATTERN = re.compile("|".join(_FORMAT_TOKENS))


def to_epoch_ms(day: date) -> int:
    """Local midnight of a calendar day as epoch milliseconds."""
    midnight = datetime(day.year, day.month, day.day)
    return int(midnight.timestamp() * 1000)


def from_epoch_ms(value: int) -> date:
    """Calendar day (local time) of an epoch millisecond value."""
    return datetime.fromtimestamp(value / 1000).date()


def today_ms() -> int:
    """Local midnight of the current day as epoch milliseconds."""
    return to_epoch_ms(date.today())


def start_of_day_ms(value: int) -> int:
    """Truncate an epoch millisecond value to local midnight."""
    return to_epoch_ms(from_epoch_ms(value))


def parse_local_date(value: str) -> int | None:
    """
    Parse a YYYY-MM-DD string to local midnight epoch milliseconds.

    Returns None for anything that is not a real calendar date
    (e.g. "2024-02-30").
    """
    try:
        parsed = datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except ValueError:
        return None
    return to_epoch_ms(parsed)


def to_strptime_format(daily_note_format: str) -> str:
    """
    Convert a moment-style date format to a strptime format.

    Example: "YYYY-MM-DD" -> "%Y-%m-%d"
    """
    escaped = daily_note_format.replace("%", "%%")
    return _TOKEN_PATTERN.sub(lambda m: _FORMAT_TOKENS[m.group()], escaped)


def extract_date_from_path(
    file_path: str,
    date_format: str,
    base_path: str = "",
) -> int | None:
    """
    Infer a date from a daily note path.

    The extension and the daily note base path are removed before matching.
    If the remainder does not match, leading folders are dropped one at a
    time, so "Journal/2025/2025-03-01.md" matches "YYYY-MM-DD".

    Returns:
        Local midnight epoch milliseconds, or None if no segment matches
    """
    path = re.sub(r"\.[^/.]+$", "", file_path)
    if base_path and path.startswith(base_path):
        path = path[len(base_path):].removeprefix("/")

    strptime_format = to_strptime_format(date_format)
    while True:
        try:
            return to_epoch_ms(datetime.strptime(path, strptime_format).date())
        except ValueError:
            if "/" not in path:
                return None
            path = path[path.index("/") + 1:]


def to_iso(value: int) -> str:
    """Format an epoch millisecond value as an ISO date (YYYY-MM-DD)."""
    return from_epoch_ms(value).isoformat()
