"""Utility functions."""

from .collation import compare_text, natural_key
from .dates import (
    extract_date_from_path,
    from_epoch_ms,
    parse_local_date,
    start_of_day_ms,
    to_epoch_ms,
    to_iso,
    today_ms,
)

__all__ = [
    "compare_text",
    "extract_date_from_path",
    "from_epoch_ms",
    "natural_key",
    "parse_local_date",
    "start_of_day_ms",
    "to_epoch_ms",
    "to_iso",
    "today_ms",
]
