"""Background task indexing package."""

from .worker import (
    TaskIndexWorker,
    apply_daily_note_date,
    handle_message,
    process_batch,
    process_file,
)

__all__ = [
    "TaskIndexWorker",
    "apply_daily_note_date",
    "handle_message",
    "process_batch",
    "process_file",
]
