"""Data models."""

from .mdtasks_config import (
    DailyNoteConfig,
    MdtasksConfig,
    SortConfig,
    SortCriterion,
    StatusConfig,
    StatusCycleEntry,
)
from .messages import (
    BatchFile,
    BatchFileResult,
    BatchIndexCommand,
    BatchIndexResult,
    BatchStats,
    ErrorResult,
    FileMetadata,
    FileStats,
    IndexerCommand,
    IndexerResult,
    IndexerSettings,
    ParseStats,
    ParseTasksCommand,
    TaskParseResult,
)
from .task import (
    MARK_COMPLETE,
    MARK_INCOMPLETE,
    STATUS_OVERDUE,
    MetadataFormat,
    Task,
    TaskForest,
    make_task_id,
)

__all__ = [
    "MARK_COMPLETE",
    "MARK_INCOMPLETE",
    "STATUS_OVERDUE",
    "BatchFile",
    "BatchFileResult",
    "BatchIndexCommand",
    "BatchIndexResult",
    "BatchStats",
    "DailyNoteConfig",
    "ErrorResult",
    "FileMetadata",
    "FileStats",
    "IndexerCommand",
    "IndexerResult",
    "IndexerSettings",
    "MdtasksConfig",
    "MetadataFormat",
    "ParseStats",
    "ParseTasksCommand",
    "SortConfig",
    "SortCriterion",
    "StatusConfig",
    "StatusCycleEntry",
    "Task",
    "TaskForest",
    "TaskParseResult",
    "make_task_id",
]
