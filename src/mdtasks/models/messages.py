"""Message models exchanged with the background index worker.

Commands and results are discriminated unions keyed on the ``type`` field.
They cross the worker boundary as plain dicts (``model_dump()``), so nothing
is shared between the caller and the worker.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, Field

from .mdtasks_config import DailyNoteConfig
from .task import DateType, MetadataFormat, Task


class FileStats(BaseModel):
    """File metadata supplied by the caller."""

    ctime: int | None = None  # Epoch milliseconds
    mtime: int | None = None
    size: int | None = None


class FileMetadata(BaseModel):
    """Pre-computed file metadata (e.g. a host application's tag cache)."""

    tags: list[str] = Field(default_factory=list)


class IndexerSettings(BaseModel):
    """Snapshot of the settings the worker needs to parse files."""

    prefer_metadata_format: MetadataFormat = "tasks"
    completed_markers: list[str] = Field(default_factory=lambda: ["x", "X"])
    use_daily_note_path_as_date: bool = False
    daily_note_format: str = "YYYY-MM-DD"
    daily_note_path: str = ""
    use_as_date_type: DateType = "due"

    @classmethod
    def from_config(
        cls,
        metadata_format: MetadataFormat,
        completed_markers: list[str],
        daily_notes: DailyNoteConfig,
    ) -> "IndexerSettings":
        """Build a settings snapshot from configuration models."""
        return cls(
            prefer_metadata_format=metadata_format,
            completed_markers=list(completed_markers),
            use_daily_note_path_as_date=daily_notes.enabled,
            daily_note_format=daily_notes.format,
            daily_note_path=daily_notes.path,
            use_as_date_type=daily_notes.use_as_date_type,
        )


class BatchFile(BaseModel):
    """One file in a batch index command."""

    path: str
    content: str
    stats: FileStats | None = None
    metadata: FileMetadata | None = None


# --- Commands ---


class ParseTasksCommand(BaseModel):
    """Parse a single file."""

    type: Literal["parse_tasks"] = "parse_tasks"
    file_path: str
    content: str
    stats: FileStats | None = None
    metadata: FileMetadata | None = None
    settings: IndexerSettings = Field(default_factory=IndexerSettings)


class BatchIndexCommand(BaseModel):
    """Parse many files and reply once with aggregated results."""

    type: Literal["batch_index"] = "batch_index"
    files: list[BatchFile] = Field(default_factory=list)
    settings: IndexerSettings = Field(default_factory=IndexerSettings)


IndexerCommand = Annotated[
    ParseTasksCommand | BatchIndexCommand,
    Field(discriminator="type"),
]


# --- Results ---


class ParseStats(BaseModel):
    """Counts and timing for one parsed file."""

    total_tasks: int = 0
    completed_tasks: int = 0
    processing_time_ms: int = 0


class TaskParseResult(BaseModel):
    """Tasks parsed from a single file."""

    type: Literal["parse_result"] = "parse_result"
    file_path: str
    tasks: list[Task] = Field(default_factory=list)
    stats: ParseStats = Field(default_factory=ParseStats)


class ErrorResult(BaseModel):
    """A failure, tagged with the originating file when known."""

    type: Literal["error"] = "error"
    error: str
    file_path: str | None = None


class BatchFileResult(BaseModel):
    """Per-file entry of a batch result."""

    file_path: str
    task_count: int = 0
    tasks: list[Task] = Field(default_factory=list)


class BatchStats(BaseModel):
    """Aggregate counts and timing for a batch."""

    total_files: int = 0
    total_tasks: int = 0
    failed_files: int = 0
    processing_time_ms: int = 0


class BatchIndexResult(BaseModel):
    """Aggregated reply to a batch command, in submission order."""

    type: Literal["batch_result"] = "batch_result"
    results: list[BatchFileResult] = Field(default_factory=list)
    errors: list[ErrorResult] = Field(default_factory=list)
    stats: BatchStats = Field(default_factory=BatchStats)

    @property
    def has_errors(self) -> bool:
        """Whether any file failed."""
        return len(self.errors) > 0


IndexerResult = Annotated[
    TaskParseResult | BatchIndexResult | ErrorResult,
    Field(discriminator="type"),
]
