"""Configuration models for mdtasks.yml."""

import re
from typing import ClassVar, Literal

from pydantic import BaseModel, Field, field_validator

from .task import DateType, MetadataFormat

SortField = Literal[
    "status",
    "priority",
    "due_date",
    "scheduled_date",
    "start_date",
    "content",
]
SortOrder = Literal["asc", "desc"]

# Status groups with special meaning to the sort engine
GROUP_COMPLETED = "completed"
GROUP_CANCELLED = "abandoned"


def _split_markers(value: str | list[str]) -> list[str]:
    """Split a "x|X" style marker string into individual markers."""
    if isinstance(value, str):
        return value.split("|")
    return list(value)


def _camel_to_snake(name: str) -> str:
    """Convert camelCase to snake_case (e.g., "dueDate" -> "due_date")."""
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


class StatusCycleEntry(BaseModel):
    """A named status in the status cycle and its checkbox marker."""

    name: str = Field(..., min_length=1)
    mark: str = Field(..., min_length=1, max_length=1)


class StatusConfig(BaseModel):
    """
    Status semantics: the ordered status cycle plus marker groups.

    ``task_statuses`` maps a group name to its markers. The "completed" and
    "abandoned" groups decide which markers count as done or cancelled.
    """

    cycle: list[StatusCycleEntry] = Field(default_factory=list)
    exclude_from_cycle: list[str] = Field(
        default_factory=list,
        description="Status names skipped when walking the cycle",
    )
    task_statuses: dict[str, list[str]] = Field(default_factory=dict)

    @field_validator("task_statuses", mode="before")
    @classmethod
    def split_marker_strings(cls, v: dict) -> dict:
        """Accept pipe-separated strings as well as lists of markers."""
        if not isinstance(v, dict):
            return v
        return {group: _split_markers(markers) for group, markers in v.items()}

    @field_validator("cycle")
    @classmethod
    def validate_cycle(cls, v: list[StatusCycleEntry]) -> list[StatusCycleEntry]:
        """Validate status names in the cycle are unique."""
        names = [entry.name for entry in v]
        if len(names) != len(set(names)):
            raise ValueError("Status names in cycle must be unique")
        return v

    @property
    def completed_markers(self) -> list[str]:
        """Markers that mark a task as completed."""
        return [m for m in self.task_statuses.get(GROUP_COMPLETED, ["x", "X"]) if m]

    @property
    def cancelled_markers(self) -> list[str]:
        """Markers that mark a task as cancelled."""
        return [m for m in self.task_statuses.get(GROUP_CANCELLED, ["-"]) if m]

    def is_completed(self, mark: str) -> bool:
        """Check if a marker belongs to the completed group."""
        return mark in self.completed_markers

    def is_cancelled(self, mark: str) -> bool:
        """Check if a marker belongs to the cancelled group."""
        return mark in self.cancelled_markers

    @classmethod
    def default(cls) -> "StatusConfig":
        """Return the default status cycle and marker groups."""
        return cls(
            cycle=[
                StatusCycleEntry(name="TODO", mark=" "),
                StatusCycleEntry(name="IN_PROGRESS", mark="/"),
                StatusCycleEntry(name="DONE", mark="x"),
            ],
            task_statuses={
                "completed": ["x", "X"],
                "planned": ["?"],
                "in_progress": [">", "/"],
                "abandoned": ["-"],
                "not_started": [" "],
            },
        )


class SortCriterion(BaseModel):
    """One sort key: a task field and a direction."""

    field: SortField
    order: SortOrder = "asc"

    @field_validator("field", mode="before")
    @classmethod
    def normalize_field(cls, v: str) -> str:
        """Accept camelCase field names such as "dueDate"."""
        if isinstance(v, str):
            return _camel_to_snake(v)
        return v


class SortConfig(BaseModel):
    """Task sorting configuration."""

    enabled: bool = True
    criteria: list[SortCriterion] = Field(
        default_factory=lambda: [
            SortCriterion(field="status"),
            SortCriterion(field="priority"),
            SortCriterion(field="due_date"),
        ]
    )

    @field_validator("criteria")
    @classmethod
    def validate_criteria(cls, v: list[SortCriterion]) -> list[SortCriterion]:
        """Validate each field appears at most once."""
        fields = [c.field for c in v]
        if len(fields) != len(set(fields)):
            raise ValueError("Sort criteria fields must be unique")
        return v


class DailyNoteConfig(BaseModel):
    """Infer a task date from the path of a daily note."""

    enabled: bool = False
    format: str = Field(default="YYYY-MM-DD", min_length=1)
    path: str = Field(default="", description="Folder holding daily notes")
    use_as_date_type: DateType = "due"


class MdtasksConfig(BaseModel):
    """Root configuration from mdtasks.yml."""

    version: int = 1
    metadata_format: MetadataFormat = "tasks"
    statuses: StatusConfig = Field(default_factory=StatusConfig.default)
    sort: SortConfig = Field(default_factory=SortConfig)
    daily_notes: DailyNoteConfig = Field(default_factory=DailyNoteConfig)

    VALID_FORMATS: ClassVar[tuple[str, ...]] = ("tasks", "dataview")

    @field_validator("metadata_format", mode="before")
    @classmethod
    def validate_metadata_format(cls, v: str) -> str:
        """Validate metadata format is a supported value."""
        if v not in cls.VALID_FORMATS:
            raise ValueError(
                f"Invalid metadata_format '{v}'. Must be one of: {', '.join(cls.VALID_FORMATS)}"
            )
        return v

    @classmethod
    def default(cls) -> "MdtasksConfig":
        """Return default configuration."""
        return cls(statuses=StatusConfig.default(), sort=SortConfig())
