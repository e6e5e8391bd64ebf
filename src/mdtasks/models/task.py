"""Task domain model."""

from collections.abc import Iterator
from typing import Literal

from pydantic import BaseModel, Field

# Computed status assigned to incomplete tasks whose due date has passed
STATUS_OVERDUE = "overdue"

# Plain markers with built-in meaning
MARK_INCOMPLETE = " "
MARK_COMPLETE = "x"

MetadataFormat = Literal["tasks", "dataview"]
DateType = Literal["due", "start", "scheduled"]


def make_task_id(file_path: str, line: int) -> str:
    """Deterministic task ID from its file path and zero-based line number."""
    return f"{file_path}-L{line}"


class Task(BaseModel):
    """Represents a single task line parsed from a markdown document."""

    # Task identification
    id: str  # e.g., "notes/today.md-L12"
    file_path: str = ""
    line: int = 0  # Zero-based line in the originating document
    indentation: int = 0  # Leading whitespace character count

    # Content
    content: str = ""  # Text left after metadata stripping
    original_markdown: str = ""  # Raw line, used verbatim on rewrite

    # Status
    status: str = " "  # Raw checkbox marker
    completed: bool = False

    # Dates (epoch milliseconds at local midnight)
    due_date: int | None = None
    scheduled_date: int | None = None
    start_date: int | None = None
    completed_date: int | None = None
    created_date: int | None = None

    # Classification
    priority: int | None = None  # Higher is more urgent
    recurrence: str | None = None
    project: str | None = None
    context: str | None = None
    tags: list[str] = Field(default_factory=list)

    # Structure (IDs only; the forest owns the tasks)
    parent: str | None = None
    children: list[str] = Field(default_factory=list)

    # Set when a date was inferred from a daily note path
    use_as_date_type: DateType | None = None

    # Sort-only value, never serialized
    calculated_status: str | None = Field(default=None, exclude=True)

    @property
    def has_children(self) -> bool:
        """True if the task owns at least one child."""
        return bool(self.children)

    def add_tag(self, tag: str) -> None:
        """Append a tag unless an equal tag is already present."""
        if tag not in self.tags:
            self.tags.append(tag)


class TaskForest(BaseModel):
    """
    Tasks of one document arranged as a forest.

    Tasks are stored by ID in line order; parent/child links are ID
    references resolved through this collection.
    """

    tasks: dict[str, Task] = Field(default_factory=dict)
    roots: list[str] = Field(default_factory=list)

    def get(self, task_id: str) -> Task | None:
        """Find a task by its ID."""
        return self.tasks.get(task_id)

    def children_of(self, task: Task) -> list[Task]:
        """Child tasks of a task, in current sibling order."""
        return [self.tasks[child_id] for child_id in task.children]

    def root_tasks(self) -> list[Task]:
        """Top-level tasks, in current order."""
        return [self.tasks[task_id] for task_id in self.roots]

    def all_tasks(self) -> list[Task]:
        """All tasks as a flat list in line order."""
        return sorted(self.tasks.values(), key=lambda t: t.line)

    def walk(self, tasks: list[Task] | None = None) -> Iterator[Task]:
        """Depth-first traversal in current sibling order."""
        for task in self.root_tasks() if tasks is None else tasks:
            yield task
            yield from self.walk(self.children_of(task))

    def descendants(self, task: Task) -> list[Task]:
        """All descendants of a task, depth-first."""
        return list(self.walk(self.children_of(task)))

    def max_line(self, task: Task) -> int:
        """Highest line number spanned by a task and all of its descendants."""
        max_line = task.line
        for child in self.children_of(task):
            max_line = max(max_line, self.max_line(child))
        return max_line

    def __len__(self) -> int:
        return len(self.tasks)
