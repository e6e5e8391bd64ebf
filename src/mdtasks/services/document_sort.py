"""Sort the task lines of a markdown document in place.

Main API:
    sort_tasks_in_text(text, file_path, config, cursor_line, full_document) → SortOutcome

Only task lines move. Each continuous block of tasks is reordered within the
line slots it already occupies, children travelling with their parents.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from ..models.mdtasks_config import MdtasksConfig
from ..parsing.hierarchy import build_task_hierarchy, find_continuous_blocks
from ..parsing.line_parser import ParseOptions, parse_tasks_from_content, split_lines
from ..parsing.patterns import HEADING_PATTERN
from .sort_service import sort_tasks_recursively

logger = logging.getLogger(__name__)

FENCE_PREFIXES = ("```", "~~~")


class TaskSortError(ValueError):
    """Raised when a document sort cannot be performed."""


class SortRangeError(TaskSortError):
    """Raised when the requested sort range lies outside the document."""


class MissingFileContextError(TaskSortError):
    """Raised when a sort is requested without an originating file."""


class SortStatus(str, Enum):
    """Informational result of a document sort."""

    SORTED = "sorted"
    NO_TASKS = "no_tasks"
    ALREADY_SORTED = "already_sorted"
    DISABLED = "disabled"


@dataclass
class SortOutcome:
    """Result of sorting a document or a section of it."""

    status: SortStatus
    message: str
    start_line: int = 0
    end_line: int = 0
    text: str | None = None  # Rewritten scope, when sorted
    document: str | None = None  # Full rewritten document, when sorted

    @property
    def changed(self) -> bool:
        return self.status is SortStatus.SORTED


@dataclass
class SortRange:
    """Inclusive zero-based line range of a sort scope."""

    start_line: int
    end_line: int
    description: str


def find_sort_range(lines: list[str], cursor_line: int) -> SortRange:
    """
    Heading section containing the cursor.

    The section runs from its heading to the line before the next heading of
    the same or a higher level. Headings inside fenced code are ignored.
    The whole document is used when no heading precedes the cursor.
    """
    headings: list[tuple[int, int, str]] = []
    in_fence = False
    for index, line in enumerate(lines):
        if line.lstrip().startswith(FENCE_PREFIXES):
            in_fence = not in_fence
            continue
        if in_fence:
            continue
        match = HEADING_PATTERN.match(line)
        if match:
            headings.append((index, len(match.group(1)), match.group(2).strip()))

    last_line = len(lines) - 1
    for position in range(len(headings) - 1, -1, -1):
        heading_line, level, title = headings[position]
        if heading_line > cursor_line:
            continue
        end_line = last_line
        for next_line, next_level, _ in headings[position + 1 :]:
            if next_level <= level:
                end_line = next_line - 1
                break
        return SortRange(heading_line, max(end_line, heading_line), f'heading section "{title}"')

    return SortRange(0, last_line, "full document (cursor not in heading)")


def _line_span(sort_range: SortRange) -> str:
    return f"lines {sort_range.start_line + 1}-{sort_range.end_line + 1}"


def sort_tasks_in_text(
    text: str,
    file_path: str,
    config: MdtasksConfig,
    cursor_line: int | None = None,
    full_document: bool = False,
    today: int | None = None,
) -> SortOutcome:
    """
    Sort tasks in a document or in the heading section around the cursor.

    Args:
        text: Full document text
        file_path: Path of the document, used for task IDs
        config: Root configuration (metadata format, statuses, sort criteria)
        cursor_line: Zero-based cursor line selecting a heading section
        full_document: Sort the whole document regardless of the cursor
        today: Local midnight epoch ms used for overdue detection

    Returns:
        SortOutcome describing what happened

    Raises:
        MissingFileContextError: If file_path is empty
        SortRangeError: If the cursor lies outside the document
    """
    if not file_path:
        raise MissingFileContextError("No file given for task sort")

    if not config.sort.enabled:
        return SortOutcome(status=SortStatus.DISABLED, message="Task sorting is disabled")

    lines = split_lines(text)
    if cursor_line is not None and not 0 <= cursor_line < len(lines):
        raise SortRangeError(f"Cursor line {cursor_line} is outside the document ({len(lines)} lines)")

    if full_document or cursor_line is None:
        sort_range = SortRange(0, len(lines) - 1, "full document")
    else:
        sort_range = find_sort_range(lines, cursor_line)

    if sort_range.start_line < 0 or sort_range.end_line >= len(lines) or sort_range.end_line < sort_range.start_line:
        raise SortRangeError(f"Invalid range calculated for {sort_range.description}")

    scope_lines = lines[sort_range.start_line : sort_range.end_line + 1]
    tasks = parse_tasks_from_content(
        file_path,
        "\n".join(scope_lines),
        ParseOptions.from_config(config),
        line_offset=sort_range.start_line,
    )
    if not tasks:
        return SortOutcome(
            status=SortStatus.NO_TASKS,
            message=f"No tasks found in the {sort_range.description} ({_line_span(sort_range)})",
            start_line=sort_range.start_line,
            end_line=sort_range.end_line,
        )

    forest = build_task_hierarchy(tasks)
    blocks = find_continuous_blocks(forest.root_tasks(), forest)

    new_lines = list(lines)
    for block in blocks:
        slots = sorted(task.line for task in forest.walk(block))
        sorted_roots = sort_tasks_recursively(block, forest, config.sort.criteria, config.statuses, today)
        for slot, task in zip(slots, forest.walk(sorted_roots), strict=True):
            new_lines[slot] = task.original_markdown

    if new_lines == lines:
        return SortOutcome(
            status=SortStatus.ALREADY_SORTED,
            message=f"Tasks are already sorted in the {sort_range.description} ({_line_span(sort_range)})",
            start_line=sort_range.start_line,
            end_line=sort_range.end_line,
        )

    newline = "\r\n" if "\r\n" in text else "\n"
    scope_text = newline.join(new_lines[sort_range.start_line : sort_range.end_line + 1])
    logger.info("Sorted %d tasks in %d blocks of %s", len(tasks), len(blocks), file_path)
    return SortOutcome(
        status=SortStatus.SORTED,
        message=f"Sorted tasks in the {sort_range.description} ({_line_span(sort_range)})",
        start_line=sort_range.start_line,
        end_line=sort_range.end_line,
        text=scope_text,
        document=newline.join(new_lines),
    )
