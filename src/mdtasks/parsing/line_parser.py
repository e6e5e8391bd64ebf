"""Parse task lines from markdown text.

Main API:
    parse_task_line(file_path, line, line_number, options)  → Task | None
    parse_tasks_from_content(file_path, content, options)    → list[Task]

Every line matching the task-line grammar yields a task, whatever the
quality of its metadata.
"""

import logging
import re
from collections.abc import Iterable
from pathlib import PurePosixPath

import frontmatter
from pydantic import BaseModel, Field

from ..models.mdtasks_config import MdtasksConfig
from ..models.task import MetadataFormat, Task, make_task_id
from .extractors import extract_metadata
from .patterns import TASK_PATTERN

logger = logging.getLogger(__name__)

LINE_BREAK = re.compile(r"\r?\n")

# File-level tag that turns every task in the file into a project task
PROJECT_FILE_TAG = "project"


class ParseOptions(BaseModel):
    """Options controlling how task lines are parsed."""

    metadata_format: MetadataFormat = "tasks"
    completed_markers: list[str] = Field(default_factory=lambda: ["x", "X"])

    @classmethod
    def from_config(cls, config: MdtasksConfig) -> "ParseOptions":
        """Build parse options from the root configuration."""
        return cls(
            metadata_format=config.metadata_format,
            completed_markers=config.statuses.completed_markers,
        )


def get_indentation(line: str) -> int:
    """Number of leading whitespace characters."""
    return len(line) - len(line.lstrip())


def split_lines(content: str) -> list[str]:
    """Split text on LF or CRLF line breaks."""
    return LINE_BREAK.split(content)


def parse_task_line(
    file_path: str,
    line: str,
    line_number: int,
    options: ParseOptions | None = None,
) -> Task | None:
    """
    Parse one line into a Task.

    Args:
        file_path: Source path, used for the task ID
        line: Raw line text
        line_number: Zero-based line number in the document
        options: Metadata format and completed markers

    Returns:
        The task, or None if the line is not a task line
    """
    match = TASK_PATTERN.match(line)
    if not match:
        return None

    options = options or ParseOptions()
    status = match.group(4)
    body = match.group(5)

    task = Task(
        id=make_task_id(file_path, line_number),
        file_path=file_path,
        line=line_number,
        indentation=get_indentation(line),
        content=body.strip(),
        original_markdown=line,
        status=status,
        completed=status in options.completed_markers,
    )
    task.content = extract_metadata(task, body, options.metadata_format)
    return task


def front_matter_tags(content: str) -> list[str]:
    """
    Tags declared in the YAML front matter of a document.

    Raises:
        yaml.YAMLError: If the front matter is not valid YAML
    """
    post = frontmatter.loads(content)
    tags = post.metadata.get("tags")
    if tags is None:
        return []
    if isinstance(tags, str):
        return [t for t in re.split(r"[,\s]+", tags) if t]
    if isinstance(tags, dict):
        return [str(t) for t in tags]
    if isinstance(tags, (list, tuple, set)):
        return [str(t) for t in tags if t is not None]
    # Scalar values such as "tags: 2024"
    return [str(tags)]


def apply_file_properties(tasks: list[Task], file_path: str, file_tags: Iterable[str]) -> None:
    """Give tasks without a project the file name as project in project files."""
    normalized = {tag.lstrip("#").lower() for tag in file_tags}
    if PROJECT_FILE_TAG not in normalized:
        return
    project = PurePosixPath(file_path).stem
    for task in tasks:
        if task.project is None:
            task.project = project


def parse_tasks_from_content(
    file_path: str,
    content: str,
    options: ParseOptions | None = None,
    line_offset: int = 0,
    file_tags: Iterable[str] = (),
) -> list[Task]:
    """
    Parse every task line of a text block.

    Args:
        file_path: Source path, used for task IDs
        content: Multi-line text
        options: Metadata format and completed markers
        line_offset: Absolute line number of the first line of content
        file_tags: File-level tags (front matter or host metadata)

    Returns:
        Flat list of tasks in line order, without hierarchy links
    """
    options = options or ParseOptions()
    tasks: list[Task] = []
    for index, line in enumerate(split_lines(content)):
        task = parse_task_line(file_path, line, line_offset + index, options)
        if task is not None:
            tasks.append(task)

    apply_file_properties(tasks, file_path, file_tags)
    logger.debug("Parsed %d tasks from %s", len(tasks), file_path or "<text>")
    return tasks
