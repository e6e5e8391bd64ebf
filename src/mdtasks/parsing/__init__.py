"""Task line parsing package."""

from .extractors import (
    EXTRACTORS,
    extract_context,
    extract_dates,
    extract_metadata,
    extract_priority,
    extract_project,
    extract_recurrence,
    extract_tags,
    find_link_spans,
    mask_links,
)
from .hierarchy import build_task_hierarchy, find_continuous_blocks
from .line_parser import (
    ParseOptions,
    apply_file_properties,
    front_matter_tags,
    get_indentation,
    parse_task_line,
    parse_tasks_from_content,
    split_lines,
)

__all__ = [
    "EXTRACTORS",
    "ParseOptions",
    "apply_file_properties",
    "build_task_hierarchy",
    "extract_context",
    "extract_dates",
    "extract_metadata",
    "extract_priority",
    "extract_project",
    "extract_recurrence",
    "extract_tags",
    "find_continuous_blocks",
    "find_link_spans",
    "front_matter_tags",
    "get_indentation",
    "mask_links",
    "parse_task_line",
    "parse_tasks_from_content",
    "split_lines",
]
