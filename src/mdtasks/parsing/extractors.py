"""Field extractors for inline task metadata.

Each extractor takes the task being built, the text not yet claimed by an
earlier extractor and the preferred metadata format. It fills the task fields
it finds and returns the text with the matched span removed.

The preferred format's pattern is tried first, then the other format's.
A capture that cannot be converted (bad date, unknown priority) counts as
no match and its text stays in the content.
"""

import re

from ..models.task import MetadataFormat, Task
from ..utils.dates import parse_local_date
from .patterns import (
    ANY_DATAVIEW_FIELD,
    CONTEXT_TOKEN,
    DV_COMPLETED_DATE,
    DV_CONTEXT,
    DV_CREATED_DATE,
    DV_DUE_DATE,
    DV_PRIORITY,
    DV_PROJECT,
    DV_RECURRENCE,
    DV_SCHEDULED_DATE,
    DV_START_DATE,
    EMOJI_COMPLETED_DATE,
    EMOJI_CONTEXT,
    EMOJI_CREATED_DATE,
    EMOJI_DUE_DATE,
    EMOJI_PRIORITY,
    EMOJI_PROJECT_TAG,
    EMOJI_RECURRENCE,
    EMOJI_SCHEDULED_DATE,
    EMOJI_START_DATE,
    MARKDOWN_LINK,
    PRIORITY_MAP,
    PROJECT_TAG_PREFIX,
    TAG,
    WHITESPACE_RUN,
    WIKI_LINK,
)

Span = tuple[int, int]

# Task attribute, dataview pattern, emoji pattern
_DATE_FIELDS: tuple[tuple[str, re.Pattern[str], re.Pattern[str]], ...] = (
    ("due_date", DV_DUE_DATE, EMOJI_DUE_DATE),
    ("scheduled_date", DV_SCHEDULED_DATE, EMOJI_SCHEDULED_DATE),
    ("start_date", DV_START_DATE, EMOJI_START_DATE),
    ("completed_date", DV_COMPLETED_DATE, EMOJI_COMPLETED_DATE),
    ("created_date", DV_CREATED_DATE, EMOJI_CREATED_DATE),
)


def _in_order(
    metadata_format: MetadataFormat,
    dataview: re.Pattern[str],
    emoji: re.Pattern[str],
) -> tuple[re.Pattern[str], re.Pattern[str]]:
    """Patterns in preference order for the active format."""
    if metadata_format == "dataview":
        return dataview, emoji
    return emoji, dataview


def _remove_span(text: str, match: re.Match[str]) -> str:
    return text[: match.start()] + text[match.end() :]


def find_link_spans(text: str) -> list[Span]:
    """Character spans of wiki links and markdown links, sorted by start."""
    spans = [m.span() for m in WIKI_LINK.finditer(text)]
    for m in MARKDOWN_LINK.finditer(text):
        start, end = m.span()
        if not any(start < s_end and s_start < end for s_start, s_end in spans):
            spans.append((start, end))
    return sorted(spans)


def mask_links(text: str) -> tuple[str, list[Span]]:
    """
    Blank out links with equal-length runs of spaces.

    Positions in the masked text line up with the original, so spans found
    in one can be applied to the other.
    """
    spans = find_link_spans(text)
    masked = text
    for start, end in spans:
        masked = masked[:start] + " " * (end - start) + masked[end:]
    return masked, spans


def _remove_spans(text: str, spans: list[Span]) -> str:
    """Remove possibly overlapping spans from text."""
    merged: list[list[int]] = []
    for start, end in sorted(spans):
        if merged and start <= merged[-1][1]:
            merged[-1][1] = max(merged[-1][1], end)
        else:
            merged.append([start, end])
    for start, end in reversed(merged):
        text = text[:start] + text[end:]
    return text


def extract_dates(task: Task, text: str, metadata_format: MetadataFormat) -> str:
    """Extract due, scheduled, start, completed and created dates."""
    remaining = text
    for field_name, dataview, emoji in _DATE_FIELDS:
        if getattr(task, field_name) is not None:
            continue
        for pattern in _in_order(metadata_format, dataview, emoji):
            match = pattern.search(remaining)
            if not match:
                continue
            value = parse_local_date(match.group(1))
            if value is None:
                continue
            setattr(task, field_name, value)
            remaining = _remove_span(remaining, match)
            break
    return remaining


def extract_recurrence(task: Task, text: str, metadata_format: MetadataFormat) -> str:
    """Extract a free-text recurrence rule."""
    for pattern in _in_order(metadata_format, DV_RECURRENCE, EMOJI_RECURRENCE):
        match = pattern.search(text)
        if match and match.group(1).strip():
            task.recurrence = match.group(1).strip()
            return _remove_span(text, match)
    return text


def _dataview_priority(raw: str) -> int | None:
    """Map a priority name or a literal integer to a priority value."""
    value = raw.strip().lower()
    if value in PRIORITY_MAP:
        return PRIORITY_MAP[value]
    try:
        return int(value)
    except ValueError:
        return None


def extract_priority(task: Task, text: str, metadata_format: MetadataFormat) -> str:
    """Extract a numeric priority from a symbol, a name or an integer."""
    for pattern in _in_order(metadata_format, DV_PRIORITY, EMOJI_PRIORITY):
        match = pattern.search(text)
        if not match:
            continue
        if pattern is DV_PRIORITY:
            value = _dataview_priority(match.group(1))
        else:
            value = PRIORITY_MAP.get(match.group(1))
        if value is not None:
            task.priority = value
            return _remove_span(text, match)
    return text


def extract_project(task: Task, text: str, metadata_format: MetadataFormat) -> str:
    """
    Extract the project.

    A "#project/<name>" tag is left in place; extract_tags removes it from
    the content and keeps it out of the tag list.
    """
    masked, _ = mask_links(text)
    for pattern in _in_order(metadata_format, DV_PROJECT, EMOJI_PROJECT_TAG):
        if pattern is DV_PROJECT:
            match = pattern.search(text)
            if match and match.group(1).strip():
                task.project = match.group(1).strip()
                return _remove_span(text, match)
        else:
            match = pattern.search(masked)
            if match:
                task.project = match.group(1).strip()
                return text
    return text


def extract_context(task: Task, text: str, metadata_format: MetadataFormat) -> str:
    """Extract the context from a dataview field or the first @token outside links."""
    masked, _ = mask_links(text)
    for pattern in _in_order(metadata_format, DV_CONTEXT, EMOJI_CONTEXT):
        match = pattern.search(text if pattern is DV_CONTEXT else masked)
        if match and match.group(1).strip():
            task.context = match.group(1).strip()
            return _remove_span(text, match)
    return text


def extract_tags(task: Task, text: str, metadata_format: MetadataFormat) -> str:
    """
    Extract #tags and return the final display content.

    Tags inside wiki links or markdown links are ignored. Found tags and any
    leftover @context tokens are removed from the content outside links,
    then whitespace is collapsed.
    """
    remaining = text
    if metadata_format == "dataview":
        remaining = ANY_DATAVIEW_FIELD.sub("", remaining)

    masked, _ = mask_links(remaining)

    found: list[str] = []
    for match in TAG.finditer(masked):
        if match.group() not in found:
            found.append(match.group())

    if task.project is None:
        for tag in found:
            if tag.startswith(PROJECT_TAG_PREFIX):
                task.project = tag[len(PROJECT_TAG_PREFIX) :]
                break

    if metadata_format == "dataview":
        tags = [t for t in found if not t.startswith(PROJECT_TAG_PREFIX)]
    else:
        tags = [t for t in found if t != f"{PROJECT_TAG_PREFIX}{task.project}"]
    for tag in tags:
        task.add_tag(tag)

    spans: list[Span] = []
    for tag in found:
        pattern = re.compile(r"\s?(?<!\S)" + re.escape(tag) + r"(?=\s|$)")
        spans.extend(m.span() for m in pattern.finditer(masked))
    spans.extend(m.span() for m in CONTEXT_TOKEN.finditer(masked))

    content = _remove_spans(remaining, spans)
    return WHITESPACE_RUN.sub(" ", content).strip()


# Fixed order: project must run before tags, context before tags
EXTRACTORS = (
    extract_dates,
    extract_recurrence,
    extract_priority,
    extract_project,
    extract_context,
    extract_tags,
)


def extract_metadata(task: Task, text: str, metadata_format: MetadataFormat) -> str:
    """Run every extractor in order and return the display content."""
    remaining = text
    for extractor in EXTRACTORS:
        remaining = extractor(task, remaining, metadata_format)
    return remaining
