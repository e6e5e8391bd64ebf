"""Multi-criterion task sorting driven by configurable status semantics."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from functools import cmp_to_key
from typing import Any

from ..models.mdtasks_config import SortCriterion, SortOrder, StatusConfig
from ..models.task import STATUS_OVERDUE, Task, TaskForest
from ..utils.collation import compare_text
from ..utils.dates import start_of_day_ms, today_ms
from .status_order import build_status_order, status_rank

logger = logging.getLogger(__name__)


def calculate_status(task: Task, statuses: StatusConfig, today: int) -> str:
    """Status used for sorting: "overdue" for late open tasks, else the raw marker."""
    if (
        not task.completed
        and not statuses.is_cancelled(task.status)
        and task.due_date is not None
        and task.due_date < today
    ):
        return STATUS_OVERDUE
    return task.status


def _present_first(value_a: Any, value_b: Any, order: SortOrder, compare: Callable[[Any, Any], int]) -> int:
    """
    Compare optional values; missing values sort last in either direction.
    """
    if value_a is None and value_b is None:
        return 0
    if value_a is None:
        return 1
    if value_b is None:
        return -1
    result = compare(value_a, value_b)
    return result if order == "asc" else -result


def _compare_status(a: Task, b: Task, order: SortOrder, status_order: dict[str, int]) -> int:
    rank_a = status_rank(status_order, a.calculated_status or a.status)
    rank_b = status_rank(status_order, b.calculated_status or b.status)
    result = rank_a - rank_b
    return result if order == "asc" else -result


def _compare_priority(a: Task, b: Task, order: SortOrder, status_order: dict[str, int]) -> int:
    # Ascending means most urgent (highest value) first
    return _present_first(a.priority, b.priority, order, lambda x, y: y - x)


def _date_comparator(field_name: str) -> Callable[[Task, Task, SortOrder, dict[str, int]], int]:
    def compare(a: Task, b: Task, order: SortOrder, status_order: dict[str, int]) -> int:
        return _present_first(getattr(a, field_name), getattr(b, field_name), order, lambda x, y: x - y)

    return compare


def _compare_content(a: Task, b: Task, order: SortOrder, status_order: dict[str, int]) -> int:
    return _present_first(a.content or None, b.content or None, order, compare_text)


COMPARATORS: dict[str, Callable[[Task, Task, SortOrder, dict[str, int]], int]] = {
    "status": _compare_status,
    "priority": _compare_priority,
    "due_date": _date_comparator("due_date"),
    "scheduled_date": _date_comparator("scheduled_date"),
    "start_date": _date_comparator("start_date"),
    "content": _compare_content,
}


def compare_tasks(
    a: Task,
    b: Task,
    criteria: Sequence[SortCriterion],
    status_order: dict[str, int],
    statuses: StatusConfig | None = None,
    today: int | None = None,
) -> int:
    """
    Three-way comparison of two tasks.

    Completed tasks always sort after incomplete ones. Criteria are applied
    in order and the first non-zero result wins; line order breaks ties.

    The status criterion reads ``calculated_status``, which the sort
    functions assign before comparing. Pass ``statuses`` (and optionally
    ``today``) to recompute it for ``a`` and ``b`` first.
    """
    if statuses is not None:
        _prepare((a, b), statuses, today)

    if a.completed != b.completed:
        return 1 if a.completed else -1

    for criterion in criteria:
        result = COMPARATORS[criterion.field](a, b, criterion.order, status_order)
        if result != 0:
            return result

    return a.line - b.line


def _prepare(tasks: Iterable[Task], statuses: StatusConfig, today: int | None) -> None:
    """Assign calculated statuses for one sort invocation."""
    today = today_ms() if today is None else today
    for task in tasks:
        task.calculated_status = calculate_status(task, statuses, today)


def relevant_date(task: Task) -> int | None:
    """Scheduled date, falling back to due date, truncated to midnight."""
    value = task.scheduled_date if task.scheduled_date is not None else task.due_date
    if value is None:
        return None
    return start_of_day_ms(value)


def sort_tasks_by_priority_and_date(tasks: Iterable[Task]) -> list[Task]:
    """
    Fallback order used when no sort criteria are configured.

    Highest priority first (no priority counts as 0), then earliest
    relevant date, undated tasks last.
    """

    def sort_key(task: Task) -> tuple[int, bool, int, int]:
        date_value = relevant_date(task)
        return (-(task.priority or 0), date_value is None, date_value or 0, task.line)

    return sorted(tasks, key=sort_key)


def sort_tasks(
    tasks: Iterable[Task],
    criteria: Sequence[SortCriterion],
    statuses: StatusConfig,
    today: int | None = None,
) -> list[Task]:
    """
    Sort a flat list of tasks.

    Args:
        tasks: Tasks to order (not modified in order; a new list is returned)
        criteria: Sort criteria; empty means the fallback order
        statuses: Status configuration for the rank table
        today: Local midnight epoch ms used for overdue detection

    Returns:
        New sorted list
    """
    tasks = list(tasks)
    if not criteria:
        return sort_tasks_by_priority_and_date(tasks)

    status_order = build_status_order(statuses)
    _prepare(tasks, statuses, today)
    return sorted(tasks, key=cmp_to_key(lambda a, b: compare_tasks(a, b, criteria, status_order)))


def sort_tasks_recursively(
    tasks: Sequence[Task],
    forest: TaskForest,
    criteria: Sequence[SortCriterion],
    statuses: StatusConfig,
    today: int | None = None,
) -> list[Task]:
    """
    Sort a sibling list and, below it, every child list.

    Child order is written back to each task's ``children``; the sorted
    sibling list is returned.
    """
    subtree = list(forest.walk(list(tasks)))
    if criteria:
        status_order = build_status_order(statuses)
        _prepare(subtree, statuses, today)
        key = cmp_to_key(lambda a, b: compare_tasks(a, b, criteria, status_order))

        def sort_level(level: list[Task]) -> list[Task]:
            return sorted(level, key=key)
    else:
        sort_level = sort_tasks_by_priority_and_date

    def sort_branch(level: Sequence[Task]) -> list[Task]:
        ordered = sort_level(list(level))
        for task in ordered:
            if task.children:
                task.children = [child.id for child in sort_branch(forest.children_of(task))]
        return ordered

    return sort_branch(tasks)


def sort_forest(
    forest: TaskForest,
    criteria: Sequence[SortCriterion],
    statuses: StatusConfig,
    today: int | None = None,
) -> TaskForest:
    """Sort the roots of a forest and every child list, keeping the tree shape."""
    roots = sort_tasks_recursively(forest.root_tasks(), forest, criteria, statuses, today)
    forest.roots = [task.id for task in roots]
    logger.debug("Sorted forest with %d tasks (%d roots)", len(forest), len(forest.roots))
    return forest
