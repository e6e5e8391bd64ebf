"""Group tasks by their relevant date for forecast views."""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from ..models.mdtasks_config import SortCriterion, StatusConfig
from ..models.task import Task
from ..utils.dates import to_iso, today_ms
from .sort_service import relevant_date, sort_tasks, sort_tasks_by_priority_and_date

logger = logging.getLogger(__name__)


@dataclass
class ForecastBuckets:
    """Tasks split around today by relevant date."""

    past: list[Task] = field(default_factory=list)
    today: list[Task] = field(default_factory=list)
    future: list[Task] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.past) + len(self.today) + len(self.future)


def categorize_tasks(
    tasks: Iterable[Task],
    statuses: StatusConfig,
    criteria: Sequence[SortCriterion] | None = None,
    today: int | None = None,
) -> ForecastBuckets:
    """
    Split tasks into past, today and future buckets.

    Undated tasks are left out. Each bucket is sorted with the given
    criteria, or by priority and date when none are given.
    """
    today = today_ms() if today is None else today
    buckets = ForecastBuckets()

    for task in tasks:
        date_value = relevant_date(task)
        if date_value is None:
            continue
        if date_value < today:
            buckets.past.append(task)
        elif date_value == today:
            buckets.today.append(task)
        else:
            buckets.future.append(task)

    if criteria:
        buckets.past = sort_tasks(buckets.past, criteria, statuses, today)
        buckets.today = sort_tasks(buckets.today, criteria, statuses, today)
        buckets.future = sort_tasks(buckets.future, criteria, statuses, today)
    else:
        buckets.past = sort_tasks_by_priority_and_date(buckets.past)
        buckets.today = sort_tasks_by_priority_and_date(buckets.today)
        buckets.future = sort_tasks_by_priority_and_date(buckets.future)

    logger.debug(
        "Forecast: %d past, %d today, %d future",
        len(buckets.past),
        len(buckets.today),
        len(buckets.future),
    )
    return buckets


def group_tasks_by_date(tasks: Iterable[Task]) -> dict[str, list[Task]]:
    """Dated tasks keyed by ISO date, keys ascending."""
    groups: dict[int, list[Task]] = {}
    for task in tasks:
        date_value = relevant_date(task)
        if date_value is not None:
            groups.setdefault(date_value, []).append(task)
    return {to_iso(key): groups[key] for key in sorted(groups)}
