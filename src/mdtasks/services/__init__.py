"""Services package."""

from .config_service import ConfigService
from .document_sort import (
    MissingFileContextError,
    SortOutcome,
    SortRange,
    SortRangeError,
    SortStatus,
    TaskSortError,
    find_sort_range,
    sort_tasks_in_text,
)
from .forecast_service import ForecastBuckets, categorize_tasks, group_tasks_by_date
from .sort_service import (
    calculate_status,
    compare_tasks,
    relevant_date,
    sort_forest,
    sort_tasks,
    sort_tasks_by_priority_and_date,
    sort_tasks_recursively,
)
from .status_order import UNKNOWN_STATUS_RANK, build_status_order, status_rank

__all__ = [
    "UNKNOWN_STATUS_RANK",
    "ConfigService",
    "ForecastBuckets",
    "MissingFileContextError",
    "SortOutcome",
    "SortRange",
    "SortRangeError",
    "SortStatus",
    "TaskSortError",
    "build_status_order",
    "calculate_status",
    "categorize_tasks",
    "compare_tasks",
    "find_sort_range",
    "group_tasks_by_date",
    "relevant_date",
    "sort_forest",
    "sort_tasks",
    "sort_tasks_by_priority_and_date",
    "sort_tasks_in_text",
    "sort_tasks_recursively",
    "status_rank",
]
