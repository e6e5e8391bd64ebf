"""Derive the status rank table from the configured status semantics."""

import logging

from ..models.mdtasks_config import StatusConfig
from ..models.task import MARK_COMPLETE, MARK_INCOMPLETE, STATUS_OVERDUE

logger = logging.getLogger(__name__)

RANK_OVERDUE = 1
RANK_INCOMPLETE_DEFAULT = 10
RANK_COMPLETED = 98
RANK_CANCELLED = 99
UNKNOWN_STATUS_RANK = 1000


def build_status_order(statuses: StatusConfig) -> dict[str, int]:
    """
    Build a marker -> rank mapping; lower ranks sort first.

    - "overdue" (a computed status) always ranks first
    - Cycle statuses follow in cycle order, skipping excluded names
    - Completed markers rank 98, cancelled markers 99
    - Markers only listed in task_statuses are appended after the cycle
    - " " and "x" get defaults if nothing assigned them

    Markers missing from the table rank UNKNOWN_STATUS_RANK when compared.
    """
    order: dict[str, int] = {STATUS_OVERDUE: RANK_OVERDUE}
    next_rank = RANK_OVERDUE + 1

    completed_in_cycle: list[str] = []
    cancelled_in_cycle: list[str] = []

    for entry in statuses.cycle:
        if entry.name in statuses.exclude_from_cycle:
            continue
        if statuses.is_completed(entry.mark):
            completed_in_cycle.append(entry.mark)
        elif statuses.is_cancelled(entry.mark):
            cancelled_in_cycle.append(entry.mark)
        elif entry.mark not in order:
            order[entry.mark] = next_rank
            next_rank += 1

    for mark in completed_in_cycle:
        order.setdefault(mark, RANK_COMPLETED)
    for mark in cancelled_in_cycle:
        order.setdefault(mark, RANK_CANCELLED)

    # Statuses defined in groups but absent from the cycle
    for markers in statuses.task_statuses.values():
        for mark in markers:
            if not mark or mark in order:
                continue
            if statuses.is_completed(mark):
                order[mark] = RANK_COMPLETED
            elif statuses.is_cancelled(mark):
                order[mark] = RANK_CANCELLED
            else:
                order[mark] = next_rank
                next_rank += 1

    order.setdefault(MARK_INCOMPLETE, RANK_INCOMPLETE_DEFAULT)
    order.setdefault(MARK_COMPLETE, RANK_COMPLETED)

    logger.debug("Status order: %s", order)
    return order


def status_rank(order: dict[str, int], status: str) -> int:
    """Rank of a status, UNKNOWN_STATUS_RANK if it is not in the table."""
    return order.get(status, UNKNOWN_STATUS_RANK)
