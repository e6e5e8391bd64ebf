"""Tests for the task sort engine."""

from datetime import date
from itertools import permutations

import pytest

from mdtasks.models import SortCriterion, StatusConfig, Task
from mdtasks.parsing import build_task_hierarchy, parse_tasks_from_content
from mdtasks.services import (
    build_status_order,
    calculate_status,
    compare_tasks,
    sort_forest,
    sort_tasks,
    sort_tasks_by_priority_and_date,
)
from mdtasks.utils import to_epoch_ms

TODAY = to_epoch_ms(date(2025, 3, 10))
STATUSES = StatusConfig.default()
DEFAULT_CRITERIA = [
    SortCriterion(field="status"),
    SortCriterion(field="priority"),
    SortCriterion(field="due_date"),
]


def ms(day: int) -> int:
    return to_epoch_ms(date(2025, 3, day))


def make_task(line: int, content: str = "", status: str = " ", **fields) -> Task:
    return Task(
        id=f"a.md-L{line}",
        file_path="a.md",
        line=line,
        content=content or f"task {line}",
        status=status,
        completed=status in STATUSES.completed_markers,
        **fields,
    )


def lines(tasks: list[Task]) -> list[int]:
    return [t.line for t in tasks]


class TestCalculateStatus:
    def test_overdue(self):
        task = make_task(0, due_date=ms(1))
        assert calculate_status(task, STATUSES, TODAY) == "overdue"

    def test_due_today_not_overdue(self):
        task = make_task(0, due_date=TODAY)
        assert calculate_status(task, STATUSES, TODAY) == " "

    def test_completed_never_overdue(self):
        task = make_task(0, status="x", due_date=ms(1))
        assert calculate_status(task, STATUSES, TODAY) == "x"

    def test_cancelled_never_overdue(self):
        task = make_task(0, status="-", due_date=ms(1))
        assert calculate_status(task, STATUSES, TODAY) == "-"


class TestCompareTasks:
    """Tests for the three-way comparator."""

    @pytest.fixture
    def order(self) -> dict[str, int]:
        return build_status_order(STATUSES)

    def test_completed_last_regardless_of_criteria(self, order):
        done = make_task(0, status="x", priority=5)
        open_task = make_task(1, priority=1)

        assert compare_tasks(done, open_task, DEFAULT_CRITERIA, order) > 0
        assert compare_tasks(open_task, done, [SortCriterion(field="priority", order="desc")], order) < 0

    def test_status_rank(self, order):
        in_progress = make_task(0, status="/")
        todo = make_task(1, status=" ")

        assert compare_tasks(todo, in_progress, [SortCriterion(field="status")], order) < 0
        assert compare_tasks(todo, in_progress, [SortCriterion(field="status", order="desc")], order) > 0

    def test_priority_ascending_is_highest_first(self, order):
        high = make_task(0, priority=4)
        low = make_task(1, priority=2)
        criteria = [SortCriterion(field="priority")]

        assert compare_tasks(high, low, criteria, order) < 0

    def test_priority_descending_is_lowest_first(self, order):
        high = make_task(0, priority=4)
        low = make_task(1, priority=2)
        criteria = [SortCriterion(field="priority", order="desc")]

        assert compare_tasks(low, high, criteria, order) < 0

    @pytest.mark.parametrize("direction", ["asc", "desc"])
    def test_missing_priority_last(self, order, direction):
        none = make_task(0)
        low = make_task(1, priority=1)
        criteria = [SortCriterion(field="priority", order=direction)]

        assert compare_tasks(none, low, criteria, order) > 0
        assert compare_tasks(low, none, criteria, order) < 0

    @pytest.mark.parametrize("field_name", ["due_date", "scheduled_date", "start_date"])
    def test_dates_earliest_first(self, order, field_name):
        early = make_task(5, **{field_name: ms(1)})
        late = make_task(0, **{field_name: ms(2)})
        criteria = [SortCriterion(field=field_name)]

        assert compare_tasks(early, late, criteria, order) < 0

    @pytest.mark.parametrize("direction", ["asc", "desc"])
    def test_missing_date_last(self, order, direction):
        undated = make_task(0)
        dated = make_task(1, due_date=ms(20))
        criteria = [SortCriterion(field="due_date", order=direction)]

        assert compare_tasks(undated, dated, criteria, order) > 0

    def test_content_natural_order(self, order):
        two = make_task(1, content="Task 2")
        ten = make_task(0, content="task 10")

        assert compare_tasks(two, ten, [SortCriterion(field="content")], order) < 0

    def test_line_breaks_ties(self, order):
        first = make_task(3)
        second = make_task(7)

        assert compare_tasks(first, second, DEFAULT_CRITERIA, order) < 0
        assert compare_tasks(second, first, DEFAULT_CRITERIA, order) > 0

    def test_statuses_recompute_overdue(self, order):
        """An overdue status left by an earlier sort is recomputed for a new day."""
        todo = make_task(0)
        late = make_task(1, due_date=ms(5))
        sort_tasks([todo, late], DEFAULT_CRITERIA, STATUSES, TODAY)
        criteria = [SortCriterion(field="status")]

        assert late.calculated_status == "overdue"
        assert compare_tasks(todo, late, criteria, order) > 0
        assert compare_tasks(todo, late, criteria, order, statuses=STATUSES, today=ms(1)) < 0
        assert late.calculated_status == " "


class TestSortTasks:
    """Tests for flat sorting."""

    def test_default_criteria(self):
        tasks = [
            make_task(0, status="x"),
            make_task(1, priority=2),
            make_task(2, status="/", priority=5),
            make_task(3, priority=4),
            make_task(4, due_date=ms(1)),  # overdue
            make_task(5, status="-"),
        ]
        result = sort_tasks(tasks, DEFAULT_CRITERIA, STATUSES, TODAY)

        assert lines(result) == [4, 3, 1, 2, 5, 0]

    def test_returns_new_list(self):
        tasks = [make_task(0, priority=1), make_task(1, priority=5)]
        result = sort_tasks(tasks, DEFAULT_CRITERIA, STATUSES, TODAY)

        assert lines(result) == [1, 0]
        assert lines(tasks) == [0, 1]

    def test_idempotent(self):
        tasks = [
            make_task(0, priority=1, due_date=ms(15)),
            make_task(1, due_date=ms(12)),
            make_task(2, priority=3),
            make_task(3, status="x"),
        ]
        once = sort_tasks(tasks, DEFAULT_CRITERIA, STATUSES, TODAY)
        twice = sort_tasks(once, DEFAULT_CRITERIA, STATUSES, TODAY)

        assert lines(once) == lines(twice)

    def test_calculated_status_not_serialized(self):
        task = make_task(0, due_date=ms(1))
        sort_tasks([task], DEFAULT_CRITERIA, STATUSES, TODAY)

        assert task.calculated_status == "overdue"
        assert "calculated_status" not in task.model_dump()

    def test_empty_criteria_uses_fallback(self):
        tasks = [
            make_task(0),
            make_task(1, priority=2, due_date=ms(20)),
            make_task(2, priority=2, scheduled_date=ms(15), due_date=ms(30)),
            make_task(3, priority=4),
        ]
        result = sort_tasks(tasks, [], STATUSES, TODAY)

        assert lines(result) == [3, 2, 1, 0]


class TestFallbackOrder:
    def test_priority_then_relevant_date(self):
        tasks = [
            make_task(0, due_date=ms(5)),
            make_task(1, priority=3),
            make_task(2, priority=3, due_date=ms(9)),
            make_task(3),
        ]

        assert lines(sort_tasks_by_priority_and_date(tasks)) == [2, 1, 0, 3]


class TestSortForest:
    def test_sorts_roots_and_children(self):
        content = (
            "- [ ] low 🔽\n"
            "- [ ] high ⏫\n"
            "  - [ ] child low 🔽\n"
            "  - [ ] child high ⏫\n"
        )
        forest = build_task_hierarchy(parse_tasks_from_content("a.md", content))
        sort_forest(forest, DEFAULT_CRITERIA, STATUSES, TODAY)

        assert [t.content for t in forest.walk()] == ["high", "child high", "child low", "low"]

    def test_keeps_tree_shape(self):
        content = "- [ ] a\n  - [ ] b\n- [ ] c ⏫\n"
        forest = build_task_hierarchy(parse_tasks_from_content("a.md", content))
        sort_forest(forest, DEFAULT_CRITERIA, STATUSES, TODAY)
        a = forest.get("a.md-L0")

        assert [t.content for t in forest.root_tasks()] == ["c", "a"]
        assert [t.content for t in forest.children_of(a)] == ["b"]


SORT_FIELDS = ("status", "priority", "due_date", "scheduled_date", "start_date", "content")

FOREST_CONTENT = (
    "- [ ] beta ⏫ 📅 2025-03-20\n"
    "  - [x] done child 📅 2025-03-02\n"
    "  - [ ] child 🔽 ⏳ 2025-03-12\n"
    "  - [-] cancelled child 📅 2025-03-01\n"
    "  - [ ] late child 📅 2025-03-01\n"
    "- [ ] alpha 🛫 2025-03-05\n"
    "- [/] Task 10 ⏳ 2025-03-12\n"
    "  - [ ] task 2 🔼\n"
    "- [ ] untitled 🔼\n"
)


def mixed_tasks() -> list[Task]:
    untitled = make_task(7, priority=2)
    untitled.content = ""
    return [
        make_task(0, content="beta", priority=4, due_date=ms(20)),
        make_task(1, content="alpha", start_date=ms(5)),
        make_task(2, content="late", due_date=ms(1)),
        make_task(3, content="done", status="x", priority=5, due_date=ms(2)),
        make_task(4, content="dropped", status="-", due_date=ms(1)),
        make_task(5, content="Task 10", status="/", scheduled_date=ms(12)),
        make_task(6, content="task 2", priority=1, scheduled_date=ms(12), due_date=ms(30)),
        untitled,
    ]


def make_criteria(fields: tuple[str, ...], orders: tuple[str, ...]) -> list[SortCriterion]:
    return [SortCriterion(field=f, order=o) for f, o in zip(fields, orders)]


@pytest.mark.parametrize("orders", [("asc",) * 3, ("desc",) * 3, ("asc", "desc", "asc")], ids="-".join)
@pytest.mark.parametrize("fields", list(permutations(SORT_FIELDS, 3)), ids="-".join)
class TestSortIsStable:
    """Sorting sorted tasks again changes nothing, for any criteria."""

    def test_sort_tasks(self, fields, orders):
        criteria = make_criteria(fields, orders)
        once = sort_tasks(mixed_tasks(), criteria, STATUSES, TODAY)
        twice = sort_tasks(once, criteria, STATUSES, TODAY)
        from_reversed = sort_tasks(list(reversed(once)), criteria, STATUSES, TODAY)

        assert lines(twice) == lines(once)
        assert lines(from_reversed) == lines(once)

    def test_sort_forest(self, fields, orders):
        criteria = make_criteria(fields, orders)
        forest = build_task_hierarchy(parse_tasks_from_content("a.md", FOREST_CONTENT))
        forest.get("a.md-L8").content = ""

        sort_forest(forest, criteria, STATUSES, TODAY)
        once = lines(list(forest.walk()))
        sort_forest(forest, criteria, STATUSES, TODAY)

        assert lines(list(forest.walk())) == once
        assert sorted(once) == list(range(9))
