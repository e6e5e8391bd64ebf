"""Rebuild task nesting from indentation and group tasks into blocks."""

from collections.abc import Iterable

from ..models.task import Task, TaskForest


def build_task_hierarchy(tasks: Iterable[Task]) -> TaskForest:
    """
    Link tasks to parents by indentation.

    A task's parent is the closest earlier task with strictly smaller
    indentation that is still open. Roots keep their line order.
    """
    forest = TaskForest()
    stack: list[Task] = []

    for task in sorted(tasks, key=lambda t: t.line):
        task.parent = None
        task.children = []

        # Pop stack to find parent
        while stack and stack[-1].indentation >= task.indentation:
            stack.pop()

        if stack:
            parent = stack[-1]
            task.parent = parent.id
            parent.children.append(task.id)
        else:
            forest.roots.append(task.id)

        forest.tasks[task.id] = task
        stack.append(task)

    return forest


def find_continuous_blocks(tasks: Iterable[Task], forest: TaskForest) -> list[list[Task]]:
    """
    Group tasks into runs with no unrelated lines between them.

    A task joins the current block when its line is at most one past the
    highest line covered so far by the block's tasks and their descendants.
    """
    ordered = sorted(tasks, key=lambda t: t.line)
    if not ordered:
        return []

    blocks: list[list[Task]] = [[ordered[0]]]
    block_max = forest.max_line(ordered[0])

    for task in ordered[1:]:
        if task.line <= block_max + 1:
            blocks[-1].append(task)
            block_max = max(block_max, forest.max_line(task))
        else:
            blocks.append([task])
            block_max = forest.max_line(task)

    return blocks
