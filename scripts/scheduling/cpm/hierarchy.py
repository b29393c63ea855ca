"""
Parent/child grouping tree, kept separate from the dependency graph.

A ``parent_id`` naming a task that is not in the set is treated as
"no parent": the task set may be read mid-edit, so dangling references
degrade to top level instead of raising.
"""

from datetime import date
from typing import Iterable, Optional

from .models import Task


def _index(tasks: Iterable[Task]) -> dict[str, Task]:
    return {t.task_id: t for t in tasks}


def _display_key(task: Task) -> tuple:
    return (task.start_date or date.max, task.task_id)


def _children_map(by_id: dict[str, Task]) -> dict[str, list[Task]]:
    children: dict[str, list[Task]] = {tid: [] for tid in by_id}
    for task in by_id.values():
        if task.parent_id in by_id:
            children[task.parent_id].append(task)
    for kids in children.values():
        kids.sort(key=_display_key)
    return children


def ancestors_of(task_id: str, tasks: Iterable[Task]) -> list[str]:
    """
    Parent chain of a task, nearest first.

    Stops at the first missing parent, and at a repeated id if the
    stored data already contains a containment loop.
    """
    by_id = tasks if isinstance(tasks, dict) else _index(tasks)
    chain = []
    seen = {task_id}
    task = by_id.get(task_id)
    current = task.parent_id if task else None

    while current is not None and current in by_id and current not in seen:
        chain.append(current)
        seen.add(current)
        current = by_id[current].parent_id

    return chain


def is_descendant(ancestor_id: str, task_id: str, tasks: Iterable[Task]) -> bool:
    """
    Check whether task_id sits somewhere below ancestor_id.

    Walks parent links upward from task_id looking for ancestor_id. Used
    to reject moving a task under one of its own subtasks.
    """
    return ancestor_id in ancestors_of(task_id, tasks)


def depth_of(task_id: str, tasks: Iterable[Task]) -> int:
    """Nesting level, 0 for top-level tasks."""
    return len(ancestors_of(task_id, tasks))


def expanded_descendants(group_id: str, tasks: Iterable[Task]) -> list[Task]:
    """
    Pre-order listing of a group and its subtree.

    The group comes first, then each child followed by the child's own
    subtree. Siblings are ordered by start date, then id.

    Returns:
        Empty list if group_id is not in the set
    """
    by_id = _index(tasks)
    if group_id not in by_id:
        return []
    children = _children_map(by_id)

    ordered = []
    seen = set()
    stack = [by_id[group_id]]
    while stack:
        task = stack.pop()
        if task.task_id in seen:
            continue
        seen.add(task.task_id)
        ordered.append(task)
        # Reverse so the first child is popped first
        stack.extend(reversed(children[task.task_id]))

    return ordered


def top_level_tasks(tasks: Iterable[Task]) -> list[Task]:
    """Tasks with no parent, or whose parent is missing from the set."""
    by_id = _index(tasks)
    roots = [t for t in by_id.values() if t.parent_id is None or t.parent_id not in by_id]
    return sorted(roots, key=_display_key)


def hierarchical_order(tasks: Iterable[Task]) -> list[Task]:
    """
    All tasks in WBS/Gantt display order.

    Each top-level task is followed by its subtree. Tasks trapped in a
    containment loop (unreachable from any root) are appended at the end
    so nothing disappears from the listing.
    """
    task_list = list(tasks)
    ordered = []
    seen = set()

    for root in top_level_tasks(task_list):
        for task in expanded_descendants(root.task_id, task_list):
            if task.task_id not in seen:
                seen.add(task.task_id)
                ordered.append(task)

    leftovers = sorted((t for t in task_list if t.task_id not in seen), key=_display_key)
    return ordered + leftovers


def visible_tasks(tasks: Iterable[Task], expanded_group_ids: Iterable[str]) -> list[Task]:
    """
    Tasks shown when only the given groups are expanded.

    A task is visible when every ancestor group is expanded.
    """
    task_list = list(tasks)
    by_id = _index(task_list)
    expanded = set(expanded_group_ids)
    return [
        t for t in hierarchical_order(task_list)
        if all(a in expanded for a in ancestors_of(t.task_id, by_id))
    ]


def parent_options(tasks: Iterable[Task], task_id: Optional[str]) -> list[Task]:
    """
    Group tasks that task_id may legally be moved under.

    Excludes the task itself and any group inside its own subtree.
    """
    task_list = list(tasks)
    by_id = _index(task_list)
    options = [
        t for t in task_list
        if t.is_group and t.task_id != task_id
        and not (task_id is not None and is_descendant(task_id, t.task_id, by_id))
    ]
    return sorted(options, key=_display_key)
