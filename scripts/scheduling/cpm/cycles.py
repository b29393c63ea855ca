"""
Cycle detection over the dependency graph.

All traversals use an explicit stack so deep chains never hit the
interpreter recursion limit.
"""

from collections import defaultdict
from typing import Iterable, Optional

from .models import Task


def build_successor_map(tasks: Iterable[Task]) -> dict[str, list[str]]:
    """
    Build forward adjacency (predecessor -> dependents) for known tasks.

    Dependency ids that do not name a task in the set are ignored.
    """
    task_list = list(tasks)
    known = {t.task_id for t in task_list}
    successors: dict[str, list[str]] = {tid: [] for tid in known}

    for task in task_list:
        for dep_id in sorted(task.dependencies):
            if dep_id in known:
                successors[dep_id].append(task.task_id)

    return successors


def would_create_cycle(tasks: Iterable[Task], source_id: str, target_id: str) -> bool:
    """
    Check whether adding edge source -> target (target depends on source) closes a cycle.

    Does not modify the input. Unknown ids are treated as having no edges.

    Args:
        tasks: Current task set
        source_id: Proposed predecessor
        target_id: Proposed dependent

    Returns:
        True if the edge would create a cycle
    """
    if source_id == target_id:
        return True

    successors = build_successor_map(tasks)
    if source_id in successors:
        successors[source_id].append(target_id)

    # Search forward from the target for a path back to the source
    visited = set()
    stack = [target_id]

    while stack:
        current = stack.pop()
        if current == source_id:
            return True
        if current in visited:
            continue
        visited.add(current)

        for nxt in successors.get(current, []):
            if nxt not in visited:
                stack.append(nxt)

    return False


def eligible_dependency_targets(tasks: Iterable[Task], task_id: str) -> list[Task]:
    """
    Tasks that task_id may depend on without creating a cycle.

    Existing predecessors stay eligible so an editor can show them selected.

    Returns:
        Tasks sorted by id, excluding task_id itself
    """
    task_list = list(tasks)
    # Everything downstream of task_id would close a cycle
    successors = build_successor_map(task_list)
    downstream = set()
    stack = [task_id]
    while stack:
        current = stack.pop()
        for nxt in successors.get(current, []):
            if nxt not in downstream:
                downstream.add(nxt)
                stack.append(nxt)

    eligible = [
        t for t in task_list
        if t.task_id != task_id and t.task_id not in downstream
    ]
    return sorted(eligible, key=lambda t: t.task_id)


def find_cycle(tasks: Iterable[Task]) -> Optional[list[str]]:
    """
    Find one dependency cycle, if any.

    Returns:
        Cycle as a list of task ids in dependency order with the first id
        repeated at the end (e.g. ['a', 'b', 'a']), or None if acyclic
    """
    successors = build_successor_map(tasks)

    WHITE, GREY, BLACK = 0, 1, 2
    color = defaultdict(int)

    for root in sorted(successors):
        if color[root] != WHITE:
            continue

        # Each frame is (node, iterator over its successors)
        path = [root]
        color[root] = GREY
        stack = [iter(successors[root])]

        while stack:
            advanced = False
            for nxt in stack[-1]:
                if color[nxt] == GREY:
                    start = path.index(nxt)
                    return path[start:] + [nxt]
                if color[nxt] == WHITE:
                    color[nxt] = GREY
                    path.append(nxt)
                    stack.append(iter(successors[nxt]))
                    advanced = True
                    break
            if not advanced:
                color[path.pop()] = BLACK
                stack.pop()

    return None
