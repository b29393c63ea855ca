"""
Scheduling Mutation Gateway.

The single commit path for changes to dependency or hierarchy structure.
Every operation validates against the task set it is given and returns
the proposed new task records; nothing is mutated and nothing is
persisted here. A rejected proposal raises before any record is produced,
so no partial edge is ever handed to persistence.
"""

import logging
from dataclasses import replace
from typing import Iterable, Optional, Union

from .cycles import would_create_cycle
from .errors import CyclicDependencyError, SelfReferenceError
from .hierarchy import is_descendant
from .models import Task
from .network import TaskGraph, as_graph

logger = logging.getLogger(__name__)

TaskSet = Union[TaskGraph, Iterable[Task]]


def add_dependency(tasks: TaskSet, source_id: str, target_id: str) -> Task:
    """
    Make target depend on source.

    Args:
        tasks: Current task set
        source_id: Predecessor task id
        target_id: Dependent task id

    Returns:
        The updated target task (unchanged if the edge already exists)

    Raises:
        SelfReferenceError: If source_id == target_id
        NotFoundError: If either task is absent
        CyclicDependencyError: If the edge would create a cycle
    """
    if source_id == target_id:
        logger.info("Rejected self dependency on %s", source_id)
        raise SelfReferenceError(source_id)

    graph = as_graph(tasks)
    graph.require_task(source_id, role='Predecessor task')
    target = graph.require_task(target_id, role='Dependent task')

    if source_id in target.dependencies:
        return target

    if would_create_cycle(graph, source_id, target_id):
        logger.info("Rejected dependency %s -> %s: would create a cycle", source_id, target_id)
        raise CyclicDependencyError(source_id, target_id)

    return target.with_dependency(source_id)


def remove_dependency(tasks: TaskSet, source_id: str, target_id: str) -> Task:
    """
    Drop the edge source -> target. Removing a missing edge is a no-op.

    Raises:
        NotFoundError: If the target task is absent
    """
    graph = as_graph(tasks)
    target = graph.require_task(target_id, role='Dependent task')
    return target.without_dependency(source_id)


def set_parent(tasks: TaskSet, task_id: str, new_parent_id: Optional[str]) -> Task:
    """
    Move a task under new_parent_id (None moves it to top level).

    Raises:
        SelfReferenceError: If new_parent_id == task_id
        NotFoundError: If the task or the new parent is absent
        CyclicDependencyError: If new_parent_id is inside task_id's subtree
    """
    if new_parent_id is not None and new_parent_id == task_id:
        logger.info("Rejected self parentage on %s", task_id)
        raise SelfReferenceError(task_id, kind='parent')

    graph = as_graph(tasks)
    task = graph.require_task(task_id)
    if new_parent_id is None:
        return task.with_parent(None)

    graph.require_task(new_parent_id, role='Parent task')
    if is_descendant(task_id, new_parent_id, graph):
        logger.info("Rejected moving %s under its descendant %s", task_id, new_parent_id)
        raise CyclicDependencyError(task_id, new_parent_id, kind='parent')

    return task.with_parent(new_parent_id)


def _apply_structure(graph: TaskGraph, current: Task, desired: Task) -> Task:
    """
    Move current toward desired one validated step at a time.

    Each new edge is checked against the graph with the earlier steps
    applied, so two new edges cannot jointly close a cycle.
    """
    if desired.parent_id != current.parent_id:
        current = set_parent(graph, current.task_id, desired.parent_id)
        graph = graph.with_task(current)

    for dep_id in sorted(desired.dependencies - current.dependencies):
        current = add_dependency(graph, dep_id, current.task_id)
        graph = graph.with_task(current)

    return current


def create_task(tasks: TaskSet, task: Task) -> Task:
    """
    Validate a new task before it is persisted.

    Raises:
        ValueError: If the id is already taken
        NotFoundError: If a dependency or the parent does not exist
        CyclicDependencyError: If a dependency or the parent would create a cycle
    """
    graph = as_graph(tasks)
    if task.task_id in graph:
        raise ValueError(f"Task {task.task_id!r} already exists")

    bare = replace(task, dependencies=frozenset(), parent_id=None)
    created = _apply_structure(graph.with_task(bare), bare, task)
    logger.debug("Validated new task %s", task.task_id)
    return created


def update_task(tasks: TaskSet, task: Task) -> Task:
    """
    Validate an edited task before it is persisted.

    Only dependencies added by the edit, and a changed parent, are
    re-checked; removing edges can never create a cycle.

    Raises:
        NotFoundError: If the task, a new dependency or the parent does not exist
        CyclicDependencyError: If a new dependency or the parent would create a cycle
    """
    graph = as_graph(tasks)
    previous = graph.require_task(task.task_id)

    kept = replace(
        task,
        dependencies=previous.dependencies & task.dependencies,
        parent_id=previous.parent_id,
    )
    return _apply_structure(graph.with_task(kept), kept, task)


def remove_task(tasks: TaskSet, task_id: str) -> list[Task]:
    """
    Propose the cascade of deleting task_id.

    Returns:
        Other tasks whose dependencies or parent referenced task_id,
        updated to drop the reference, sorted by id

    Raises:
        NotFoundError: If the task is absent
    """
    graph = as_graph(tasks)
    graph.require_task(task_id)
    remaining = graph.without_task(task_id)

    return [
        task for task in sorted(remaining, key=lambda t: t.task_id)
        if task != graph.get_task(task.task_id)
    ]
