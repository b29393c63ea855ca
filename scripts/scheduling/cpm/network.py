"""
Task Graph for CPM calculations.

Holds the authoritative task set with derived successor and child
indexes. A graph is an immutable value: every change produces a new
graph, so callers replace their working copy with the returned one.
"""

import heapq
import logging
from collections import defaultdict
from typing import Iterable, Iterator, Mapping, Optional

from schemas.task import TaskRecord

from .cycles import find_cycle
from .errors import NotFoundError
from .hierarchy import ancestors_of
from .models import Task

logger = logging.getLogger(__name__)


class TaskGraph:
    """
    Task dependency network plus the parent/child grouping tree.

    Successor and child lists are derived from each task's own
    ``dependencies`` and ``parent_id`` and are rebuilt with the graph.
    """

    def __init__(self, tasks: Iterable[Task] = ()):
        self._tasks: dict[str, Task] = {}
        for task in tasks:
            if task.task_id in self._tasks:
                raise ValueError(f"Duplicate task id {task.task_id!r}")
            self._tasks[task.task_id] = task

        self._successors: dict[str, list[str]] = defaultdict(list)
        self._children: dict[str, list[str]] = defaultdict(list)
        for tid in sorted(self._tasks):
            task = self._tasks[tid]
            for dep_id in task.dependencies:
                if dep_id in self._tasks:
                    self._successors[dep_id].append(tid)
            if task.parent_id in self._tasks:
                self._children[task.parent_id].append(tid)

    @classmethod
    def from_records(cls, records: Iterable[Mapping]) -> 'TaskGraph':
        """
        Build a graph from raw task dicts, validating each at the boundary.

        Raises:
            pydantic.ValidationError: If a record is malformed
        """
        tasks = []
        for raw in records:
            record = raw if isinstance(raw, TaskRecord) else TaskRecord.model_validate(raw)
            tasks.append(task_from_record(record))
        return cls(tasks)

    @property
    def tasks(self) -> Mapping[str, Task]:
        return dict(self._tasks)

    def get_task(self, task_id: str) -> Optional[Task]:
        """Get a task by ID, or None if it is not in the set."""
        return self._tasks.get(task_id)

    def require_task(self, task_id: str, role: str = 'Task') -> Task:
        """Get a task by ID, raising NotFoundError if absent."""
        task = self._tasks.get(task_id)
        if task is None:
            raise NotFoundError(task_id, role=role)
        return task

    def predecessors_of(self, task_id: str) -> frozenset[str]:
        """The task's own dependency set (empty for unknown ids)."""
        task = self._tasks.get(task_id)
        return task.dependencies if task else frozenset()

    def live_predecessors_of(self, task_id: str) -> list[str]:
        """Predecessor ids that name tasks present in the graph, sorted."""
        return sorted(d for d in self.predecessors_of(task_id) if d in self._tasks)

    def successors_of(self, task_id: str) -> list[str]:
        """IDs of tasks that depend on task_id, sorted."""
        return list(self._successors.get(task_id, []))

    def children_of(self, task_id: str) -> list[str]:
        """IDs of tasks whose parent is task_id, sorted."""
        return list(self._children.get(task_id, []))

    def get_start_tasks(self) -> list[str]:
        """Get task IDs with no live predecessors."""
        return [tid for tid in sorted(self._tasks) if not self.live_predecessors_of(tid)]

    def get_end_tasks(self) -> list[str]:
        """Get task IDs with no successors."""
        return [tid for tid in sorted(self._tasks) if not self._successors.get(tid)]

    def edges(self) -> list[tuple[str, str]]:
        """All live (predecessor, successor) pairs, sorted."""
        return sorted(
            (dep_id, tid)
            for tid, task in self._tasks.items()
            for dep_id in task.dependencies
            if dep_id in self._tasks
        )

    def topological_sort(self) -> list[str]:
        """
        Return task IDs in topological order (predecessors before successors).

        Uses Kahn's algorithm; ties are broken by id. Raises ValueError if
        a circular dependency is detected.
        """
        order, remaining = self.partial_topological_sort()
        if remaining:
            raise ValueError(f"Circular dependency detected involving {len(remaining)} tasks: "
                             f"{sorted(remaining)[:5]}...")
        return order

    def partial_topological_sort(self) -> tuple[list[str], set[str]]:
        """
        Kahn's algorithm that reports, rather than raises on, unresolved tasks.

        Each task is released at most once, so the loop is bounded by the
        task count even when the data contains a cycle.

        Returns:
            (ordered task ids, ids that could not be ordered)
        """
        in_degree = {tid: len(self.live_predecessors_of(tid)) for tid in self._tasks}
        ready = [tid for tid, deg in in_degree.items() if deg == 0]
        heapq.heapify(ready)
        result = []

        while ready:
            task_id = heapq.heappop(ready)
            result.append(task_id)

            for succ_id in self._successors.get(task_id, []):
                in_degree[succ_id] -= 1
                if in_degree[succ_id] == 0:
                    heapq.heappush(ready, succ_id)

        return result, set(self._tasks) - set(result)

    def reverse_topological_sort(self) -> list[str]:
        """Return task IDs in reverse topological order (successors before predecessors)."""
        return list(reversed(self.topological_sort()))

    def get_all_predecessors(self, task_id: str, include_self: bool = False) -> set[str]:
        """Get all predecessor task IDs (transitive closure)."""
        result = {task_id} if include_self else set()
        stack = [task_id]
        visited = set()

        while stack:
            current = stack.pop()
            if current in visited:
                continue
            visited.add(current)
            for dep_id in self.live_predecessors_of(current):
                result.add(dep_id)
                stack.append(dep_id)

        return result

    def get_all_successors(self, task_id: str, include_self: bool = False) -> set[str]:
        """Get all successor task IDs (transitive closure)."""
        result = {task_id} if include_self else set()
        stack = [task_id]
        visited = set()

        while stack:
            current = stack.pop()
            if current in visited:
                continue
            visited.add(current)
            for succ_id in self._successors.get(current, []):
                result.add(succ_id)
                stack.append(succ_id)

        return result

    def with_task(self, task: Task) -> 'TaskGraph':
        """Return a new graph with task added or replaced."""
        tasks = dict(self._tasks)
        tasks[task.task_id] = task
        return TaskGraph(tasks.values())

    def with_tasks(self, tasks: Iterable[Task]) -> 'TaskGraph':
        """Return a new graph with several tasks added or replaced."""
        merged = dict(self._tasks)
        for task in tasks:
            merged[task.task_id] = task
        return TaskGraph(merged.values())

    def without_task(self, task_id: str) -> 'TaskGraph':
        """
        Return a new graph with task_id removed.

        Dependency edges and parent links referencing it are dropped from
        the remaining tasks, as the persistence layer's cascade would.
        """
        remaining = []
        for tid, task in self._tasks.items():
            if tid == task_id:
                continue
            task = task.without_dependency(task_id)
            if task.parent_id == task_id:
                task = task.with_parent(None)
            remaining.append(task)
        return TaskGraph(remaining)

    def schedulable_subgraph(self) -> 'TaskGraph':
        """
        Create a new graph with only schedulable tasks (no groups or milestones).

        Dependencies on excluded tasks are dropped; parent links are kept.
        """
        keep = {tid for tid, t in self._tasks.items() if t.is_schedulable()}
        tasks = []
        for tid in sorted(keep):
            task = self._tasks[tid]
            for dep_id in task.dependencies - keep:
                task = task.without_dependency(dep_id)
            tasks.append(task)
        return TaskGraph(tasks)

    def get_statistics(self) -> dict:
        """Get network statistics."""
        kinds = defaultdict(int)
        states = defaultdict(int)

        for task in self._tasks.values():
            if task.is_group:
                kinds['group'] += 1
            elif task.is_milestone:
                kinds['milestone'] += 1
            else:
                kinds['task'] += 1
            states[task.progress_state()] += 1

        return {
            'total_tasks': len(self._tasks),
            'total_dependencies': len(self.edges()),
            'start_tasks': len(self.get_start_tasks()),
            'end_tasks': len(self.get_end_tasks()),
            'task_kinds': dict(kinds),
            'progress_states': dict(states),
        }

    def validate(self) -> list[str]:
        """
        Validate network integrity.

        Returns list of issues found (empty if valid).
        """
        issues = []

        for tid in sorted(self._tasks):
            task = self._tasks[tid]
            for dep_id in sorted(task.dependencies):
                if dep_id not in self._tasks:
                    issues.append(f"Task {tid} depends on missing task {dep_id}")
            if task.parent_id is not None and task.parent_id not in self._tasks:
                issues.append(f"Task {tid} references missing parent {task.parent_id}")

        cycle = find_cycle(self._tasks.values())
        if cycle:
            issues.append(f"Circular dependency: {' -> '.join(cycle)}")

        for tid in sorted(self._tasks):
            parent_id = self._tasks[tid].parent_id
            if parent_id is not None and (parent_id == tid or tid in ancestors_of(parent_id, self._tasks)):
                issues.append(f"Circular parentage involving task {tid}")

        if issues:
            logger.debug("Graph validation found %d issues", len(issues))
        return issues

    def __iter__(self) -> Iterator[Task]:
        return iter(self._tasks.values())

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, task_id: str) -> bool:
        return task_id in self._tasks

    def __repr__(self) -> str:
        return f"TaskGraph({len(self._tasks)} tasks, {len(self.edges())} dependencies)"


def task_from_record(record: TaskRecord) -> Task:
    """Convert a validated TaskRecord into a Task."""
    return Task(
        task_id=record.id,
        name=record.name,
        duration=record.duration,
        start_date=record.start_date,
        progress=record.progress,
        dependencies=frozenset(record.dependencies),
        parent_id=record.parent_id,
        is_group=record.is_group,
        is_milestone=record.is_milestone,
        priority=record.priority,
        description=record.description,
    )


def as_graph(tasks: Iterable[Task]) -> TaskGraph:
    """Accept either a TaskGraph or any iterable of tasks."""
    if isinstance(tasks, TaskGraph):
        return tasks
    return TaskGraph(tasks)
