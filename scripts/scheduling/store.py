"""
Task store: the atomic read-validate-commit boundary.

Holds the latest graph snapshot. Every commit validates against that
snapshot under a lock, so a request prepared from an older read is
re-checked against whatever was committed in between.
"""

import logging
import threading
from typing import Callable, Iterable, Optional

from .cpm import gateway
from .cpm.models import Task
from .cpm.network import TaskGraph, as_graph

logger = logging.getLogger(__name__)


class StaleSnapshotError(RuntimeError):
    """Raised when a caller requires a version that is no longer current."""


class TaskStore:
    """Thread-safe holder of the current task graph."""

    def __init__(self, tasks: Iterable[Task] = ()) -> None:
        self._lock = threading.RLock()
        self._graph = as_graph(tasks)
        self._version = 0
        self._listeners: list[Callable[[TaskGraph, list[Task]], None]] = []

    @property
    def graph(self) -> TaskGraph:
        with self._lock:
            return self._graph

    @property
    def version(self) -> int:
        with self._lock:
            return self._version

    def snapshot(self) -> tuple[int, TaskGraph]:
        """Return (version, graph) read together."""
        with self._lock:
            return self._version, self._graph

    def subscribe(self, listener: Callable[[TaskGraph, list[Task]], None]) -> None:
        """Call listener(new_graph, changed_tasks) for each commit, e.g. to persist; a raising listener aborts it."""
        with self._lock:
            self._listeners.append(listener)

    def replace_all(self, tasks: Iterable[Task]) -> int:
        """Swap in a freshly loaded task set (e.g. after a reload from storage)."""
        with self._lock:
            self._graph = as_graph(tasks)
            self._version += 1
            return self._version

    def _commit(self, changed: list[Task], removed_id: Optional[str] = None) -> list[Task]:
        """
        Publish a new graph. Listeners see it before it becomes current;
        if one raises, the store keeps the previous graph and version.
        """
        graph = self._graph.without_task(removed_id) if removed_id else self._graph
        graph = graph.with_tasks(changed)
        for listener in list(self._listeners):
            listener(graph, changed)

        self._graph = graph
        self._version += 1
        logger.debug("Committed %d task changes (version %d)", len(changed), self._version)
        return changed

    def _check_version(self, expected_version: Optional[int]) -> None:
        if expected_version is not None and expected_version != self._version:
            raise StaleSnapshotError(
                f"Store is at version {self._version}, caller expected {expected_version}"
            )

    def add_dependency(self, source_id: str, target_id: str,
                       expected_version: Optional[int] = None) -> Task:
        """Validate against the latest snapshot and commit source -> target."""
        with self._lock:
            self._check_version(expected_version)
            updated = gateway.add_dependency(self._graph, source_id, target_id)
            if updated != self._graph.get_task(target_id):
                self._commit([updated])
            return updated

    def remove_dependency(self, source_id: str, target_id: str,
                          expected_version: Optional[int] = None) -> Task:
        with self._lock:
            self._check_version(expected_version)
            updated = gateway.remove_dependency(self._graph, source_id, target_id)
            if updated != self._graph.get_task(target_id):
                self._commit([updated])
            return updated

    def set_parent(self, task_id: str, new_parent_id: Optional[str],
                   expected_version: Optional[int] = None) -> Task:
        with self._lock:
            self._check_version(expected_version)
            updated = gateway.set_parent(self._graph, task_id, new_parent_id)
            if updated != self._graph.get_task(task_id):
                self._commit([updated])
            return updated

    def create_task(self, task: Task, expected_version: Optional[int] = None) -> Task:
        with self._lock:
            self._check_version(expected_version)
            created = gateway.create_task(self._graph, task)
            self._commit([created])
            return created

    def update_task(self, task: Task, expected_version: Optional[int] = None) -> Task:
        with self._lock:
            self._check_version(expected_version)
            updated = gateway.update_task(self._graph, task)
            self._commit([updated])
            return updated

    def delete_task(self, task_id: str, expected_version: Optional[int] = None) -> list[Task]:
        """Remove a task and commit the cascaded updates; returns the updated tasks."""
        with self._lock:
            self._check_version(expected_version)
            cascaded = gateway.remove_task(self._graph, task_id)
            return self._commit(cascaded, removed_id=task_id)
