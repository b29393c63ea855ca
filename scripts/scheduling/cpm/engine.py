"""
CPM (Critical Path Method) Engine.

Implements forward and backward pass calculations over the schedulable
tasks (groups and milestones excluded), in integer day offsets.
"""

import logging
from typing import Iterable, Union

from .cycles import find_cycle
from .errors import DataIntegrityError
from .models import CPMResult, InsufficientData, ScheduledTask, ScheduleEdge, Task
from .network import TaskGraph, as_graph

logger = logging.getLogger(__name__)


class CPMEngine:
    """
    CPM calculation engine.

    Performs forward pass (early times), backward pass (late times),
    float calculation, and critical path identification. The input graph
    is never modified; results are returned as new values.
    """

    def __init__(self, tasks: Union[TaskGraph, Iterable[Task]]):
        """
        Initialize CPM engine.

        Args:
            tasks: Task graph (or plain task iterable) to calculate
        """
        self.graph = as_graph(tasks)
        self.network = self.graph.schedulable_subgraph()

        self.early_start: dict[str, int] = {}
        self.early_finish: dict[str, int] = {}
        self.late_start: dict[str, int] = {}
        self.late_finish: dict[str, int] = {}
        self._order: list[str] = []

    def check_sufficient(self) -> Union[InsufficientData, None]:
        """Return an InsufficientData signal if there is nothing to schedule."""
        count = len(self.network)
        edge_count = len(self.network.edges())

        if count < 2:
            return InsufficientData(
                reason=f"Need at least 2 schedulable tasks, found {count}",
                schedulable_count=count,
                edge_count=edge_count,
            )
        if edge_count == 0:
            return InsufficientData(
                reason="No dependencies between schedulable tasks",
                schedulable_count=count,
                edge_count=0,
            )
        return None

    def resolve_order(self) -> list[str]:
        """
        Topological order of the schedulable tasks.

        Raises:
            DataIntegrityError: If some tasks cannot be ordered (a cycle)
        """
        order, unresolved = self.network.partial_topological_sort()
        if unresolved:
            cycle = find_cycle(self.network)
            error = DataIntegrityError(unresolved, cycle=cycle)
            logger.error(error.message)
            raise error
        self._order = order
        return order

    def forward_pass(self) -> None:
        """
        Calculate early start and early finish for all tasks.

        Processes tasks in topological order, so each task is finalized
        only after every predecessor; ES is the maximum predecessor EF.
        """
        order = self._order or self.resolve_order()

        for task_id in order:
            task = self.network.get_task(task_id)
            preds = self.network.live_predecessors_of(task_id)
            early_start = max((self.early_finish[p] for p in preds), default=0)
            self.early_start[task_id] = early_start
            self.early_finish[task_id] = early_start + task.duration

    def get_project_end(self) -> int:
        """Get the latest early finish as project end."""
        if not self.early_finish:
            raise ValueError("No tasks have early_finish calculated - run forward_pass first")
        return max(self.early_finish.values())

    def backward_pass(self) -> None:
        """
        Calculate late start and late finish for all tasks.

        Processes tasks in reverse topological order. Sinks finish at the
        single project end; others at the minimum successor LS.
        """
        project_end = self.get_project_end()

        for task_id in reversed(self._order):
            task = self.network.get_task(task_id)
            succs = self.network.successors_of(task_id)
            late_finish = min((self.late_start[s] for s in succs), default=project_end)
            self.late_finish[task_id] = late_finish
            self.late_start[task_id] = late_finish - task.duration

    def free_float(self, task_id: str) -> int:
        """Slack before the earliest successor is delayed (project end for sinks)."""
        succs = self.network.successors_of(task_id)
        next_start = min((self.early_start[s] for s in succs), default=self.get_project_end())
        return next_start - self.early_finish[task_id]

    def run(self) -> Union[CPMResult, InsufficientData]:
        """
        Execute full CPM calculation.

        Returns:
            CPMResult with timing, classification and diagram edges, or
            InsufficientData when there is nothing meaningful to schedule

        Raises:
            DataIntegrityError: If the dependency data contains a cycle
        """
        insufficient = self.check_sufficient()
        if insufficient is not None:
            logger.debug("Critical path skipped: %s", insufficient.reason)
            return insufficient

        self.resolve_order()
        self.forward_pass()
        self.backward_pass()

        scheduled = [
            ScheduledTask(
                task=self.network.get_task(tid),
                early_start=self.early_start[tid],
                early_finish=self.early_finish[tid],
                late_start=self.late_start[tid],
                late_finish=self.late_finish[tid],
                free_float=self.free_float(tid),
            )
            for tid in self._order
        ]
        scheduled.sort(key=ScheduledTask.sort_key)

        critical = [st for st in scheduled if st.is_critical]
        non_critical = [st for st in scheduled if not st.is_critical]
        critical_ids = {st.task_id for st in critical}

        position = {st.task_id: i for i, st in enumerate(scheduled)}
        edges = [
            ScheduleEdge(source_id=src, target_id=dst,
                         is_critical=src in critical_ids and dst in critical_ids)
            for src, dst in self.network.edges()
        ]
        edges.sort(key=lambda e: (position[e.source_id], position[e.target_id]))

        result = CPMResult(
            critical_tasks=critical,
            non_critical_tasks=non_critical,
            edges=edges,
            project_duration=self.get_project_end(),
            start_nodes=self.network.get_start_tasks(),
        )
        logger.debug("CPM: %d tasks, %d critical, project duration %d days",
                     len(scheduled), len(critical), result.project_duration)
        return result


def calculate_critical_path(tasks: Union[TaskGraph, Iterable[Task]]) -> Union[CPMResult, InsufficientData]:
    """Run the CPM engine over a task set."""
    return CPMEngine(tasks).run()
