"""
Data models for CPM calculations.

Defines dataclasses for tasks, computed schedule timing, diagram edges,
and analysis results. All times are integer day offsets from project
start (day 0); calendar dates are a display concern.
"""

from dataclasses import dataclass, field, replace
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class Task:
    """Represents a schedule task. Instances are immutable values."""

    task_id: str
    name: str
    duration: int = 0                                  # days, 0 for milestones
    start_date: Optional[date] = None                  # Gantt positioning only
    progress: int = 0                                  # percent, display only
    dependencies: frozenset[str] = field(default_factory=frozenset)
    parent_id: Optional[str] = None
    is_group: bool = False
    is_milestone: bool = False
    priority: int = 3                                  # 1-5, display only
    description: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.dependencies, frozenset):
            object.__setattr__(self, 'dependencies', frozenset(self.dependencies))
        if self.is_group and self.is_milestone:
            raise ValueError(f"Task {self.task_id} cannot be both a group and a milestone")
        if self.duration < 0:
            raise ValueError(f"Task {self.task_id} has negative duration {self.duration}")
        if not 0 <= self.progress <= 100:
            raise ValueError(f"Task {self.task_id} progress {self.progress} outside 0-100")
        if not 1 <= self.priority <= 5:
            raise ValueError(f"Task {self.task_id} priority {self.priority} outside 1-5")
        if self.task_id in self.dependencies:
            raise ValueError(f"Task {self.task_id} cannot depend on itself")

    def is_schedulable(self) -> bool:
        """Check if task takes part in forward/backward pass timing."""
        return not self.is_group and not self.is_milestone

    def progress_state(self) -> str:
        """Board column for this task: 'todo', 'in_progress' or 'done'."""
        if self.progress >= 100:
            return 'done'
        if self.progress > 0:
            return 'in_progress'
        return 'todo'

    def with_dependency(self, predecessor_id: str) -> 'Task':
        """Return a copy that also depends on predecessor_id."""
        if predecessor_id in self.dependencies:
            return self
        return replace(self, dependencies=self.dependencies | {predecessor_id})

    def without_dependency(self, predecessor_id: str) -> 'Task':
        """Return a copy that no longer depends on predecessor_id."""
        if predecessor_id not in self.dependencies:
            return self
        return replace(self, dependencies=self.dependencies - {predecessor_id})

    def with_parent(self, parent_id: Optional[str]) -> 'Task':
        """Return a copy placed under parent_id (None for top level)."""
        if parent_id == self.parent_id:
            return self
        return replace(self, parent_id=parent_id)


@dataclass(frozen=True)
class ScheduledTask:
    """A schedulable task annotated with CPM timing."""

    task: Task
    early_start: int
    early_finish: int
    late_start: int
    late_finish: int
    free_float: int = 0

    @property
    def task_id(self) -> str:
        return self.task.task_id

    @property
    def total_float(self) -> int:
        return self.late_start - self.early_start

    @property
    def is_critical(self) -> bool:
        return self.total_float == 0

    def sort_key(self) -> tuple[int, str]:
        return (self.early_start, self.task_id)


@dataclass(frozen=True)
class ScheduleEdge:
    """A predecessor -> successor edge of the critical path diagram."""

    source_id: str
    target_id: str
    is_critical: bool = False


@dataclass(frozen=True)
class InsufficientData:
    """
    Signal that there is nothing meaningful to schedule.

    Returned (not raised) when fewer than two schedulable tasks exist or
    no dependency edge connects them, so callers can render an empty state.
    """

    reason: str
    schedulable_count: int = 0
    edge_count: int = 0

    def __bool__(self) -> bool:
        return False


@dataclass
class CPMResult:
    """Results from a CPM calculation."""

    critical_tasks: list[ScheduledTask]
    non_critical_tasks: list[ScheduledTask]
    edges: list[ScheduleEdge]
    project_duration: int
    start_nodes: list[str]

    @property
    def critical_path(self) -> list[str]:
        """Critical task ids ordered by early start, then id."""
        return [st.task_id for st in self.critical_tasks]

    def all_tasks(self) -> list[ScheduledTask]:
        """Every scheduled task ordered by early start, then id."""
        return sorted(self.critical_tasks + self.non_critical_tasks, key=ScheduledTask.sort_key)

    def get_task(self, task_id: str) -> Optional[ScheduledTask]:
        for st in self.critical_tasks + self.non_critical_tasks:
            if st.task_id == task_id:
                return st
        return None

    def get_critical_edges(self) -> list[ScheduleEdge]:
        return [e for e in self.edges if e.is_critical]

    def get_tasks_by_float(self, max_float: int = None) -> list[ScheduledTask]:
        """Get tasks sorted by total float (ascending)."""
        tasks = self.all_tasks()
        if max_float is not None:
            tasks = [t for t in tasks if t.total_float <= max_float]
        return sorted(tasks, key=lambda t: (t.total_float, t.early_start, t.task_id))


@dataclass
class CriticalPathSummary:
    """Results from critical path analysis."""

    critical_path: list[ScheduledTask]
    near_critical_tasks: list[ScheduledTask]
    float_distribution: dict[str, int]  # float_bucket -> count
    project_duration: int
    near_critical_threshold_days: int
    total_tasks: int

    def get_critical_path_length(self) -> int:
        """Number of tasks on critical path."""
        return len(self.critical_path)

    def get_risk_summary(self) -> str:
        """Get summary of schedule risk."""
        critical = len(self.critical_path)
        near_critical = len(self.near_critical_tasks)
        return (f"{critical} critical tasks, {near_critical} near-critical "
                f"(<= {self.near_critical_threshold_days} days float)")


@dataclass
class TaskImpactResult:
    """Results from single task what-if analysis."""

    task_id: str
    task_name: str
    duration_delta: int
    original_duration: int
    new_duration: int
    slip_days: int
    affected_task_ids: list[str]
    original_critical_path: list[str]
    new_critical_path: list[str]
    critical_path_changed: bool

    def get_slip_summary(self) -> str:
        """Get human-readable slip summary."""
        if self.slip_days <= 0:
            return "No impact on project finish"
        return f"{self.slip_days} days slip"
