"""
Single Task Impact Analysis.

Analyze the schedule impact of changing a single task's duration.
Used for what-if scenarios and sensitivity analysis.
"""

from dataclasses import replace
from typing import Iterable, Union

from ..cpm.engine import CPMEngine
from ..cpm.models import CPMResult, InsufficientData, Task, TaskImpactResult
from ..cpm.network import TaskGraph, as_graph


def _timings(result: Union[CPMResult, InsufficientData]) -> dict[str, int]:
    if isinstance(result, InsufficientData):
        return {}
    return {st.task_id: st.early_finish for st in result.all_tasks()}


def _duration(result: Union[CPMResult, InsufficientData], graph: TaskGraph) -> int:
    if isinstance(result, InsufficientData):
        # Unconnected tasks still finish; the longest one bounds the project
        return max((t.duration for t in graph if t.is_schedulable()), default=0)
    return result.project_duration


def _critical(result: Union[CPMResult, InsufficientData]) -> list[str]:
    return [] if isinstance(result, InsufficientData) else result.critical_path


def analyze_task_impact(
    tasks: Union[TaskGraph, Iterable[Task]],
    task_id: str,
    duration_delta: int,
) -> TaskImpactResult:
    """
    Calculate impact of changing one task's duration.

    Args:
        tasks: Task graph (will not be modified)
        task_id: ID of task to modify
        duration_delta: Change in duration in days (positive = increase)

    Returns:
        TaskImpactResult with original vs new project duration and affected tasks
    """
    graph = as_graph(tasks)
    task = graph.require_task(task_id)

    baseline_result = CPMEngine(graph).run()

    new_duration = max(0, task.duration + duration_delta)
    modified_graph = graph.with_task(replace(task, duration=new_duration))
    modified_result = CPMEngine(modified_graph).run()

    # Tasks whose early finish moved
    baseline_finish = _timings(baseline_result)
    modified_finish = _timings(modified_result)
    affected = sorted(
        tid for tid, finish in modified_finish.items()
        if baseline_finish.get(tid) != finish
    )

    original_cp = _critical(baseline_result)
    new_cp = _critical(modified_result)

    return TaskImpactResult(
        task_id=task_id,
        task_name=task.name,
        duration_delta=duration_delta,
        original_duration=_duration(baseline_result, graph),
        new_duration=_duration(modified_result, modified_graph),
        slip_days=_duration(modified_result, modified_graph) - _duration(baseline_result, graph),
        affected_task_ids=affected,
        original_critical_path=original_cp,
        new_critical_path=new_cp,
        critical_path_changed=set(original_cp) != set(new_cp),
    )


def analyze_task_sensitivity(
    tasks: Union[TaskGraph, Iterable[Task]],
    task_ids: list[str] = None,
    duration_delta: int = 5,
) -> list[TaskImpactResult]:
    """
    Analyze sensitivity of multiple tasks.

    Tests the impact of increasing each task's duration by the same amount.
    Useful for identifying which tasks have the most schedule risk.

    Args:
        tasks: Task graph
        task_ids: Tasks to test (default: all schedulable tasks)
        duration_delta: Days added to each task in turn

    Returns:
        Results sorted by slip (descending), then task id
    """
    graph = as_graph(tasks)
    if task_ids is None:
        task_ids = sorted(t.task_id for t in graph if t.is_schedulable())

    results = [analyze_task_impact(graph, tid, duration_delta) for tid in task_ids]
    results.sort(key=lambda r: (-r.slip_days, r.task_id))
    return results
