"""
Critical Path Analysis.

Identifies critical and near-critical tasks, analyzes float distribution,
and produces the tables consumed by diagram and grid views.
"""

from collections import defaultdict
from pathlib import Path
from typing import Iterable, Union

import pandas as pd

from schemas.scheduling import ScheduledTaskRow, ScheduleEdgeRow
from schemas.validator import validated_df_to_csv
from src.config.settings import settings
from ..cpm.engine import CPMEngine
from ..cpm.models import CPMResult, CriticalPathSummary, InsufficientData, Task
from ..cpm.network import TaskGraph

TASK_COLUMNS = list(ScheduledTaskRow.model_fields)
EDGE_COLUMNS = list(ScheduleEdgeRow.model_fields)


def float_bucket(total_float: int) -> str:
    """Label for a float value in the distribution."""
    if total_float <= 0:
        return '0 (critical)'
    if total_float <= 2:
        return '1-2 days'
    if total_float <= 5:
        return '3-5 days'
    if total_float <= 10:
        return '6-10 days'
    if total_float <= 20:
        return '11-20 days'
    return '> 20 days'


def analyze_critical_path(
    tasks: Union[TaskGraph, Iterable[Task]],
    near_critical_threshold_days: int = None,
) -> Union[CriticalPathSummary, InsufficientData]:
    """
    Analyze critical path and near-critical tasks.

    Args:
        tasks: Task graph to analyze
        near_critical_threshold_days: Float threshold for near-critical
            classification (default: settings.NEAR_CRITICAL_THRESHOLD_DAYS)

    Returns:
        CriticalPathSummary, or the InsufficientData signal passed through
    """
    result = CPMEngine(tasks).run()
    if isinstance(result, InsufficientData):
        return result
    return summarize_critical_path(result, near_critical_threshold_days)


def summarize_critical_path(
    result: CPMResult,
    near_critical_threshold_days: int = None,
) -> CriticalPathSummary:
    """Build the critical path summary from an already computed CPM result."""
    if near_critical_threshold_days is None:
        near_critical_threshold_days = settings.NEAR_CRITICAL_THRESHOLD_DAYS

    float_buckets = defaultdict(int)
    for st in result.all_tasks():
        float_buckets[float_bucket(st.total_float)] += 1

    near_critical = [
        st for st in result.non_critical_tasks
        if st.total_float <= near_critical_threshold_days
    ]
    near_critical.sort(key=lambda st: (st.total_float, st.early_start, st.task_id))

    return CriticalPathSummary(
        critical_path=list(result.critical_tasks),
        near_critical_tasks=near_critical,
        float_distribution=dict(float_buckets),
        project_duration=result.project_duration,
        near_critical_threshold_days=near_critical_threshold_days,
        total_tasks=len(result.critical_tasks) + len(result.non_critical_tasks),
    )


def schedule_table(result: Union[CPMResult, InsufficientData]) -> pd.DataFrame:
    """
    Scheduled tasks as a DataFrame, ordered by early start then id.

    An InsufficientData signal yields an empty frame with the same columns.
    """
    if isinstance(result, InsufficientData):
        return pd.DataFrame(columns=TASK_COLUMNS)

    rows = [
        {
            'task_id': st.task_id,
            'name': st.task.name,
            'duration': st.task.duration,
            'early_start': st.early_start,
            'early_finish': st.early_finish,
            'late_start': st.late_start,
            'late_finish': st.late_finish,
            'total_float': st.total_float,
            'free_float': st.free_float,
            'is_critical': st.is_critical,
            'parent_id': st.task.parent_id,
        }
        for st in result.all_tasks()
    ]
    return pd.DataFrame(rows, columns=TASK_COLUMNS)


def edge_table(result: Union[CPMResult, InsufficientData]) -> pd.DataFrame:
    """Diagram edges as a DataFrame."""
    if isinstance(result, InsufficientData):
        return pd.DataFrame(columns=EDGE_COLUMNS)

    rows = [
        {'source_id': e.source_id, 'target_id': e.target_id, 'is_critical': e.is_critical}
        for e in result.edges
    ]
    return pd.DataFrame(rows, columns=EDGE_COLUMNS)


def write_critical_path_tables(result: CPMResult, output_dir: Path) -> tuple[Path, Path]:
    """Write critical_path.csv and critical_path_edges.csv with schema validation."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    task_path = output_dir / 'critical_path.csv'
    edge_path = output_dir / 'critical_path_edges.csv'
    validated_df_to_csv(schedule_table(result), task_path, index=False)
    validated_df_to_csv(edge_table(result), edge_path, index=False)
    return task_path, edge_path


def print_critical_path_report(result: CriticalPathSummary) -> None:
    """Print a formatted critical path report."""
    print("=" * 80)
    print("CRITICAL PATH ANALYSIS REPORT")
    print("=" * 80)

    print(f"\nProject Duration: {result.project_duration} days")
    print(f"Scheduled Tasks: {result.total_tasks}")
    print(f"Critical Tasks: {len(result.critical_path)}")
    print(f"Near-Critical Tasks (<= {result.near_critical_threshold_days} days float): "
          f"{len(result.near_critical_tasks)}")

    print("\n--- Float Distribution ---")
    for bucket, count in sorted(result.float_distribution.items()):
        pct = count / result.total_tasks * 100
        bar = '#' * int(pct / 2)
        print(f"  {bucket:15s}: {count:5d} ({pct:5.1f}%) {bar}")

    print("\n--- Critical Path (first 20 tasks) ---")
    for i, st in enumerate(result.critical_path[:20]):
        print(f"  {i+1:3d}. {st.task_id:12s} | {st.task.name[:40]:40s} | "
              f"day {st.early_start:4d} -> {st.early_finish:4d}")

    if len(result.critical_path) > 20:
        print(f"  ... and {len(result.critical_path) - 20} more critical tasks")

    print("\n--- Near-Critical Tasks (first 10) ---")
    for i, st in enumerate(result.near_critical_tasks[:10]):
        print(f"  {i+1:3d}. {st.task_id:12s} | Float: {st.total_float:3d}d | "
              f"{st.task.name[:35]:35s}")

    print("\n" + "=" * 80)
