"""
Analysis modules for critical path reporting and what-if scenarios.
"""

from .critical_path import (
    analyze_critical_path,
    summarize_critical_path,
    schedule_table,
    edge_table,
)
from .task_impact import analyze_task_impact, analyze_task_sensitivity

__all__ = [
    'analyze_critical_path',
    'summarize_critical_path',
    'schedule_table',
    'edge_table',
    'analyze_task_impact',
    'analyze_task_sensitivity',
]
