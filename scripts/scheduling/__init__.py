"""
Project Scheduling Engine.

Provides cycle-safe task graph editing and CPM calculations for project
task data supplied by an external persistence layer.
"""

from .cpm import (
    Task,
    ScheduledTask,
    ScheduleEdge,
    InsufficientData,
    CPMResult,
    TaskGraph,
    CPMEngine,
    calculate_critical_path,
    would_create_cycle,
    eligible_dependency_targets,
    is_descendant,
    expanded_descendants,
    add_dependency,
    set_parent,
    SchedulingError,
    NotFoundError,
    CyclicDependencyError,
    SelfReferenceError,
    DataIntegrityError,
)
from .store import TaskStore
from .data_loader import load_task_graph, load_task_records, load_dependencies

__all__ = [
    # Models
    'Task',
    'ScheduledTask',
    'ScheduleEdge',
    'InsufficientData',
    'CPMResult',
    # Core
    'TaskGraph',
    'CPMEngine',
    'calculate_critical_path',
    'would_create_cycle',
    'eligible_dependency_targets',
    'is_descendant',
    'expanded_descendants',
    'add_dependency',
    'set_parent',
    'TaskStore',
    # Errors
    'SchedulingError',
    'NotFoundError',
    'CyclicDependencyError',
    'SelfReferenceError',
    'DataIntegrityError',
    # Loading
    'load_task_graph',
    'load_task_records',
    'load_dependencies',
]
