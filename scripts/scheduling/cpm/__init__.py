"""
CPM (Critical Path Method) core for project networks.

This module provides:
- Task graph construction with dependency and hierarchy lookups
- Cycle detection for proposed dependency edges
- Parent/child hierarchy resolution
- Forward/backward pass CPM calculations, float and critical path
- The mutation gateway that validates structural edits
"""

from .models import (
    Task,
    ScheduledTask,
    ScheduleEdge,
    InsufficientData,
    CPMResult,
    CriticalPathSummary,
    TaskImpactResult,
)
from .errors import (
    SchedulingError,
    NotFoundError,
    CyclicDependencyError,
    SelfReferenceError,
    DataIntegrityError,
)
from .network import TaskGraph
from .cycles import would_create_cycle, eligible_dependency_targets, find_cycle
from .hierarchy import is_descendant, expanded_descendants, hierarchical_order
from .engine import CPMEngine, calculate_critical_path
from .gateway import add_dependency, set_parent

__all__ = [
    'Task',
    'ScheduledTask',
    'ScheduleEdge',
    'InsufficientData',
    'CPMResult',
    'CriticalPathSummary',
    'TaskImpactResult',
    'SchedulingError',
    'NotFoundError',
    'CyclicDependencyError',
    'SelfReferenceError',
    'DataIntegrityError',
    'TaskGraph',
    'would_create_cycle',
    'eligible_dependency_targets',
    'find_cycle',
    'is_descendant',
    'expanded_descendants',
    'hierarchical_order',
    'CPMEngine',
    'calculate_critical_path',
    'add_dependency',
    'set_parent',
]
