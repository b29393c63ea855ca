"""
Scheduling error taxonomy.

Validation errors block a commit entirely; ``DataIntegrityError`` means a
cycle reached the engine despite validation and is fatal to the computation.
"""

from typing import Iterable, Optional


class SchedulingError(Exception):
    """Base class for all scheduling errors. ``message`` is user-facing."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(SchedulingError):
    """A referenced task id does not exist in the supplied task set."""

    def __init__(self, task_id: str, role: str = 'Task'):
        super().__init__(f"{role} {task_id!r} does not exist")
        self.task_id = task_id
        self.role = role


class CyclicDependencyError(SchedulingError):
    """A proposed dependency edge or parent assignment would close a cycle."""

    def __init__(self, source_id: str, target_id: str, kind: str = 'dependency',
                 message: Optional[str] = None):
        if message is None:
            if kind == 'parent':
                message = (f"Cannot move {source_id!r} under {target_id!r}: "
                           f"{target_id!r} is one of its own subtasks")
            else:
                message = (f"Cannot make {target_id!r} depend on {source_id!r}: "
                           f"{source_id!r} already depends on {target_id!r}, "
                           f"which would create a circular dependency")
        super().__init__(message)
        self.source_id = source_id
        self.target_id = target_id
        self.kind = kind


class SelfReferenceError(CyclicDependencyError):
    """A task was proposed to depend on, or be parented by, itself."""

    def __init__(self, task_id: str, kind: str = 'dependency'):
        if kind == 'parent':
            message = f"Task {task_id!r} cannot be its own parent"
        else:
            message = f"Task {task_id!r} cannot depend on itself"
        super().__init__(task_id, task_id, kind=kind, message=message)
        self.task_id = task_id


class DataIntegrityError(SchedulingError):
    """Critical path propagation could not resolve every task (a cycle slipped past validation)."""

    def __init__(self, unresolved_ids: Iterable[str], cycle: Optional[list[str]] = None):
        self.unresolved_ids = sorted(unresolved_ids)
        self.cycle = cycle
        preview = self.unresolved_ids[:5]
        message = (f"Critical path computation did not converge: "
                   f"{len(self.unresolved_ids)} tasks unresolved {preview}")
        if cycle:
            message += f"; cycle: {' -> '.join(cycle)}"
        super().__init__(message)
