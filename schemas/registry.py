"""
Schema registry mapping file names to their Pydantic schemas.

Provides a central reference for the task exports the engine reads and
the critical path tables it writes.
"""

from typing import Type, Dict, Optional
from pathlib import Path
from pydantic import BaseModel

from .task import TaskRecord, DependencyRecord
from .scheduling import ScheduledTaskRow, ScheduleEdgeRow


# Keys are file names (without path), values are Pydantic model classes
SCHEMA_REGISTRY: Dict[str, Type[BaseModel]] = {
    # Inputs from the persistence layer
    'tasks.csv': TaskRecord,
    'task_dependencies.csv': DependencyRecord,

    # Critical path outputs
    'critical_path.csv': ScheduledTaskRow,
    'critical_path_edges.csv': ScheduleEdgeRow,
}


def get_schema_for_file(file_path: str) -> Optional[Type[BaseModel]]:
    """
    Get the schema for a file based on its name.

    Args:
        file_path: Path to the file (can be full path or just filename)

    Returns:
        Pydantic model class or None if no schema registered
    """
    filename = Path(file_path).name
    return SCHEMA_REGISTRY.get(filename)


def list_registered_files() -> list:
    """Return list of all registered file names."""
    return sorted(SCHEMA_REGISTRY.keys())
