"""
Data schemas for the scheduling engine.

Pydantic models describe the task rows entering the engine and the
critical path tables leaving it.

Usage:
    from schemas import TaskRecord, validate_dataframe

    record = TaskRecord.model_validate({'id': 'a', 'name': 'Design', 'duration': 3})
    errors = validate_dataframe(df, TaskRecord, required_only=True)
"""

from .task import TaskRecord, DependencyRecord
from .scheduling import ScheduledTaskRow, ScheduleEdgeRow
from .validator import (
    validate_csv_file,
    validate_dataframe,
    validated_df_to_csv,
    SchemaValidationError,
)
from .registry import SCHEMA_REGISTRY, get_schema_for_file

__all__ = [
    'TaskRecord',
    'DependencyRecord',
    'ScheduledTaskRow',
    'ScheduleEdgeRow',
    'validate_csv_file',
    'validate_dataframe',
    'validated_df_to_csv',
    'SchemaValidationError',
    'SCHEMA_REGISTRY',
    'get_schema_for_file',
]
