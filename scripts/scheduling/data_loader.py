"""
Data Loader for task exports.

Loads the ``tasks`` and ``task_dependencies`` tables from CSV exports
and constructs a TaskGraph for CPM analysis.
"""

import logging
from pathlib import Path

import pandas as pd

from schemas.task import TaskRecord, DependencyRecord
from schemas.validator import SchemaValidationError, validate_dataframe
from src.config.settings import Settings
from .cpm.network import TaskGraph, task_from_record

logger = logging.getLogger(__name__)

_BOOL_TRUE = {'true', 't', 'yes', 'y', '1'}


def _clean(value):
    """Map pandas missing values to None."""
    if value is None:
        return None
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        pass
    return value


def _as_bool(value) -> bool:
    value = _clean(value)
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip().lower() in _BOOL_TRUE
    return bool(value)


def _as_int(value, default: int):
    value = _clean(value)
    if value is None:
        return default
    # Whole floats come from columns with blanks; anything else is left
    # for TaskRecord to reject
    if isinstance(value, float):
        return int(value) if value.is_integer() else float(value)
    if isinstance(value, str):
        return value
    return int(value)


def _as_text(value):
    value = _clean(value)
    return None if value is None else str(value)


def _as_id(value):
    value = _clean(value)
    if value is None:
        return None
    # Numeric ids read as float (1.0) must round-trip to '1'
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value)


def _check_columns(df: pd.DataFrame, schema, file_path: Path) -> None:
    errors = validate_dataframe(df, schema, required_only=True)
    if errors:
        raise SchemaValidationError(
            f"Schema validation failed for '{file_path.name}':\n"
            + "\n".join(f"  - {e}" for e in errors)
        )


def load_dependencies(data_dir: Path = None) -> dict[str, list[str]]:
    """
    Load dependency edges.

    Args:
        data_dir: Directory containing CSV files (default: Settings.DATA_DIR)

    Returns:
        Dict mapping successor task id to its predecessor ids (file order, deduplicated)
    """
    if data_dir is None:
        data_dir = Settings.DATA_DIR

    file_path = Path(data_dir) / Settings.DEPENDENCIES_FILE
    if not file_path.exists():
        logger.info("No dependency file at %s; assuming no dependencies", file_path)
        return {}

    df = pd.read_csv(file_path)
    _check_columns(df, DependencyRecord, file_path)

    dependency_map: dict[str, list[str]] = {}
    for _, row in df.iterrows():
        pred, succ = _as_id(row['predecessor_id']), _as_id(row['successor_id'])
        if pred is None or succ is None:
            logger.warning("Skipping dependency row with a missing id: %s -> %s", pred, succ)
            continue
        edge = DependencyRecord(predecessor_id=pred, successor_id=succ)
        preds = dependency_map.setdefault(edge.successor_id, [])
        if edge.predecessor_id not in preds:
            preds.append(edge.predecessor_id)

    return dependency_map


def load_task_records(data_dir: Path = None) -> list[TaskRecord]:
    """
    Load and validate task rows, attaching their dependencies.

    Raises:
        FileNotFoundError: If the tasks file is missing
        SchemaValidationError: If required columns are missing or mistyped
        pydantic.ValidationError: If a row violates the task schema
    """
    if data_dir is None:
        data_dir = Settings.DATA_DIR

    file_path = Path(data_dir) / Settings.TASKS_FILE
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")

    df = pd.read_csv(file_path)
    _check_columns(df, TaskRecord, file_path)
    dependency_map = load_dependencies(data_dir)

    records = []
    for _, row in df.iterrows():
        task_id = _as_id(row['id'])
        start_date = _clean(row.get('start_date'))
        records.append(TaskRecord(
            id=task_id,
            name=str(_clean(row['name']) or ''),
            start_date=pd.to_datetime(start_date).date() if start_date is not None else None,
            duration=_as_int(row['duration'], 0),
            progress=_as_int(row.get('progress'), 0),
            dependencies=dependency_map.get(task_id, []),
            parent_id=_as_id(row.get('parent_id')),
            is_group=_as_bool(row.get('is_group')),
            is_milestone=_as_bool(row.get('is_milestone')),
            priority=_as_int(row.get('priority'), 3),
            description=_as_text(row.get('description')),
        ))

    return records


def load_task_graph(data_dir: Path = None, verbose: bool = False) -> TaskGraph:
    """
    Load complete task graph.

    Args:
        data_dir: Directory containing tasks.csv and task_dependencies.csv
        verbose: Log network statistics and integrity issues

    Returns:
        TaskGraph built from the exports
    """
    records = load_task_records(data_dir)
    graph = TaskGraph(task_from_record(r) for r in records)

    if verbose:
        logger.info("Loaded %r", graph)
        for issue in graph.validate():
            logger.warning("Integrity issue: %s", issue)

    return graph
