"""
Schema validation utilities for scheduling CSV files.

Checks that task exports read from the persistence layer, and critical
path tables handed to reporting, carry the columns and types the engine
expects.

Validation Rules:
  - Missing required columns are errors
  - Column types must be compatible with the schema (CSV inference is lenient)
  - Extra columns are allowed unless strict
"""

from pathlib import Path
from typing import Type, List, Optional, Dict, Tuple
import pandas as pd
from pydantic import BaseModel


class SchemaValidationError(Exception):
    """Raised when schema validation fails."""

    def __init__(
        self,
        message: str,
        missing_columns: Optional[List[str]] = None,
        type_mismatches: Optional[Dict[str, Tuple[str, str]]] = None,
        extra_columns: Optional[List[str]] = None,
    ):
        super().__init__(message)
        self.missing_columns = missing_columns or []
        self.type_mismatches = type_mismatches or {}
        self.extra_columns = extra_columns or []


def pandas_dtype_to_python_type(dtype) -> str:
    """Convert pandas dtype to a simplified type string."""
    dtype_str = str(dtype)

    if dtype_str.startswith('int'):
        return 'int'
    elif dtype_str.startswith('float'):
        return 'float'
    elif dtype_str in ('object', 'string'):
        return 'str'
    elif dtype_str.startswith('datetime'):
        return 'datetime'
    elif dtype_str == 'bool':
        return 'bool'
    else:
        return dtype_str


def pydantic_type_to_string(field_type) -> str:
    """Convert Pydantic field type to a simplified type string."""
    type_str = str(field_type).lower()

    if 'list' in type_str:
        return 'list'
    if 'datetime.date' in type_str and 'datetime.datetime' not in type_str:
        return 'date'
    if 'datetime' in type_str:
        return 'datetime'
    if 'bool' in type_str:
        return 'bool'
    if 'int' in type_str:
        return 'int'
    if 'float' in type_str:
        return 'float'
    if 'str' in type_str:
        return 'str'

    return type_str


def types_compatible(pandas_type: str, pydantic_type: str) -> bool:
    """
    Check if pandas type is compatible with pydantic type.

    Handles the fact that pandas uses float64 for nullable integers and
    for columns that are entirely empty, and reads dates and booleans
    with missing values as plain text.
    """
    # Exact match
    if pandas_type == pydantic_type:
        return True

    # float in pandas can represent nullable int, or an all-NaN column of any type
    if pandas_type == 'float' and pydantic_type in ('int', 'str', 'bool', 'date'):
        return True

    # Any numeric to numeric is generally ok
    if pandas_type in ('int', 'float') and pydantic_type in ('int', 'float'):
        return True

    # Numeric ids are coerced to opaque strings
    if pandas_type == 'int' and pydantic_type == 'str':
        return True

    # Text columns carrying dates or booleans (e.g. 'true'/'false' with blanks)
    if pandas_type == 'str' and pydantic_type in ('date', 'datetime', 'bool'):
        return True

    if pandas_type == 'datetime' and pydantic_type == 'date':
        return True

    return False


def get_column_name(field_name: str, field_info) -> str:
    """
    Get the CSV column name for a field, handling aliases.

    Pydantic fields can have an alias that represents the actual column name
    in the data.
    """
    if hasattr(field_info, 'alias') and field_info.alias:
        return field_info.alias
    return field_name


def validate_dataframe(
    df: pd.DataFrame,
    schema: Type[BaseModel],
    strict: bool = False,
    required_only: bool = False,
) -> List[str]:
    """
    Validate a DataFrame against a Pydantic schema.

    Args:
        df: DataFrame to validate
        schema: Pydantic model class defining expected columns
        strict: If True, fail on extra columns not in schema
        required_only: If True, only fields without defaults must be present;
                       optional fields are type-checked when present

    Returns:
        List of validation error messages (empty if valid)

    Note:
        This validates SCHEMA (columns and types), not individual row values.
        Row values are validated when records are built from the rows.
    """
    errors = []

    schema_fields = {
        name: info for name, info in schema.model_fields.items()
        if pydantic_type_to_string(info.annotation) != 'list'
    }
    # Map field name -> column name (alias or field name)
    field_to_column = {
        name: get_column_name(name, info)
        for name, info in schema_fields.items()
    }
    expected_columns = set(field_to_column.values())
    required_columns = {
        field_to_column[name] for name, info in schema_fields.items()
        if info.is_required() or not required_only
    }
    actual_columns = set(df.columns)

    missing = required_columns - actual_columns
    if missing:
        errors.append(f"Missing required columns: {sorted(missing)}")

    # Check for extra columns (warning only, unless strict)
    extra = actual_columns - expected_columns
    if extra and strict:
        errors.append(f"Unexpected columns (strict mode): {sorted(extra)}")

    # Check column types for columns that exist in both
    common_columns = expected_columns & actual_columns
    type_mismatches = {}

    # Reverse map: column name -> field name for type lookup
    column_to_field = {v: k for k, v in field_to_column.items()}

    for col in common_columns:
        pandas_type = pandas_dtype_to_python_type(df[col].dtype)
        field_info = schema_fields[column_to_field[col]]
        pydantic_type = pydantic_type_to_string(field_info.annotation)

        if not types_compatible(pandas_type, pydantic_type):
            type_mismatches[col] = (pandas_type, pydantic_type)

    if type_mismatches:
        mismatch_strs = [
            f"{col}: got {got}, expected {expected}"
            for col, (got, expected) in sorted(type_mismatches.items())
        ]
        errors.append(f"Type mismatches: {'; '.join(mismatch_strs)}")

    return errors


def validate_csv_file(
    file_path: Path,
    schema: Type[BaseModel],
    strict: bool = False,
    required_only: bool = False,
    sample_rows: int = 100,
) -> List[str]:
    """
    Validate a CSV file against a schema.

    Args:
        file_path: Path to CSV file
        schema: Pydantic model class defining expected schema
        strict: If True, fail on extra columns
        required_only: If True, only demand columns without defaults
        sample_rows: Number of rows to read for type inference

    Returns:
        List of validation error messages (empty if valid)

    Raises:
        FileNotFoundError: If file doesn't exist
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")

    # Read sample for type inference
    df = pd.read_csv(file_path, nrows=sample_rows)

    return validate_dataframe(df, schema, strict=strict, required_only=required_only)


def validated_df_to_csv(
    df: pd.DataFrame,
    file_path: Path,
    strict: bool = False,
    **to_csv_kwargs,
) -> None:
    """
    Validate a DataFrame against its registered schema and write to CSV.

    Args:
        df: DataFrame to write
        file_path: Output path (filename determines schema via registry)
        strict: If True, fail on extra columns not in schema
        **to_csv_kwargs: Additional arguments passed to df.to_csv()

    Raises:
        SchemaValidationError: If validation fails
    """
    from .registry import get_schema_for_file

    file_path = Path(file_path)
    filename = file_path.name

    schema = get_schema_for_file(filename)
    if schema is None:
        # No schema registered - warn but allow write
        import warnings
        warnings.warn(
            f"No schema registered for '{filename}'. "
            f"Consider adding a schema to schemas/registry.py for validation.",
            UserWarning
        )
        df.to_csv(file_path, **to_csv_kwargs)
        return

    errors = validate_dataframe(df, schema, strict=strict)

    if errors:
        error_msg = (
            f"Schema validation failed for '{filename}':\n"
            + "\n".join(f"  - {e}" for e in errors)
        )
        raise SchemaValidationError(error_msg)

    df.to_csv(file_path, **to_csv_kwargs)
