"""
Task and dependency input schemas.

Rows arrive from the persistence collaborator either as dicts (camelCase
keys accepted) or as CSV exports of the ``tasks`` and
``task_dependencies`` tables.

Input Location: {DATA_DIR}/tasks.csv, {DATA_DIR}/task_dependencies.csv
"""

from datetime import date
from typing import Optional
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator


class TaskRecord(BaseModel):
    """
    A single task row as supplied by the persistence layer.

    File: tasks.csv
    """
    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    id: str = Field(
        validation_alias=AliasChoices('id', 'task_id', 'taskId'),
        description="Opaque unique task identifier",
    )
    name: str = Field(description="Display label")
    start_date: Optional[date] = Field(
        default=None,
        validation_alias=AliasChoices('start_date', 'startDate'),
        description="Calendar date the task is scheduled to begin",
    )
    duration: int = Field(ge=0, description="Duration in days (0 for milestones)")
    progress: int = Field(default=0, ge=0, le=100, description="Percent complete")
    dependencies: list[str] = Field(default_factory=list, description="Predecessor task ids")
    parent_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices('parent_id', 'parentId'),
        description="Containing group task id",
    )
    is_group: bool = Field(
        default=False,
        validation_alias=AliasChoices('is_group', 'isGroup'),
        description="Group (summary) task flag",
    )
    is_milestone: bool = Field(
        default=False,
        validation_alias=AliasChoices('is_milestone', 'isMilestone'),
        description="Zero-duration milestone flag",
    )
    priority: int = Field(default=3, ge=1, le=5, description="Display priority 1-5")
    description: Optional[str] = Field(default=None, description="Free-text description")

    @field_validator('id', 'parent_id', mode='before')
    @classmethod
    def _coerce_id(cls, value):
        # Numeric ids from CSV exports are kept as opaque strings
        if value is None or value == '':
            return None
        return str(value)

    @field_validator('dependencies', mode='before')
    @classmethod
    def _coerce_dependencies(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            value = [part for part in value.replace(';', ',').split(',') if part.strip()]
        seen = []
        for dep in value:
            dep = str(dep).strip()
            if dep not in seen:
                seen.append(dep)
        return seen

    @model_validator(mode='after')
    def _check_flags(self):
        if self.is_group and self.is_milestone:
            raise ValueError(f"Task {self.id} cannot be both a group and a milestone")
        if self.id in self.dependencies:
            raise ValueError(f"Task {self.id} cannot depend on itself")
        if self.parent_id is not None and self.parent_id == self.id:
            raise ValueError(f"Task {self.id} cannot be its own parent")
        return self


class DependencyRecord(BaseModel):
    """
    A predecessor -> successor edge.

    File: task_dependencies.csv
    """
    predecessor_id: str = Field(description="Task that must finish first")
    successor_id: str = Field(description="Task that depends on the predecessor")

    @field_validator('predecessor_id', 'successor_id', mode='before')
    @classmethod
    def _coerce_id(cls, value):
        return str(value)
