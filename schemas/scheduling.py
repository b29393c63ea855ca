"""
Critical path output schemas.

Output Location: {DATA_DIR}/output/
"""

from typing import Optional
from pydantic import BaseModel, Field


class ScheduledTaskRow(BaseModel):
    """
    One schedulable task with its computed timing.

    File: critical_path.csv
    """
    task_id: str = Field(description="Task identifier")
    name: str = Field(description="Task display label")
    duration: int = Field(description="Duration in days")
    early_start: int = Field(description="Earliest start (day offset from project start)")
    early_finish: int = Field(description="Earliest finish (day offset)")
    late_start: int = Field(description="Latest start without delaying the project")
    late_finish: int = Field(description="Latest finish without delaying the project")
    total_float: int = Field(description="Late start minus early start, in days")
    free_float: int = Field(description="Slack before any successor is delayed, in days")
    is_critical: bool = Field(description="True when total float is zero")
    parent_id: Optional[str] = Field(default=None, description="Containing group task id")


class ScheduleEdgeRow(BaseModel):
    """
    A dependency edge of the critical path diagram.

    File: critical_path_edges.csv
    """
    source_id: str = Field(description="Predecessor task id")
    target_id: str = Field(description="Successor task id")
    is_critical: bool = Field(description="True when both endpoints are critical")
