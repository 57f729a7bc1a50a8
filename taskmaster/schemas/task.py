# File: taskmaster/schemas/task.py

"""
Task request/response bodies.

Fields are exposed in camelCase (``dueDate``, ``assignedTo``) for the web
client; snake_case names are accepted on input as well.
"""

from datetime import date, datetime
from typing import Annotated, List, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from taskmaster.models.base import MAX_ID
from taskmaster.models.task import TaskPriority, TaskStatus

RecordId = Annotated[int, Field(ge=1, le=MAX_ID)]


class CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class TaskBase(CamelModel):
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.NOT_STARTED
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: Optional[date] = None


class TaskCreate(TaskBase):
    assigned_to: List[RecordId] = []


class TaskUpdate(TaskBase):
    """Full replacement of a task's editable fields (not its assignees)."""
    pass


class TaskStatusUpdate(CamelModel):
    status: TaskStatus


class TaskAssign(CamelModel):
    task_id: RecordId
    user_ids: List[RecordId]


class TaskRead(TaskBase):
    id: int
    assigned_to: List[int] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
