# File: taskmaster/db/task_repository.py

"""
Task persistence: lookup by id, full scan and filtered query.

Filtered queries take a ``TaskFilter``; building one from raw request
parameters (and scoping it to the caller) is the job of
``taskmaster.services.task_query``.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from taskmaster.db.errors import storage_errors
from taskmaster.models.task import Task, TaskPriority, TaskStatus, task_assignees
from taskmaster.models.user import User


@dataclass(frozen=True)
class TaskFilter:
    """
    Conditions for a filtered task query. ``None`` means "no condition".

    ``due_from``/``due_to`` are inclusive; an exact-day match sets both to
    the same date.
    """
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    due_from: Optional[date] = None
    due_to: Optional[date] = None
    assignee_id: Optional[int] = None


class TaskRepository:
    def __init__(self, db: Session) -> None:
        self.db = db

    def get(self, task_id: int) -> Optional[Task]:
        with storage_errors(self.db, "Failed to retrieve the task"):
            return self.db.get(Task, task_id)

    def list_all(self) -> list[Task]:
        with storage_errors(self.db, "Failed to retrieve tasks"):
            return list(self.db.scalars(select(Task).order_by(Task.id)))

    def find(self, task_filter: TaskFilter) -> list[Task]:
        stmt = select(Task)
        if task_filter.assignee_id is not None:
            stmt = stmt.where(
                Task.id.in_(
                    select(task_assignees.c.task_id).where(
                        task_assignees.c.user_id == task_filter.assignee_id
                    )
                )
            )
        if task_filter.status is not None:
            stmt = stmt.where(Task.status == task_filter.status)
        if task_filter.priority is not None:
            stmt = stmt.where(Task.priority == task_filter.priority)
        if task_filter.due_from is not None:
            stmt = stmt.where(Task.due_date >= task_filter.due_from)
        if task_filter.due_to is not None:
            stmt = stmt.where(Task.due_date <= task_filter.due_to)

        with storage_errors(self.db, "Failed to query tasks"):
            return list(self.db.scalars(stmt.order_by(Task.id)))

    def add(self, task: Task, assignees: Sequence[User] = ()) -> Task:
        task.assignees = list(assignees)
        with storage_errors(self.db, "Error creating task"):
            self.db.add(task)
            self.db.commit()
            self.db.refresh(task)
        return task

    def save(self, task: Task) -> Task:
        with storage_errors(self.db, "Failed to update task"):
            self.db.add(task)
            self.db.commit()
            self.db.refresh(task)
        return task

    def delete(self, task: Task) -> None:
        with storage_errors(self.db, "Failed to delete task"):
            self.db.delete(task)
            self.db.commit()
