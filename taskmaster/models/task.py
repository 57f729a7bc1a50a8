# File: taskmaster/models/task.py

"""
Task model.

``assignees`` is a many-to-many link to users through ``task_assignees``;
the composite primary key makes the assignment a set, so assigning the
same user twice collapses to one row.
"""

import enum
from datetime import date

from sqlalchemy import Column, Date, Enum, ForeignKey, Integer, String, Table, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from taskmaster.models.base import Base, TimestampMixin
from taskmaster.models.user import User


class TaskStatus(str, enum.Enum):
    NOT_STARTED = "not-started"
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    ON_HOLD = "on-hold"
    CANCELLED = "cancelled"


class TaskPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def _enum_values(members):
    return [m.value for m in members]


task_assignees = Table(
    "task_assignees",
    Base.metadata,
    Column("task_id", Integer, ForeignKey("tasks.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)


class Task(TimestampMixin, Base):
    __tablename__ = "tasks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[TaskStatus] = mapped_column(
        Enum(TaskStatus, values_callable=_enum_values, native_enum=False, length=20),
        nullable=False,
        default=TaskStatus.NOT_STARTED,
        index=True,
    )
    priority: Mapped[TaskPriority] = mapped_column(
        Enum(TaskPriority, values_callable=_enum_values, native_enum=False, length=10),
        nullable=False,
        default=TaskPriority.MEDIUM,
        index=True,
    )
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True, index=True)

    assignees: Mapped[list[User]] = relationship(
        secondary=task_assignees,
        lazy="selectin",
        order_by=User.id,
    )

    @property
    def assigned_to(self) -> list[int]:
        return [u.id for u in self.assignees]

    def __repr__(self):
        return f"<Task(id={self.id}, title='{self.title}', status='{self.status.value}')>"
