# File: taskmaster/services/task_service.py

"""
Task service.

Every public method takes the ``Caller`` and runs the access policy before
touching the repository: admin-only operations go through ``require_role``,
per-task operations through ``check_task_permission``.

Status changes are permissive: anyone allowed to act on a task may move it
to any valid status, and setting the current status again is a no-op.
"""

import logging
from collections.abc import Iterable
from typing import Optional

from taskmaster.core.errors import Forbidden, NotFound
from taskmaster.db.task_repository import TaskRepository
from taskmaster.db.user_repository import UserRepository
from taskmaster.models.base import MAX_ID
from taskmaster.models.task import Task, TaskStatus
from taskmaster.models.user import User, UserRole
from taskmaster.schemas.task import TaskCreate, TaskRead, TaskUpdate
from taskmaster.services.access_policy import Caller, check_task_permission, require_role
from taskmaster.services.task_query import build_query

logger = logging.getLogger(__name__)


class TaskService:
    def __init__(
        self,
        tasks: TaskRepository,
        users: UserRepository,
        *,
        allow_assignee_delete: bool = True,
    ) -> None:
        self.tasks = tasks
        self.users = users
        self.allow_assignee_delete = allow_assignee_delete

    # ---- helpers ----

    def _get_task(self, task_id: int) -> Task:
        # ids outside the key range cannot exist and would overflow the driver
        task = self.tasks.get(task_id) if 1 <= task_id <= MAX_ID else None
        if task is None:
            raise NotFound(f"Task with ID {task_id} not found")
        return task

    def _resolve_users(self, user_ids: Iterable[int]) -> list[User]:
        wanted = set(user_ids)
        found = self.users.get_many(i for i in wanted if 1 <= i <= MAX_ID)
        missing = wanted - {u.id for u in found}
        if missing:
            raise NotFound(
                "Users not found: " + ", ".join(str(i) for i in sorted(missing))
            )
        return found

    # ---- admin-only ----

    def find_all(self, caller: Caller) -> list[Task]:
        require_role(caller.role, UserRole.ADMIN)
        return self.tasks.list_all()

    def create(self, caller: Caller, data: TaskCreate) -> Task:
        require_role(caller.role, UserRole.ADMIN)
        assignees = self._resolve_users(data.assigned_to)
        task = Task(
            title=data.title,
            description=data.description,
            status=data.status,
            priority=data.priority,
            due_date=data.due_date,
        )
        task = self.tasks.add(task, assignees)
        logger.info("Task %s created by user %s", task.id, caller.id)
        return task

    def assign(self, caller: Caller, task_id: int, user_ids: Iterable[int]) -> Task:
        """Replace the task's assignees with exactly ``user_ids``."""
        require_role(caller.role, UserRole.ADMIN)
        task = self._get_task(task_id)
        task.assignees = self._resolve_users(user_ids)
        task = self.tasks.save(task)
        logger.info("Task %s assigned to %s by user %s", task.id, task.assigned_to, caller.id)
        return task

    def admin_delete(self, caller: Caller, task_id: int) -> TaskRead:
        require_role(caller.role, UserRole.ADMIN)
        return self._delete(caller, self._get_task(task_id))

    # ---- per-task, policy gated ----

    def find_by_id(self, caller: Caller, task_id: int) -> Task:
        task = self._get_task(task_id)
        check_task_permission(caller, task)
        return task

    def find_by_query(
        self,
        caller: Caller,
        *,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        due_date: Optional[str] = None,
    ) -> list[Task]:
        task_filter = build_query(status, priority, due_date, caller)
        return self.tasks.find(task_filter)

    def update(self, caller: Caller, task_id: int, data: TaskUpdate) -> Task:
        task = self._get_task(task_id)
        check_task_permission(caller, task)

        task.title = data.title
        task.description = data.description
        task.status = data.status
        task.priority = data.priority
        task.due_date = data.due_date
        return self.tasks.save(task)

    def change_status(self, caller: Caller, task_id: int, status: TaskStatus) -> Task:
        task = self._get_task(task_id)
        check_task_permission(caller, task)

        if task.status == status:
            return task
        task.status = status
        return self.tasks.save(task)

    def delete(self, caller: Caller, task_id: int) -> TaskRead:
        task = self._get_task(task_id)
        check_task_permission(caller, task)
        if not caller.is_admin and not self.allow_assignee_delete:
            raise Forbidden("Only admins can delete tasks")
        return self._delete(caller, task)

    def _delete(self, caller: Caller, task: Task) -> TaskRead:
        # snapshot before the row and its assignee links are gone
        deleted = TaskRead.model_validate(task)
        self.tasks.delete(task)
        logger.info("Task %s deleted by user %s", deleted.id, caller.id)
        return deleted
