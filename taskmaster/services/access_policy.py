# File: taskmaster/services/access_policy.py

"""
Access policy for tasks.

Two checks cover every route:

  - ``require_role``: capability check for admin-only operations
    (list all, create, assign, admin delete), run before the service acts.
  - ``check_task_permission``: the own-or-admin rule for a single task,
    run for read, update, status change and delete.

Every new per-task operation must go through ``check_task_permission``
before touching the task.
"""

from dataclasses import dataclass

from taskmaster.core.errors import Forbidden
from taskmaster.models.task import Task
from taskmaster.models.user import UserRole


@dataclass(frozen=True)
class Caller:
    """Identity of the authenticated user making a request."""
    id: int
    email: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


def require_role(caller_role: UserRole, required_role: UserRole) -> None:
    """
    Raise Forbidden unless ``caller_role`` grants ``required_role``.

    Admin implies every role; otherwise the roles must match.
    """
    if caller_role == UserRole.ADMIN or caller_role == required_role:
        return
    raise Forbidden(f"This action requires the '{required_role.value}' role")


def can_access(caller: Caller, task: Task) -> bool:
    return caller.is_admin or caller.id in task.assigned_to


def check_task_permission(caller: Caller, task: Task) -> None:
    if not can_access(caller, task):
        raise Forbidden("You are not authorized to access this task")
