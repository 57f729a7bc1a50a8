# File: taskmaster/api/v1/routes_tasks.py

"""
Task API routes.

Admin routes take ``get_admin_caller`` so non-admins are rejected before
the service runs; the rest are checked per task inside ``TaskService``.

Fixed paths (``/all``, ``/filter``, ...) are declared before ``/{task_id}``
so they are never captured as an id.
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Path, Query, status

from taskmaster.api.deps import get_admin_caller, get_current_caller, get_task_service
from taskmaster.models.base import MAX_ID
from taskmaster.schemas.task import (
    TaskAssign,
    TaskCreate,
    TaskRead,
    TaskStatusUpdate,
    TaskUpdate,
)
from taskmaster.services.access_policy import Caller
from taskmaster.services.task_service import TaskService

router = APIRouter()

TaskId = Annotated[int, Path(ge=1, le=MAX_ID)]


# ---------- ADMIN ----------

@router.get("/all", response_model=list[TaskRead], summary="List every task (admin)")
def list_tasks(
    caller: Caller = Depends(get_admin_caller),
    service: TaskService = Depends(get_task_service),
):
    return service.find_all(caller)


@router.post(
    "/create",
    response_model=TaskRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a task (admin)",
)
def create_task(
    payload: TaskCreate,
    caller: Caller = Depends(get_admin_caller),
    service: TaskService = Depends(get_task_service),
):
    return service.create(caller, payload)


@router.post("/assign", response_model=TaskRead, summary="Replace a task's assignees (admin)")
def assign_task(
    payload: TaskAssign,
    caller: Caller = Depends(get_admin_caller),
    service: TaskService = Depends(get_task_service),
):
    return service.assign(caller, payload.task_id, payload.user_ids)


# ---------- ANY AUTHENTICATED USER ----------

@router.get("/filter", response_model=list[TaskRead], summary="Filter visible tasks")
def filter_tasks(
    status_: Optional[str] = Query(None, alias="status"),
    priority: Optional[str] = Query(None),
    due_date: Optional[str] = Query(None, alias="dueDate"),
    caller: Caller = Depends(get_current_caller),
    service: TaskService = Depends(get_task_service),
):
    """
    Filter tasks by status, priority and due date.

    ``dueDate`` is a single ISO date or an inclusive ``start,end`` range.
    Non-admins only ever see tasks assigned to them.
    """
    return service.find_by_query(
        caller, status=status_, priority=priority, due_date=due_date
    )


@router.put("/update/{task_id}", response_model=TaskRead, summary="Replace a task's fields")
def update_task(
    task_id: TaskId,
    payload: TaskUpdate,
    caller: Caller = Depends(get_current_caller),
    service: TaskService = Depends(get_task_service),
):
    return service.update(caller, task_id, payload)


@router.put("/updateStatus/{task_id}", response_model=TaskRead, summary="Change a task's status")
def update_task_status(
    task_id: TaskId,
    payload: TaskStatusUpdate,
    caller: Caller = Depends(get_current_caller),
    service: TaskService = Depends(get_task_service),
):
    return service.change_status(caller, task_id, payload.status)


@router.delete("/delete/{task_id}", response_model=TaskRead, summary="Delete a task")
def delete_task(
    task_id: TaskId,
    caller: Caller = Depends(get_current_caller),
    service: TaskService = Depends(get_task_service),
):
    return service.delete(caller, task_id)


@router.get("/{task_id}", response_model=TaskRead, summary="Get one task")
def get_task(
    task_id: TaskId,
    caller: Caller = Depends(get_current_caller),
    service: TaskService = Depends(get_task_service),
):
    return service.find_by_id(caller, task_id)


@router.delete("/{task_id}", response_model=TaskRead, summary="Delete a task (admin)")
def admin_delete_task(
    task_id: TaskId,
    caller: Caller = Depends(get_admin_caller),
    service: TaskService = Depends(get_task_service),
):
    return service.admin_delete(caller, task_id)
