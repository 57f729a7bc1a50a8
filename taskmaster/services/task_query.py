# File: taskmaster/services/task_query.py

"""
Turns the raw ``/tasks/filter`` query parameters into a ``TaskFilter``.

Non-admin callers are always restricted to tasks assigned to them, whatever
else is asked for.
"""

import re
from datetime import date, datetime
from typing import Optional

from taskmaster.core.errors import InvalidArgument
from taskmaster.db.task_repository import TaskFilter
from taskmaster.models.task import TaskPriority, TaskStatus
from taskmaster.services.access_policy import Caller

VALID_STATUSES = tuple(s.value for s in TaskStatus)
VALID_PRIORITIES = tuple(p.value for p in TaskPriority)

_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_TIMESTAMP_RE = re.compile(
    r"[0-9]{4}-[0-9]{2}-[0-9]{2}T[0-9]{2}:[0-9]{2}"
    r"(?::[0-9]{2}(?:\.[0-9]{3}|\.[0-9]{6})?)?"
    r"(?:Z|[+-][0-9]{2}:[0-9]{2})?"
)


def validate_status(status: str) -> TaskStatus:
    try:
        return TaskStatus(status)
    except ValueError:
        raise InvalidArgument(
            f"Invalid status value: {status} (expected one of {', '.join(VALID_STATUSES)})"
        ) from None


def validate_priority(priority: str) -> TaskPriority:
    try:
        return TaskPriority(priority)
    except ValueError:
        raise InvalidArgument(
            f"Invalid priority value: {priority} (expected one of {', '.join(VALID_PRIORITIES)})"
        ) from None


def _parse_date(raw: str) -> Optional[date]:
    """
    Parse an extended-format ISO date, or an ISO timestamp truncated to its
    calendar day. Anything else (basic format, week dates, ...) is None.
    """
    raw = raw.strip()
    try:
        if _DATE_RE.fullmatch(raw):
            return date.fromisoformat(raw)
        if _TIMESTAMP_RE.fullmatch(raw):
            return datetime.fromisoformat(raw.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    return None


def parse_due_date(due_date: str) -> tuple[date, date]:
    """
    Parse ``YYYY-MM-DD`` or ``YYYY-MM-DD,YYYY-MM-DD`` into an inclusive
    ``(start, end)`` pair. A single date gives ``start == end``.
    """
    parts = due_date.split(",")
    if len(parts) == 2:
        start, end = _parse_date(parts[0]), _parse_date(parts[1])
        if start is None or end is None:
            raise InvalidArgument(f"Invalid date range: {due_date}")
        if start > end:
            raise InvalidArgument(f"Invalid date range: {due_date} (start is after end)")
        return start, end

    if len(parts) > 2:
        raise InvalidArgument(f"Invalid date range: {due_date}")

    day = _parse_date(due_date)
    if day is None:
        raise InvalidArgument(f"Invalid date: {due_date}")
    return day, day


def build_query(
    status: Optional[str],
    priority: Optional[str],
    due_date: Optional[str],
    caller: Caller,
) -> TaskFilter:
    conditions = {}

    if not caller.is_admin:
        conditions["assignee_id"] = caller.id

    if status:
        conditions["status"] = validate_status(status)

    if priority:
        conditions["priority"] = validate_priority(priority)

    if due_date:
        conditions["due_from"], conditions["due_to"] = parse_due_date(due_date)

    return TaskFilter(**conditions)
