# File: taskmaster/core/errors.py

"""
Domain errors raised by the services and translated to HTTP by the API layer.

Each error carries the status code it maps to, so the single exception
handler in ``taskmaster.main`` does not need its own lookup table.
"""

from fastapi import status


class TaskMasterError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthorized(TaskMasterError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class Forbidden(TaskMasterError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You are not authorized to access this task"


class NotFound(TaskMasterError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class InvalidArgument(TaskMasterError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid argument"


class InternalError(TaskMasterError):
    pass
