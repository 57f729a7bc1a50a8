# File: taskmaster/api/deps.py

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from taskmaster.core.config import Settings, get_settings
from taskmaster.core.errors import Unauthorized
from taskmaster.db.session import get_db
from taskmaster.db.task_repository import TaskRepository
from taskmaster.db.user_repository import UserRepository
from taskmaster.models.user import UserRole
from taskmaster.services.access_policy import Caller, require_role
from taskmaster.services.auth_service import Authenticator
from taskmaster.services.task_service import TaskService

bearer_scheme = HTTPBearer(auto_error=False)


def get_authenticator(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> Authenticator:
    return Authenticator(
        UserRepository(db),
        secret_key=settings.secret_key,
        algorithm=settings.algorithm,
        expire_minutes=settings.access_token_expire_minutes,
    )


def get_task_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> TaskService:
    return TaskService(
        TaskRepository(db),
        UserRepository(db),
        allow_assignee_delete=settings.allow_assignee_delete,
    )


def get_current_caller(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    authenticator: Authenticator = Depends(get_authenticator),
    settings: Settings = Depends(get_settings),
) -> Caller:
    """
    Resolve the caller from the session cookie, falling back to an
    ``Authorization: Bearer`` header when the cookie is missing or no
    longer verifies.
    """
    bearer = credentials.credentials if credentials is not None else None
    cookie = request.cookies.get(settings.cookie_name)
    if cookie:
        try:
            return authenticator.verify_token(cookie)
        except Unauthorized:
            if not bearer:
                raise
    return authenticator.verify_token(bearer)


def get_admin_caller(caller: Caller = Depends(get_current_caller)) -> Caller:
    """Caller dependency for admin-only routes; rejects everyone else up front."""
    require_role(caller.role, UserRole.ADMIN)
    return caller
