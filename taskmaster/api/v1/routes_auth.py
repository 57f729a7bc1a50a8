# File: taskmaster/api/v1/routes_auth.py

"""
Auth API routes: register, login (cookie session), logout, current user.
"""

from fastapi import APIRouter, Depends, Response, status

from taskmaster.api.deps import get_authenticator, get_current_caller
from taskmaster.core.config import Settings, get_settings
from taskmaster.core.errors import Unauthorized
from taskmaster.schemas.user import AuthResponse, UserCreate, UserLogin, UserRead
from taskmaster.services.access_policy import Caller
from taskmaster.services.auth_service import Authenticator

router = APIRouter()


def set_session_cookie(response: Response, token: str, *, max_age: int, settings: Settings) -> None:
    """
    Attach the access token as an HTTP-only cookie.

    Production deployments serve the client from another origin, so the
    cookie must be Secure + SameSite=None there; locally Lax is enough.
    """
    response.set_cookie(
        key=settings.cookie_name,
        value=token,
        max_age=max_age,
        httponly=True,
        secure=settings.is_production,
        samesite="none" if settings.is_production else "lax",
    )


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
)
def register(
    payload: UserCreate,
    authenticator: Authenticator = Depends(get_authenticator),
):
    user = authenticator.register(
        username=payload.username,
        email=payload.email,
        password=payload.password,
    )
    return {"message": "User registered successfully", "user": UserRead.model_validate(user)}


@router.post("/login", response_model=AuthResponse, summary="User login")
def login(
    payload: UserLogin,
    response: Response,
    authenticator: Authenticator = Depends(get_authenticator),
    settings: Settings = Depends(get_settings),
):
    """
    Check the credentials and set the ``access_token`` session cookie.
    """
    user = authenticator.login(payload.email, payload.password)
    token = authenticator.issue_token(user)
    set_session_cookie(response, token, max_age=authenticator.token_max_age, settings=settings)
    return {"message": "Logged in successfully", "user": UserRead.model_validate(user)}


@router.post("/logout", summary="Clear the session cookie")
def logout(response: Response, settings: Settings = Depends(get_settings)):
    response.delete_cookie(
        key=settings.cookie_name,
        httponly=True,
        secure=settings.is_production,
        samesite="none" if settings.is_production else "lax",
    )
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=UserRead, summary="Current user")
def me(
    caller: Caller = Depends(get_current_caller),
    authenticator: Authenticator = Depends(get_authenticator),
):
    user = authenticator.users.get(caller.id)
    if user is None:
        raise Unauthorized("Invalid access token")
    return user
