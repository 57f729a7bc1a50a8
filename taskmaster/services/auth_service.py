# File: taskmaster/services/auth_service.py

"""
Authentication service.

Handles registration, credential checks and session tokens. The signing
key, algorithm and token lifetime come in through the constructor so the
service never reads global settings on its own.
"""

import logging
from datetime import timedelta
from typing import Optional

from taskmaster.core.errors import InvalidArgument, Unauthorized
from taskmaster.core.security import (
    MAX_PASSWORD_BYTES,
    TokenError,
    TokenExpired,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from taskmaster.db.user_repository import UserRepository
from taskmaster.models.user import User, UserRole
from taskmaster.services.access_policy import Caller

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
MAX_USERNAME_LENGTH = 50


class Authenticator:
    def __init__(
        self,
        users: UserRepository,
        *,
        secret_key: str,
        algorithm: str = "HS256",
        expire_minutes: int = 60,
    ) -> None:
        self.users = users
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expires_delta = timedelta(minutes=expire_minutes)

    def register(self, *, username: str, email: str, password: str) -> User:
        """
        Create a regular user account.

        Raises InvalidArgument for an empty/over-long username, a password
        outside bcrypt's usable range, or an email that is already taken.
        """
        username = username.strip()
        if not username or len(username) > MAX_USERNAME_LENGTH:
            raise InvalidArgument(
                f"Username must be between 1 and {MAX_USERNAME_LENGTH} characters"
            )
        if len(password) < MIN_PASSWORD_LENGTH:
            raise InvalidArgument(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise InvalidArgument(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
        if self.users.get_by_email(email) is not None:
            raise InvalidArgument("Error registering user: email already registered")

        user = self.users.add(
            username=username,
            email=email,
            hashed_password=hash_password(password),
            role=UserRole.USER,
        )
        logger.info("Registered user id=%s email=%s", user.id, user.email)
        return user

    def login(self, email: str, password: str) -> User:
        user = self.users.get_by_email(email)
        if user is None:
            logger.info("Login failed: no user with email %s", email)
            raise Unauthorized("Invalid credentials")
        if not verify_password(password, user.hashed_password):
            logger.info("Login failed: wrong password for %s", email)
            raise Unauthorized("Invalid credentials")
        return user

    def issue_token(self, user: User) -> str:
        claims = {"sub": str(user.id), "email": user.email, "role": user.role.value}
        return create_access_token(
            claims,
            secret_key=self.secret_key,
            algorithm=self.algorithm,
            expires_delta=self.expires_delta,
        )

    def verify_token(self, token: Optional[str]) -> Caller:
        if not token:
            raise Unauthorized("No access token provided")
        try:
            claims = decode_access_token(
                token, secret_key=self.secret_key, algorithm=self.algorithm
            )
        except TokenExpired as exc:
            raise Unauthorized("Access token has expired") from exc
        except TokenError as exc:
            raise Unauthorized("Invalid access token") from exc

        try:
            return Caller(
                id=int(claims["sub"]),
                email=claims["email"],
                role=UserRole(claims["role"]),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise Unauthorized("Invalid access token") from exc

    @property
    def token_max_age(self) -> int:
        return int(self.expires_delta.total_seconds())
