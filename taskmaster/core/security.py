# File: taskmaster/core/security.py

"""
Security helpers for the Task Master API.

Password hashing uses bcrypt; session tokens are JWTs signed with
python-jose. Nothing here reads settings: the signing key, algorithm and
lifetime are passed in by the caller (see ``services.auth_service``).
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt

# bcrypt only looks at the first 72 bytes and newer releases refuse longer input
MAX_PASSWORD_BYTES = 72


class TokenError(Exception):
    """Raised when a token cannot be decoded or validated."""


class TokenExpired(TokenError):
    pass


def hash_password(password: str) -> str:
    """Return a salted bcrypt hash of ``password``."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    """Constant-time check of ``password`` against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # malformed stored hash or over-long password
        return False


def create_access_token(
    data: dict,
    *,
    secret_key: str,
    algorithm: str,
    expires_delta: timedelta,
    now: Optional[datetime] = None,
) -> str:
    """
    Sign ``data`` into a JWT that expires ``expires_delta`` from ``now``.
    """
    issued_at = now or datetime.now(timezone.utc)
    to_encode: dict[str, Any] = data.copy()
    to_encode["iat"] = issued_at
    to_encode["exp"] = issued_at + expires_delta
    return jwt.encode(to_encode, secret_key, algorithm=algorithm)


def decode_access_token(token: str, *, secret_key: str, algorithm: str) -> dict[str, Any]:
    """
    Decode a JWT, validating signature and expiry.

    Raises TokenExpired for an expired token and TokenError for anything
    else that fails validation.
    """
    try:
        return jwt.decode(token, secret_key, algorithms=[algorithm])
    except ExpiredSignatureError as exc:
        raise TokenExpired("Access token has expired") from exc
    except JWTError as exc:
        raise TokenError("Invalid access token") from exc
