# File: taskmaster/db/user_repository.py

"""
Credential store: persistence for User rows.
"""

from collections.abc import Iterable
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from taskmaster.core.errors import InvalidArgument
from taskmaster.db.errors import storage_errors
from taskmaster.models.user import User, UserRole


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserRepository:
    def __init__(self, db: Session) -> None:
        self.db = db

    def get(self, user_id: int) -> Optional[User]:
        with storage_errors(self.db, "Failed to retrieve the user"):
            return self.db.get(User, user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        with storage_errors(self.db, "Failed to retrieve the user"):
            stmt = select(User).where(User.email == normalize_email(email))
            return self.db.scalars(stmt).first()

    def get_many(self, user_ids: Iterable[int]) -> list[User]:
        ids = set(user_ids)
        if not ids:
            return []
        with storage_errors(self.db, "Failed to retrieve users"):
            stmt = select(User).where(User.id.in_(ids)).order_by(User.id)
            return list(self.db.scalars(stmt))

    def add(
        self,
        *,
        username: str,
        email: str,
        hashed_password: str,
        role: UserRole = UserRole.USER,
    ) -> User:
        user = User(
            username=username,
            email=normalize_email(email),
            hashed_password=hashed_password,
            role=role,
        )
        with storage_errors(self.db, "Error creating user"):
            self.db.add(user)
            try:
                self.db.commit()
            except IntegrityError as exc:
                # a concurrent registration won the unique email index
                self.db.rollback()
                raise InvalidArgument(
                    "Error registering user: email already registered"
                ) from exc
            self.db.refresh(user)
        return user
