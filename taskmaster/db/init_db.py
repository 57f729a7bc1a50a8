"""
Database initialization helpers.

Models are imported so their tables get registered on Base.metadata.
"""

import logging

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from taskmaster.core.config import Settings
from taskmaster.core.security import hash_password
from taskmaster.db.session import engine as default_engine
from taskmaster.db.user_repository import UserRepository
from taskmaster.models.base import Base
from taskmaster.models import task, user  # noqa: F401
from taskmaster.models.user import UserRole

logger = logging.getLogger(__name__)


def init_db(engine: Engine | None = None) -> None:
    """
    Create all tables based on SQLAlchemy models.
    """
    Base.metadata.create_all(bind=engine or default_engine)


def seed_initial_data(db: Session, settings: Settings) -> None:
    """
    Create the bootstrap admin account when ADMIN_EMAIL / ADMIN_PASSWORD
    are configured and no user with that email exists yet.
    """
    if not (settings.admin_email and settings.admin_password):
        return

    users = UserRepository(db)
    if users.get_by_email(settings.admin_email) is not None:
        return

    users.add(
        username=settings.admin_username,
        email=settings.admin_email,
        hashed_password=hash_password(settings.admin_password),
        role=UserRole.ADMIN,
    )
    logger.info("Seeded admin account %s", settings.admin_email)
