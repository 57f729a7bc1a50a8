# File: taskmaster/db/errors.py

import logging
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from taskmaster.core.errors import InternalError

logger = logging.getLogger(__name__)


@contextmanager
def storage_errors(db: Session, message: str):
    """
    Roll back and re-raise any SQLAlchemy failure as InternalError(message).
    """
    try:
        yield
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("%s: %s", message, exc)
        raise InternalError(message) from exc
