"""Commit helpers that turn unique-index violations into typed conflicts."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from cms.exceptions import ConflictError

logger = logging.getLogger(__name__)


def commit_or_conflict(db: Session, message: str) -> None:
    """Commit the session; a duplicate-key rejection becomes a ConflictError."""
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.info(f"Unique constraint rejected write: {e.orig}")
        raise ConflictError(message) from None
