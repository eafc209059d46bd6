"""Transaction boundary shared by the service layer."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from rjilat.core.errors import RjilatError, StorageError

logger = logging.getLogger(__name__)


@contextmanager
def transaction(db: Session, operation: str) -> Iterator[Session]:
    """Commit the work done inside the block, or roll all of it back.

    Domain errors propagate unchanged after the rollback. Database errors
    are logged and re-raised as `StorageError`.
    """
    try:
        yield db
        db.commit()
    except RjilatError:
        db.rollback()
        raise
    except SQLAlchemyError as err:
        db.rollback()
        logger.error("Storage failure during %s: %s", operation, err)
        raise StorageError(f"Storage failure during {operation}") from err
